import hmac

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

ADMIN_IDENTITY = "admin"


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchanges the admin password for a JWT, returned in the body and as a cookie."""
    password = (request.get_json(silent=True) or {}).get('password') or request.form.get('password')
    expected = current_app.config.get('AUTH_PASSWORD')
    if not expected or not password or not hmac.compare_digest(password.encode(), expected.encode()):
        current_app.logger.warning("Rejected admin login from %s", request.remote_addr)
        return jsonify({'success': False, 'message': 'Invalid password'}), 401

    access_token = create_access_token(identity=ADMIN_IDENTITY)
    response = jsonify({'success': True, 'data': {'accessToken': access_token}})
    set_access_cookies(response, access_token)
    return response


@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True})
    unset_jwt_cookies(response)
    return response
