"""Admin-only endpoints: session browsing, usage analytics and AI maintenance. Every route requires the admin JWT."""
from flask import Blueprint, request, jsonify, current_app, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from . import analytics, quiz_logic
from .errors import GenerationFailure
from .models import utcnow
from .routes import get_generation_client, page_limit

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')
analytics_bp = Blueprint('analytics', __name__, url_prefix='/analytics')
ai_bp = Blueprint('ai', __name__, url_prefix='/ai')


@admin_bp.before_request
@analytics_bp.before_request
@ai_bp.before_request
def require_admin():
    try:
        verify_jwt_in_request()
        g.admin = get_jwt_identity()
    except (JWTExtendedException, PyJWTError) as e:
        current_app.logger.info("Rejected admin request to %s: %s", request.path, e)
        return jsonify({'success': False, 'message': 'Authentication required'}), 401


@admin_bp.route('/dashboard')
def dashboard():
    return jsonify({'success': True, 'data': analytics.dashboard()})


@admin_bp.route('/quiz-responses')
def quiz_responses():
    """Paginated session listing; filters: status, industry, location, startDate, endDate."""
    page = max(request.args.get('page', 1, type=int), 1)
    data = analytics.browse_sessions(request.args, page=page, per_page=page_limit(request.args))
    return jsonify({'success': True, 'data': data})


@admin_bp.route('/quiz-responses/<session_id>')
def quiz_response(session_id):
    return jsonify({'success': True, 'data': analytics.session_detail(session_id)})


@analytics_bp.route('/overview')
def overview():
    return jsonify({'success': True, 'data': analytics.overview()})


@analytics_bp.route('/funnel')
def funnel():
    return jsonify({'success': True, 'data': analytics.funnel(request.args)})


@analytics_bp.route('/demographics')
def demographics():
    return jsonify({'success': True, 'data': analytics.demographics(request.args)})


@analytics_bp.route('/rating-performance')
def rating_performance():
    return jsonify({'success': True, 'data': analytics.rating_performance(request.args)})


@analytics_bp.route('/time-series')
def time_series():
    data = analytics.time_series(
        metric=request.args.get('metric', 'completions'),
        period=request.args.get('period', analytics.DEFAULT_PERIOD),
    )
    return jsonify({'success': True, 'data': data})


@ai_bp.route('/health')
def ai_health():
    """Checks the text-generation API answers a trivial prompt."""
    client = get_generation_client()
    try:
        reply = client.ping()
    except GenerationFailure as e:
        current_app.logger.error("AI health check failed: %s", e)
        return jsonify({'success': False, 'message': 'AI service is unavailable', 'error': e.message}), 503

    return jsonify({
        'success': True,
        'message': 'AI service is healthy',
        'data': {'model': client.model_name, 'response': reply, 'timestamp': utcnow().isoformat()},
    })


@ai_bp.route('/metrics')
def ai_metrics():
    return jsonify({'success': True, 'data': analytics.ai_metrics(request.args)})


@ai_bp.route('/test-generation', methods=['POST'])
def ai_test_generation():
    """Runs one generation phase on sample answers without creating a session."""
    body = request.get_json(silent=True) or {}
    phase = body.get('type', 'step1')
    result = quiz_logic.preview_generation(phase, body.get('sampleData'), get_generation_client())
    current_app.logger.info("%s ran a %s test generation", g.admin, phase)
    return jsonify({
        'success': True,
        'message': f'{phase} generation test completed successfully',
        'data': {'generationType': phase, 'result': result, 'timestamp': utcnow().isoformat()},
    })


@ai_bp.route('/regenerate/<session_id>', methods=['POST'])
def regenerate(session_id):
    """Reruns one generation phase (step1, step2 or final) for a session."""
    phase = (request.get_json(silent=True) or {}).get('type')
    result = quiz_logic.regenerate(session_id, phase, get_generation_client())
    current_app.logger.info("%s regenerated %s results for session %s", g.admin, phase, session_id)
    return jsonify({
        'success': True,
        'message': f'{phase} results regenerated successfully',
        'data': {
            'sessionId': session_id,
            'regenerationType': phase,
            'result': result,
            'timestamp': utcnow().isoformat(),
        },
    })
