from flask import Blueprint, request, jsonify, current_app
from . import quiz_logic, ratings
from .options import all_options, RATING_TYPES
from .errors import ValidationError
from .validation import validate_submission

quiz_bp = Blueprint('quiz', __name__, url_prefix='/quiz')
ratings_bp = Blueprint('ratings', __name__, url_prefix='/ratings')


def get_generation_client():
    """The generation client injected into the application by create_app."""
    return current_app.extensions['generation_client']


def page_limit(args, default=20, maximum=100):
    """The ``limit`` query parameter, clamped to 1..maximum."""
    return max(1, min(args.get('limit', default, type=int), maximum))


def _json_body():
    return request.get_json(silent=True) or {}


def _ok(data, status=200, message=None):
    payload = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return jsonify(payload), status


@quiz_bp.route('/start', methods=['POST'])
def start_quiz():
    """Starts a new quiz session, capturing request metadata."""
    quiz_session = quiz_logic.start_session({
        'user_agent': request.headers.get('User-Agent'),
        'ip_address': request.remote_addr,
        'referrer': request.referrer,
        'utm_source': request.args.get('utmSource'),
        'utm_medium': request.args.get('utmMedium'),
        'utm_campaign': request.args.get('utmCampaign'),
    })
    # Nothing has been answered yet
    return _ok({
        'sessionId': quiz_session.session_id,
        'currentStep': quiz_session.current_step,
        'completionPercentage': 0,
    }, status=201)


@quiz_bp.route('/options')
def quiz_options():
    """Serves the option lists for every enumerated field."""
    return _ok(all_options())


@quiz_bp.route('/session/<session_id>')
def session_status(session_id):
    quiz_session = quiz_logic.get_session(session_id)
    return _ok(quiz_session.status_dict())


def _step_response(quiz_session, phase):
    return {
        'sessionId': quiz_session.session_id,
        'currentStep': quiz_session.current_step,
        'completionPercentage': quiz_session.completion_percentage,
        'aiResults': getattr(quiz_session, f'{phase}_results') or [],
        'generationStatus': getattr(quiz_session, f'{phase}_generation_status'),
    }


@quiz_bp.route('/step1', methods=['POST'])
def submit_step1():
    """Saves personal foundation answers and generates profile summaries."""
    answers = validate_submission('step1', _json_body())
    quiz_session = quiz_logic.submit_step1(answers, get_generation_client())
    return _ok(_step_response(quiz_session, 'step1'))


@quiz_bp.route('/step2', methods=['POST'])
def submit_step2():
    """Saves market research answers and generates positioning strategies."""
    answers = validate_submission('step2', _json_body())
    quiz_session = quiz_logic.submit_step2(answers, get_generation_client())
    return _ok(_step_response(quiz_session, 'step2'))


@quiz_bp.route('/generate-final-results', methods=['POST'])
def generate_final_results():
    session_id = _json_body().get('sessionId')
    if not session_id:
        raise ValidationError([{'field': 'sessionId', 'message': 'Session ID is required'}],
                              message='Session ID is required')

    quiz_session = quiz_logic.generate_final_results(session_id, get_generation_client())
    return _ok({
        'sessionId': quiz_session.session_id,
        'isCompleted': quiz_session.is_completed,
        'completionPercentage': 100,
        'finalResults': quiz_session.final_results,
    })


@quiz_bp.route('/results/<session_id>')
def quiz_results(session_id):
    quiz_session = quiz_logic.get_session(session_id)
    return _ok(quiz_session.results_dict())


@ratings_bp.route('', methods=['POST'])
def submit_rating():
    """Submits a rating, or updates the existing one for the same artifact."""
    submission = validate_submission('rating', _json_body())
    rating, is_update = ratings.submit_rating(submission)
    if is_update:
        return _ok({'ratingId': rating.id, 'isUpdate': True}, message='Rating updated successfully')
    return _ok({'ratingId': rating.id, 'isUpdate': False}, status=201, message='Rating submitted successfully')


@ratings_bp.route('/session/<session_id>')
def session_ratings(session_id):
    return _ok([rating.to_dict() for rating in ratings.ratings_for_session(session_id)])


@ratings_bp.route('/average/<rating_type>')
def average_ratings(rating_type):
    """Average scores for one rating type, optionally filtered by demographics and date range."""
    if rating_type not in RATING_TYPES:
        raise ValidationError([{'field': 'ratingType', 'message': f'Unknown rating type "{rating_type}"'}])
    return _ok(ratings.average_ratings(rating_type, ratings.build_filters(request.args)))


@ratings_bp.route('/analytics')
def rating_analytics():
    group_by = request.args.get('groupBy', 'ratingType')
    result = ratings.rating_analytics(group_by, ratings.build_filters(request.args))
    result['filters'] = {
        name: request.args.get(name)
        for name in ('startDate', 'endDate', 'geographicLocation', 'industryPreference', 'experienceLevel')
    }
    return _ok(result)


@ratings_bp.route('/feedback/recent')
def recent_feedback():
    """Latest ratings that include written feedback."""
    recent = ratings.recent_feedback(
        limit=page_limit(request.args),
        rating_type=request.args.get('ratingType'),
        min_rating=request.args.get('minRating', type=int),
        max_rating=request.args.get('maxRating', type=int),
    )
    return _ok([rating.to_dict() for rating in recent])
