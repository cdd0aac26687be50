"""Usage statistics over quiz sessions for the admin area."""
import datetime
from collections import OrderedDict

from sqlalchemy import func, case, desc, or_

from . import db
from .errors import NotFoundError, ValidationError
from .models import QuizSession, Rating, CATEGORY_COLUMNS, utcnow
from .quiz_logic import SUCCEEDED
from .ratings import date_range_filters


def _percentage(part, whole):
    return round(part / whole * 100) if whole else 0


def _rate(part, whole):
    return round(part / whole * 100, 1) if whole else 0


def _round1(value):
    return round(float(value), 1) if value is not None else 0


def _session_filters(args):
    return date_range_filters(QuizSession.started_at, args.get('startDate'), args.get('endDate'))


def _step1_field(name):
    return QuizSession.step1[name].as_string()


def overview():
    """Public-facing headline numbers."""
    total_quizzes = QuizSession.query.count()
    completed_quizzes = QuizSession.query.filter_by(is_completed=True).count()
    total_ratings = Rating.query.count()
    avg_rating = db.session.query(func.avg(Rating.star_rating)).scalar() or 0

    industry = _step1_field('industryPreference')
    top_industries = db.session.query(industry.label('industry'), func.count(QuizSession.id).label('total'))\
        .filter(QuizSession.step1.isnot(None))\
        .group_by(industry)\
        .order_by(desc('total'))\
        .limit(5)\
        .all()

    return {
        'totalQuizzes': total_quizzes,
        'completedQuizzes': completed_quizzes,
        'completionRate': _percentage(completed_quizzes, total_quizzes),
        'totalRatings': total_ratings,
        'avgRating': round(float(avg_rating), 1),
        'topIndustries': [{'industry': row.industry, 'count': row.total} for row in top_industries],
    }


def funnel(args):
    """How many sessions reached each stage, with drop-off between stages."""
    filters = _session_filters(args)
    counts = db.session.query(
        func.count(QuizSession.id),
        func.sum(case((QuizSession.step1.isnot(None), 1), else_=0)),
        func.sum(case((QuizSession.step2.isnot(None), 1), else_=0)),
        func.sum(case((QuizSession.is_completed.is_(True), 1), else_=0)),
    ).filter(*filters).one()
    started, step1_done, step2_done, final_done = (value or 0 for value in counts)

    stages = [
        ('Started', started, 0),
        ('Step 1 Completed', step1_done, started - step1_done),
        ('Step 2 Completed', step2_done, step1_done - step2_done),
        ('Final Results', final_done, step2_done - final_done),
    ]
    return {
        'funnel': [
            {
                'step': name,
                'count': count,
                'percentage': 100 if name == 'Started' else _percentage(count, started),
                'dropOff': drop_off,
            }
            for name, count, drop_off in stages
        ],
        'summary': {
            'totalStarted': started,
            'finalCompleted': final_done,
            'overallConversionRate': _percentage(final_done, started),
        },
    }


def _distribution(field, key, filters, limit=None):
    column = _step1_field(field)
    query = db.session.query(column.label('value'), func.count(QuizSession.id).label('total'))\
        .filter(QuizSession.step1.isnot(None), *filters)\
        .group_by(column)\
        .order_by(desc('total'))
    if limit:
        query = query.limit(limit)
    rows = query.all()
    return [{key: row.value, 'count': row.total} for row in rows]


def demographics(args):
    filters = _session_filters(args)
    return {
        'geographic': _distribution('geographicLocation', 'location', filters),
        'industry': _distribution('industryPreference', 'industry', filters),
        'experience': _distribution('experienceLevel', 'level', filters),
        'marketSize': _distribution('cityMarketSize', 'size', filters),
    }


def ai_metrics(args):
    """Artifact counts and per-phase generation success rates."""
    filters = _session_filters(args)
    sessions = db.session.query(
        QuizSession.step1_results,
        QuizSession.step2_results,
        QuizSession.final_results,
        QuizSession.step1_generation_status,
        QuizSession.step2_generation_status,
        QuizSession.final_generation_status,
    ).filter(*filters).all()

    step1_total = sum(len(row.step1_results or []) for row in sessions)
    step2_total = sum(len(row.step2_results or []) for row in sessions)
    final_total = sum(1 for row in sessions if row.final_results)

    def success_rate(attr):
        attempted = [getattr(row, attr) for row in sessions if getattr(row, attr)]
        return _percentage(sum(1 for status in attempted if status == SUCCEEDED), len(attempted))

    return {
        'generations': {
            'step1': step1_total,
            'step2': step2_total,
            'final': final_total,
            'total': step1_total + step2_total + final_total,
        },
        'successRates': {
            'step1': success_rate('step1_generation_status'),
            'step2': success_rate('step2_generation_status'),
            'final': success_rate('final_generation_status'),
        },
        'sessions': {
            'total': len(sessions),
            'withAI': sum(1 for row in sessions if row.step1_results or row.step2_results or row.final_results),
        },
        'period': {
            'startDate': args.get('startDate') or 'all time',
            'endDate': args.get('endDate') or 'now',
        },
    }


def dashboard(now=None):
    """Headline totals plus weekly and monthly trends and per-step completion."""
    now = now or utcnow()
    week_ago = now - datetime.timedelta(days=7)
    month_ago = now - datetime.timedelta(days=30)

    total_quizzes = QuizSession.query.count()
    completed_quizzes = QuizSession.query.filter_by(is_completed=True).count()
    weekly_quizzes = QuizSession.query.filter(QuizSession.started_at >= week_ago).count()
    weekly_completed = QuizSession.query.filter(QuizSession.started_at >= week_ago, QuizSession.is_completed.is_(True)).count()
    monthly_quizzes = QuizSession.query.filter(QuizSession.started_at >= month_ago).count()
    step1_completed = QuizSession.query.filter(QuizSession.step1.isnot(None)).count()
    step2_completed = QuizSession.query.filter(QuizSession.step2.isnot(None)).count()

    total_ratings = Rating.query.count()
    avg_rating = db.session.query(func.avg(Rating.star_rating)).scalar()

    return {
        'overview': {
            'totalQuizzes': total_quizzes,
            'completedQuizzes': completed_quizzes,
            'completionRate': _rate(completed_quizzes, total_quizzes),
            'totalRatings': total_ratings,
            'avgRating': _round1(avg_rating),
        },
        'trends': {
            'weeklyQuizzes': weekly_quizzes,
            'weeklyCompleted': weekly_completed,
            'weeklyCompletionRate': _rate(weekly_completed, weekly_quizzes),
            'monthlyQuizzes': monthly_quizzes,
        },
        'stepCompletion': {
            'step1': {'completed': step1_completed, 'rate': _rate(step1_completed, total_quizzes)},
            'step2': {'completed': step2_completed, 'rate': _rate(step2_completed, total_quizzes)},
            'final': {'completed': completed_quizzes, 'rate': _rate(completed_quizzes, total_quizzes)},
        },
        'demographics': {
            'geographic': _distribution('geographicLocation', 'location', (), limit=5),
            'industry': _distribution('industryPreference', 'industry', (), limit=10),
        },
    }


SESSION_STATUSES = ('completed', 'incomplete')


def browse_sessions(args, page=1, per_page=20):
    """One page of sessions, newest first, filtered by status, industry, location and start date."""
    query = QuizSession.query
    status = args.get('status')
    if status == 'completed':
        query = query.filter(QuizSession.is_completed.is_(True))
    elif status == 'incomplete':
        query = query.filter(QuizSession.is_completed.is_(False))
    elif status:
        raise ValidationError([{'field': 'status', 'message': f'status must be one of {", ".join(SESSION_STATUSES)}'}])

    if args.get('industry'):
        query = query.filter(_step1_field('industryPreference') == args['industry'])
    if args.get('location'):
        query = query.filter(_step1_field('geographicLocation') == args['location'])
    query = query.filter(*_session_filters(args))

    pagination = query.order_by(desc(QuizSession.started_at), desc(QuizSession.id))\
        .paginate(page=page, per_page=per_page, error_out=False)

    return {
        'responses': [quiz_session.summary_dict() for quiz_session in pagination.items],
        'pagination': {
            'current': page,
            'total': pagination.pages,
            'count': len(pagination.items),
            'totalItems': pagination.total,
        },
    }


def session_detail(session_id):
    quiz_session = QuizSession.query.filter_by(session_id=session_id).first()
    if quiz_session is None:
        raise NotFoundError('Quiz response not found')
    return quiz_session.admin_dict()


# period -> (window, bucket size)
TIME_SERIES_PERIODS = {
    '24h': (datetime.timedelta(hours=24), 'hour'),
    '7d': (datetime.timedelta(days=7), 'day'),
    '30d': (datetime.timedelta(days=30), 'day'),
}
DEFAULT_PERIOD = '7d'
TIME_SERIES_METRICS = ('completions', 'ratings')


def _bucket(timestamp, size):
    timestamp = timestamp.replace(minute=0, second=0, microsecond=0)
    if size == 'day':
        timestamp = timestamp.replace(hour=0)
    return timestamp


def time_series(metric='completions', period=DEFAULT_PERIOD, now=None):
    """
    Completed quizzes (by completion time) or ratings (by creation time)
    counted per hour for ``24h`` and per day for ``7d``/``30d``. Unknown
    periods fall back to ``7d``; only buckets with data are returned.
    """
    if metric not in TIME_SERIES_METRICS:
        raise ValidationError([{
            'field': 'metric',
            'message': f'metric must be one of {", ".join(TIME_SERIES_METRICS)}',
        }])
    if period not in TIME_SERIES_PERIODS:
        period = DEFAULT_PERIOD
    window, size = TIME_SERIES_PERIODS[period]
    now = now or utcnow()
    start = now - window

    buckets = OrderedDict()
    if metric == 'completions':
        rows = db.session.query(QuizSession.completed_at)\
            .filter(QuizSession.is_completed.is_(True), QuizSession.completed_at >= start)\
            .order_by(QuizSession.completed_at)
        for (completed_at,) in rows:
            key = _bucket(completed_at, size)
            buckets[key] = buckets.get(key, 0) + 1
        points = [{'timestamp': key.isoformat(), 'count': count} for key, count in buckets.items()]
    else:
        rows = db.session.query(Rating.created_at, Rating.star_rating)\
            .filter(Rating.created_at >= start)\
            .order_by(Rating.created_at)
        for created_at, stars in rows:
            buckets.setdefault(_bucket(created_at, size), []).append(stars)
        points = [
            {'timestamp': key.isoformat(), 'count': len(values), 'avgRating': round(sum(values) / len(values), 1)}
            for key, values in buckets.items()
        ]

    return {
        'metric': metric,
        'period': period,
        'startDate': start.isoformat(),
        'endDate': now.isoformat(),
        'points': points,
    }


def _feedback_summary(rating):
    return {
        'ratingType': rating.rating_type,
        'starRating': rating.star_rating,
        'feedback': rating.feedback(),
        'createdAt': rating.created_at.isoformat(),
    }


def _has_text(*columns):
    return or_(*(func.length(func.coalesce(column, '')) > 0 for column in columns))


def rating_performance(args):
    """Overall rating quality: averages, star histogram, per-type ranking and recent praise and complaints."""
    filters = date_range_filters(Rating.created_at, args.get('startDate'), args.get('endDate'))

    overall = db.session.query(
        func.count(Rating.id).label('total'),
        func.avg(Rating.star_rating).label('avg_star_rating'),
        *(func.avg(getattr(Rating, column)).label(name) for name, column in CATEGORY_COLUMNS.items())
    ).filter(*filters).one()

    distribution = db.session.query(Rating.star_rating, func.count(Rating.id))\
        .filter(*filters)\
        .group_by(Rating.star_rating)\
        .order_by(Rating.star_rating)\
        .all()

    by_type = db.session.query(
        Rating.rating_type,
        func.count(Rating.id).label('total'),
        func.avg(Rating.star_rating).label('avg_rating'),
    ).filter(*filters).group_by(Rating.rating_type).order_by(desc('avg_rating')).all()

    positive = Rating.query.filter(
        Rating.star_rating >= 4, _has_text(Rating.feedback_liked, Rating.feedback_improvements), *filters
    ).order_by(desc(Rating.created_at), desc(Rating.id)).limit(10).all()
    negative = Rating.query.filter(
        Rating.star_rating <= 2, _has_text(Rating.feedback_disliked, Rating.feedback_improvements), *filters
    ).order_by(desc(Rating.created_at), desc(Rating.id)).limit(5).all()

    return {
        'overview': {
            'totalRatings': overall.total or 0,
            'avgStarRating': _round1(overall.avg_star_rating),
            'categoryAverages': {name: _round1(getattr(overall, name)) for name in CATEGORY_COLUMNS},
        },
        'distribution': [{'stars': stars, 'count': count} for stars, count in distribution],
        'performanceByType': [
            {'type': row.rating_type, 'count': row.total, 'avgRating': _round1(row.avg_rating)}
            for row in by_type
        ],
        'feedback': {
            'positive': [_feedback_summary(rating) for rating in positive],
            'negative': [_feedback_summary(rating) for rating in negative],
        },
    }
