"""Rating submission and read-side rating statistics."""
import datetime
import logging

from sqlalchemy import func, case, desc, or_

from . import db
from .errors import ValidationError
from .models import Rating, RatingRevision, CATEGORY_COLUMNS, FEEDBACK_COLUMNS, utcnow
from .quiz_logic import get_session

logger = logging.getLogger(__name__)

STAR_BUCKETS = (1, 2, 3, 4, 5)

# Query-string filter name -> column it constrains
DEMOGRAPHIC_FILTERS = {
    'geographicLocation': Rating.geographic_location,
    'industryPreference': Rating.industry_preference,
    'experienceLevel': Rating.experience_level,
}

GROUP_BY_COLUMNS = {
    'ratingType': Rating.rating_type,
    'geographic': Rating.geographic_location,
    'industry': Rating.industry_preference,
    'confidence': Rating.confidence_level,
}


def parse_date(value, field):
    """Parses an ISO date or datetime from a query string, or returns None when absent."""
    if not value:
        return None
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError([{'field': field, 'message': f'"{value}" is not a valid ISO date'}])


def date_range_filters(column, start_date=None, end_date=None):
    filters = []
    start = parse_date(start_date, 'startDate')
    end = parse_date(end_date, 'endDate')
    if start:
        filters.append(column >= start)
    if end:
        filters.append(column <= end)
    return filters


def build_filters(args):
    """SQLAlchemy filter clauses from query-string demographics and date range."""
    filters = []
    for name, column in DEMOGRAPHIC_FILTERS.items():
        if args.get(name):
            filters.append(column == args[name])
    filters.extend(date_range_filters(Rating.created_at, args.get('startDate'), args.get('endDate')))
    return filters


def _apply_scores(rating, submission):
    categories = submission.category_ratings
    feedback = submission.feedback
    rating.star_rating = submission.star_rating
    # Submission attribute names match the column names for category scores
    for column in CATEGORY_COLUMNS.values():
        setattr(rating, column, getattr(categories, column) if categories else None)
    for name, column in FEEDBACK_COLUMNS.items():
        setattr(rating, column, getattr(feedback, name) if feedback else None)
    rating.confidence_level = submission.confidence_level


def _apply_demographics(rating, quiz_session):
    demographics = quiz_session.demographics()
    rating.geographic_location = demographics['geographicLocation']
    rating.industry_preference = demographics['industryPreference']
    rating.experience_level = demographics['experienceLevel']
    rating.city_market_size = demographics['cityMarketSize']


def submit_rating(submission):
    """
    Creates a rating, or updates the existing one for the same
    (session, type, index). Before an update overwrites the scores, the
    previous values are kept as a RatingRevision.

    Returns ``(rating, is_update)``.
    """
    quiz_session = get_session(submission.session_id)

    rating = Rating.query.filter_by(
        session_id=submission.session_id,
        rating_type=submission.rating_type,
        result_index=submission.result_index,
    ).first()

    is_update = rating is not None
    if is_update:
        db.session.add(RatingRevision(
            rating_id=rating.id,
            star_rating=rating.star_rating,
            category_ratings=rating.category_ratings(),
            feedback=rating.feedback(),
            confidence_level=rating.confidence_level,
        ))
        rating.is_updated = True
        rating.original_rating_id = rating.id
        rating.rated_at = utcnow()
    else:
        rating = Rating(
            session_id=submission.session_id,
            rating_type=submission.rating_type,
            result_index=submission.result_index,
        )
        db.session.add(rating)

    _apply_scores(rating, submission)
    _apply_demographics(rating, quiz_session)
    db.session.commit()

    logger.info("%s %s rating %d for session %s",
                "Updated" if is_update else "Stored", rating.rating_type, rating.result_index, rating.session_id)
    return rating, is_update


def ratings_for_session(session_id):
    return Rating.query.filter_by(session_id=session_id).order_by(desc(Rating.created_at), desc(Rating.id)).all()


def _average_columns():
    return (
        func.avg(Rating.star_rating).label('avg_star_rating'),
        func.avg(Rating.accuracy).label('avg_accuracy'),
        func.avg(Rating.relevance).label('avg_relevance'),
        func.avg(Rating.actionability).label('avg_actionability'),
        func.avg(Rating.creativity).label('avg_creativity'),
        func.avg(Rating.market_fit).label('avg_market_fit'),
        func.count(Rating.id).label('total_ratings'),
    ) + tuple(
        func.sum(case((Rating.star_rating == stars, 1), else_=0)).label(f'stars_{stars}')
        for stars in STAR_BUCKETS
    )


def _average_row_to_dict(key, row):
    return {
        '_id': key,
        'avgStarRating': row.avg_star_rating or 0,
        'avgAccuracy': row.avg_accuracy or 0,
        'avgRelevance': row.avg_relevance or 0,
        'avgActionability': row.avg_actionability or 0,
        'avgCreativity': row.avg_creativity or 0,
        'avgMarketFit': row.avg_market_fit or 0,
        'totalRatings': row.total_ratings or 0,
        'ratingDistribution': {
            str(stars): getattr(row, f'stars_{stars}') or 0 for stars in STAR_BUCKETS
        },
    }


def average_ratings(rating_type, filters=()):
    """Averages and a 1-5 star histogram for one rating type. Zero matches give zeros."""
    row = db.session.query(*_average_columns())\
        .filter(Rating.rating_type == rating_type, *filters)\
        .one()
    return _average_row_to_dict(rating_type, row)


def rating_analytics(group_by, filters=()):
    """Per-group statistics plus overall totals for the filtered ratings."""
    if group_by not in GROUP_BY_COLUMNS:
        raise ValidationError([{
            'field': 'groupBy',
            'message': f'groupBy must be one of {", ".join(GROUP_BY_COLUMNS)}',
        }])
    column = GROUP_BY_COLUMNS[group_by]

    rows = db.session.query(column.label('group_key'), *_average_columns())\
        .filter(*filters)\
        .group_by(column)\
        .order_by(desc('total_ratings'))\
        .all()

    analytics = []
    for row in rows:
        entry = _average_row_to_dict(row.group_key, row)
        if group_by != 'ratingType':
            entry['ratingTypes'] = sorted(
                value for (value,) in db.session.query(Rating.rating_type)
                .filter(column == row.group_key, *filters).distinct()
            )
        analytics.append(entry)

    overall = db.session.query(
        func.count(Rating.id),
        func.avg(Rating.star_rating),
        func.count(func.distinct(Rating.session_id)),
        func.count(func.distinct(Rating.rating_type)),
    ).filter(*filters).one()

    return {
        'analytics': analytics,
        'overallStats': {
            'totalRatings': overall[0] or 0,
            'avgStarRating': overall[1] or 0,
            'uniqueSessionCount': overall[2] or 0,
            'uniqueRatingTypeCount': overall[3] or 0,
        },
        'groupBy': group_by,
    }


def recent_feedback(limit=20, rating_type=None, min_rating=None, max_rating=None):
    """Newest ratings that carry at least one non-empty feedback text."""
    query = Rating.query.filter(or_(
        func.length(func.coalesce(Rating.feedback_liked, '')) > 0,
        func.length(func.coalesce(Rating.feedback_disliked, '')) > 0,
        func.length(func.coalesce(Rating.feedback_improvements, '')) > 0,
    ))
    if rating_type:
        query = query.filter(Rating.rating_type == rating_type)
    if min_rating is not None:
        query = query.filter(Rating.star_rating >= min_rating)
    if max_rating is not None:
        query = query.filter(Rating.star_rating <= max_rating)
    return query.order_by(desc(Rating.created_at), desc(Rating.id)).limit(limit).all()
