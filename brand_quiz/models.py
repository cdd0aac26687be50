from . import db
from .options import CATEGORY_RATING_FIELDS, FEEDBACK_FIELDS
import datetime


def utcnow():
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def _isoformat(value):
    return value.isoformat() if value else None


TOTAL_STEPS = 3

# Client-facing rating keys -> Rating columns
CATEGORY_COLUMNS = dict(zip(CATEGORY_RATING_FIELDS, ('accuracy', 'relevance', 'actionability', 'creativity', 'market_fit')))
FEEDBACK_COLUMNS = dict(zip(FEEDBACK_FIELDS, ('feedback_liked', 'feedback_disliked', 'feedback_improvements')))


class QuizSession(db.Model):
    """One user's quiz attempt: answers, generated results and progress."""
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(36), unique=True, nullable=False, index=True)

    current_step = db.Column(db.Integer, nullable=False, default=1)
    # List of {"step": n, "completedAt": iso}; JSON columns are reassigned, never mutated in place
    completed_steps = db.Column(db.JSON, nullable=False, default=list)
    step1 = db.Column(db.JSON(none_as_null=True), nullable=True)
    step2 = db.Column(db.JSON(none_as_null=True), nullable=True)

    step1_results = db.Column(db.JSON, nullable=False, default=list)
    step2_results = db.Column(db.JSON, nullable=False, default=list)
    final_results = db.Column(db.JSON(none_as_null=True), nullable=True)

    # None (never requested), 'pending', 'succeeded' or 'failed'
    step1_generation_status = db.Column(db.String(16), nullable=True)
    step2_generation_status = db.Column(db.String(16), nullable=True)
    final_generation_status = db.Column(db.String(16), nullable=True)

    is_completed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    # Request metadata, written once at creation
    user_agent = db.Column(db.String, nullable=True)
    ip_address = db.Column(db.String, nullable=True)
    referrer = db.Column(db.String, nullable=True)
    utm_source = db.Column(db.String, nullable=True)
    utm_medium = db.Column(db.String, nullable=True)
    utm_campaign = db.Column(db.String, nullable=True)

    started_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    last_updated = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    ratings = db.relationship('Rating', backref='quiz_session', lazy=True)

    def __repr__(self):
        return f"<QuizSession session_id={self.session_id} step={self.current_step}>"

    @property
    def completion_percentage(self):
        return self.current_step / TOTAL_STEPS * 100

    def has_completed_step(self, step):
        return any(entry['step'] == step for entry in self.completed_steps or [])

    def mark_step_completed(self, step):
        """Records a step completion once; later calls for the same step are no-ops."""
        if self.has_completed_step(step):
            return False
        self.completed_steps = list(self.completed_steps or []) + [
            {'step': step, 'completedAt': utcnow().isoformat()}
        ]
        return True

    def advance_to(self, step):
        self.current_step = min(max(self.current_step or 1, step), TOTAL_STEPS)

    def generation_status(self):
        return {
            'step1': self.step1_generation_status,
            'step2': self.step2_generation_status,
            'final': self.final_generation_status,
        }

    def demographics(self):
        """Snapshot of the step 1 fields that ratings are segmented by."""
        step1 = self.step1 or {}
        return {
            'geographicLocation': step1.get('geographicLocation'),
            'industryPreference': step1.get('industryPreference'),
            'experienceLevel': step1.get('experienceLevel'),
            'cityMarketSize': step1.get('cityMarketSize'),
        }

    def status_dict(self):
        return {
            'sessionId': self.session_id,
            'currentStep': self.current_step,
            'completionPercentage': self.completion_percentage,
            'isCompleted': self.is_completed,
            'completedSteps': self.completed_steps or [],
            'hasStep1Data': self.step1 is not None,
            'hasStep2Data': self.step2 is not None,
            'hasResults': self.final_results is not None,
            'generationStatus': self.generation_status(),
        }

    def results_dict(self):
        return {
            'sessionId': self.session_id,
            'isCompleted': self.is_completed,
            'completionPercentage': self.completion_percentage,
            'step1Results': self.step1_results or [],
            'step2Results': self.step2_results or [],
            'finalResults': self.final_results,
            'generationStatus': self.generation_status(),
            'completedAt': _isoformat(self.completed_at),
        }

    def summary_dict(self):
        """Row shown in the admin session listing."""
        step1 = self.step1 or {}
        return {
            'sessionId': self.session_id,
            'currentStep': self.current_step,
            'isCompleted': self.is_completed,
            'industryPreference': step1.get('industryPreference'),
            'geographicLocation': step1.get('geographicLocation'),
            'startedAt': _isoformat(self.started_at),
            'completedAt': _isoformat(self.completed_at),
        }

    def admin_dict(self):
        """Everything stored for the session, including its ratings and their revision history."""
        data = self.status_dict()
        data.update({
            'step1': self.step1,
            'step2': self.step2,
            'aiResults': {
                'step1Results': self.step1_results or [],
                'step2Results': self.step2_results or [],
                'finalResults': self.final_results,
            },
            'metadata': {
                'userAgent': self.user_agent,
                'ipAddress': self.ip_address,
                'referrer': self.referrer,
                'utmSource': self.utm_source,
                'utmMedium': self.utm_medium,
                'utmCampaign': self.utm_campaign,
            },
            'startedAt': _isoformat(self.started_at),
            'lastUpdated': _isoformat(self.last_updated),
            'completedAt': _isoformat(self.completed_at),
            'ratings': [
                dict(rating.to_dict(), revisions=[revision.to_dict() for revision in rating.revisions])
                for rating in self.ratings
            ],
        })
        return data


class Rating(db.Model):
    """A user's score for one generated artifact. Unique per (session, type, index)."""
    __table_args__ = (
        db.UniqueConstraint('session_id', 'rating_type', 'result_index', name='uq_rating_target'),
    )

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(36), db.ForeignKey('quiz_session.session_id'), nullable=False, index=True)
    rating_type = db.Column(db.String(32), nullable=False, index=True)
    result_index = db.Column(db.Integer, nullable=False, default=0)
    star_rating = db.Column(db.Integer, nullable=False, index=True)

    accuracy = db.Column(db.Integer, nullable=True)
    relevance = db.Column(db.Integer, nullable=True)
    actionability = db.Column(db.Integer, nullable=True)
    creativity = db.Column(db.Integer, nullable=True)
    market_fit = db.Column(db.Integer, nullable=True)

    feedback_liked = db.Column(db.Text, nullable=True)
    feedback_disliked = db.Column(db.Text, nullable=True)
    feedback_improvements = db.Column(db.Text, nullable=True)

    confidence_level = db.Column(db.String, nullable=True)

    # Copied from the session's step 1 at rating time
    geographic_location = db.Column(db.String, nullable=True, index=True)
    industry_preference = db.Column(db.String, nullable=True, index=True)
    experience_level = db.Column(db.String, nullable=True)
    city_market_size = db.Column(db.String, nullable=True)

    is_updated = db.Column(db.Boolean, nullable=False, default=False)
    original_rating_id = db.Column(db.Integer, db.ForeignKey('rating.id'), nullable=True)

    rated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    revisions = db.relationship(
        'RatingRevision', backref='rating', lazy=True,
        order_by='RatingRevision.id', cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Rating session_id={self.session_id} type={self.rating_type} index={self.result_index} stars={self.star_rating}>"

    def category_ratings(self):
        return {name: getattr(self, column) for name, column in CATEGORY_COLUMNS.items()}

    def feedback(self):
        return {name: getattr(self, column) for name, column in FEEDBACK_COLUMNS.items()}

    @property
    def average_category_rating(self):
        values = [v for v in self.category_ratings().values() if v is not None]
        if not values:
            return None
        return sum(values) / len(values)

    def to_dict(self):
        return {
            'ratingId': self.id,
            'sessionId': self.session_id,
            'ratingType': self.rating_type,
            'resultIndex': self.result_index,
            'starRating': self.star_rating,
            'categoryRatings': self.category_ratings(),
            'averageCategoryRating': self.average_category_rating,
            'feedback': self.feedback(),
            'confidenceLevel': self.confidence_level,
            'userDemographics': {
                'geographicLocation': self.geographic_location,
                'industryPreference': self.industry_preference,
                'experienceLevel': self.experience_level,
                'cityMarketSize': self.city_market_size,
            },
            'isUpdated': self.is_updated,
            'originalRatingId': self.original_rating_id,
            'revisionCount': len(self.revisions),
            'ratedAt': _isoformat(self.rated_at),
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }


class RatingRevision(db.Model):
    """Immutable copy of a rating's scored values taken just before it was overwritten."""
    id = db.Column(db.Integer, primary_key=True)
    rating_id = db.Column(db.Integer, db.ForeignKey('rating.id'), nullable=False, index=True)
    star_rating = db.Column(db.Integer, nullable=False)
    category_ratings = db.Column(db.JSON, nullable=True)
    feedback = db.Column(db.JSON, nullable=True)
    confidence_level = db.Column(db.String, nullable=True)
    revised_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<RatingRevision rating_id={self.rating_id} stars={self.star_rating}>"

    def to_dict(self):
        return {
            'starRating': self.star_rating,
            'categoryRatings': self.category_ratings,
            'feedback': self.feedback,
            'confidenceLevel': self.confidence_level,
            'revisedAt': _isoformat(self.revised_at),
        }
