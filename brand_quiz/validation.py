"""
Schema validation for quiz step and rating submissions.

Submissions arrive as camelCase JSON. Each schema is a pydantic model whose
field aliases follow the client's naming, so error locations read the same
way the client sent them (``coreSkills``, ``categoryRatings.marketFit``).
Validation is all-or-nothing: either a fully coerced model comes back or a
``ValidationError`` listing every offending field is raised.
"""
from typing import List, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from . import options
from .errors import ValidationError


class _Submission(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')


class Step1Answers(_Submission):
    """Personal foundation answers."""
    # Section 1: current situation
    job_status: Literal[options.JOB_STATUSES]
    industry_preference: Literal[options.INDUSTRIES]
    experience_level: Literal[options.EXPERIENCE_LEVELS]
    education_background: Literal[options.EDUCATION_BACKGROUNDS]
    geographic_location: Literal[options.GEOGRAPHIC_LOCATIONS]
    city_market_size: Literal[options.CITY_MARKET_SIZES]
    time_availability: Literal[options.TIME_AVAILABILITY]
    budget_range: Literal[options.BUDGET_RANGES]
    tech_comfort: Literal[options.TECH_COMFORT_LEVELS]
    support_system: Literal[options.SUPPORT_SYSTEMS]

    # Section 2: skills and strengths
    core_skills: List[Literal[options.CORE_SKILLS]] = Field(min_length=3, max_length=5)
    unique_experiences: str = Field(min_length=50, max_length=1000)
    passions_interests: str = Field(min_length=30, max_length=500)

    # Section 3: goals and vision
    focus_area: Literal[options.FOCUS_AREAS]
    # Declared after focus_area so the validator below can see it
    custom_focus: Optional[str] = Field(default=None, min_length=1, max_length=500, validate_default=True)
    primary_goals: List[Literal[options.PRIMARY_GOALS]] = Field(min_length=2, max_length=3)
    timeline: Literal[options.TIMELINES]
    biggest_concerns: str = Field(min_length=30, max_length=500)

    @field_validator('core_skills', 'primary_goals')
    @classmethod
    def _no_duplicates(cls, value):
        if len(set(value)) != len(value):
            raise ValueError('must not contain duplicate selections')
        return value

    @field_validator('custom_focus')
    @classmethod
    def _custom_focus_required_for_other(cls, value, info: ValidationInfo):
        if value is None and info.data.get('focus_area') == options.CUSTOM_FOCUS_TRIGGER:
            raise ValueError(f'customFocus is required when focusArea is "{options.CUSTOM_FOCUS_TRIGGER}"')
        return value


class Step2Answers(_Submission):
    """Market research answers."""
    problems_to_solve: str = Field(min_length=50, max_length=1000)
    ideal_target_group: str = Field(min_length=60, max_length=1000)
    industry_trends_impact: str = Field(min_length=50, max_length=1000)
    unique_advantages: str = Field(min_length=40, max_length=1000)
    market_challenges: str = Field(min_length=30, max_length=1000)
    regional_considerations: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    competitive_landscape: Optional[str] = Field(default=None, min_length=1, max_length=1000)


class Step1Submission(Step1Answers):
    session_id: str = Field(min_length=1)


class Step2Submission(Step2Answers):
    session_id: str = Field(min_length=1)


class CategoryRatings(_Submission):
    accuracy: Optional[int] = Field(default=None, ge=1, le=5)
    relevance: Optional[int] = Field(default=None, ge=1, le=5)
    actionability: Optional[int] = Field(default=None, ge=1, le=5)
    creativity: Optional[int] = Field(default=None, ge=1, le=5)
    market_fit: Optional[int] = Field(default=None, ge=1, le=5)


class Feedback(_Submission):
    liked: Optional[str] = Field(default=None, max_length=1000)
    disliked: Optional[str] = Field(default=None, max_length=1000)
    improvements: Optional[str] = Field(default=None, max_length=1000)


class RatingSubmission(_Submission):
    session_id: str = Field(min_length=1)
    rating_type: Literal[options.RATING_TYPES]
    result_index: int = Field(default=0, ge=0)
    star_rating: int = Field(ge=1, le=5)
    category_ratings: Optional[CategoryRatings] = None
    feedback: Optional[Feedback] = None
    confidence_level: Optional[Literal[options.CONFIDENCE_LEVELS]] = None


SCHEMAS = {
    'step1': Step1Submission,
    'step2': Step2Submission,
    'rating': RatingSubmission,
    # Bare answer sets, used for sample data in generation previews
    'step1_answers': Step1Answers,
    'step2_answers': Step2Answers,
}


def _loc_part(part):
    # Errors raised while validating a default carry the attribute name, not the alias
    if isinstance(part, str) and '_' in part:
        return to_camel(part)
    return str(part)


def _format_errors(exc):
    errors = []
    for error in exc.errors():
        field = '.'.join(_loc_part(part) for part in error['loc'])
        errors.append({'field': field, 'message': error['msg']})
    return errors


def validate_submission(kind, payload):
    """
    Validates a raw JSON payload against the schema for ``kind``.

    Returns the coerced pydantic model. Raises ValidationError with one
    ``{field, message}`` entry per problem when anything is wrong.
    """
    schema = SCHEMAS[kind]
    if not isinstance(payload, dict):
        raise ValidationError([{'field': '', 'message': 'Request body must be a JSON object'}])
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(_format_errors(exc)) from exc


def answers_to_dict(answers):
    """Serializes validated answers the way they are stored and prompted: camelCase, no session id, no unset optionals."""
    return answers.model_dump(by_alias=True, exclude={'session_id'}, exclude_none=True)
