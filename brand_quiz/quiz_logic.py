"""
Quiz session state machine and generation orchestration.

A session moves one way through ``created -> step1_done -> step2_done ->
completed``. Resubmitting a step overwrites its answers and regenerates its
artifacts without moving ``current_step`` back or touching later data.

Generation failure policy: step-level failures are recorded on the session
(``generation_status = failed``) and logged, but the submission itself still
succeeds so the user can carry on; the final report failure is raised to the
caller. Every status change is committed, so a client polling
``/quiz/session/<id>`` sees ``pending`` while a call is in flight.
"""
import logging
import uuid

from . import db
from .errors import NotFoundError, PreconditionError, GenerationFailure, ValidationError
from .models import QuizSession, utcnow
from .parsing import parse_step_results, parse_final_report
from .prompts import STEP1, STEP2, FINAL, PHASES, build_prompt
from .validation import answers_to_dict, validate_submission

logger = logging.getLogger(__name__)

PENDING = 'pending'
SUCCEEDED = 'succeeded'
FAILED = 'failed'

# Metadata keys accepted by start_session, mapped onto model columns
METADATA_FIELDS = ('user_agent', 'ip_address', 'referrer', 'utm_source', 'utm_medium', 'utm_campaign')


def start_session(metadata=None):
    """Creates an empty session at step 1 and returns it."""
    metadata = metadata or {}
    quiz_session = QuizSession(
        session_id=str(uuid.uuid4()),
        current_step=1,
        completed_steps=[],
        step1_results=[],
        step2_results=[],
        **{field: metadata.get(field) for field in METADATA_FIELDS}
    )
    db.session.add(quiz_session)
    db.session.commit()
    logger.info("Started quiz session %s", quiz_session.session_id)
    return quiz_session


def get_session(session_id):
    quiz_session = QuizSession.query.filter_by(session_id=session_id).first()
    if quiz_session is None:
        raise NotFoundError()
    return quiz_session


def _set_status(quiz_session, phase, status):
    setattr(quiz_session, f'{phase}_generation_status', status)
    db.session.commit()


def _run_step_generation(phase, step1, step2, client):
    text = client.generate(phase, build_prompt(phase, step1, step2))
    artifacts = parse_step_results(text, phase, client.model_name)
    if not artifacts:
        raise GenerationFailure(f"Generated {phase} text contained no recognisable sections")
    return artifacts


def _run_final_generation(step1, step2, client):
    report = parse_final_report(client.generate(FINAL, build_prompt(FINAL, step1, step2)))
    if report.is_empty():
        raise GenerationFailure("Generated final report contained no recognisable sections")
    return report


def _generate_step_artifacts(quiz_session, phase, client):
    """Runs one step-level generation and stores the artifacts. Raises GenerationFailure."""
    _set_status(quiz_session, phase, PENDING)
    try:
        artifacts = _run_step_generation(phase, quiz_session.step1, quiz_session.step2, client)
    except GenerationFailure:
        _set_status(quiz_session, phase, FAILED)
        raise

    setattr(quiz_session, f'{phase}_results', [a.model_dump(by_alias=True) for a in artifacts])
    _set_status(quiz_session, phase, SUCCEEDED)
    logger.info("Stored %d %s artifacts for session %s", len(artifacts), phase, quiz_session.session_id)
    return artifacts


def _generate_step_artifacts_quietly(quiz_session, phase, client):
    try:
        _generate_step_artifacts(quiz_session, phase, client)
    except GenerationFailure as e:
        # Answers are already saved; the artifacts can be regenerated later.
        logger.warning("AI generation failed for %s of session %s: %s", phase, quiz_session.session_id, e)


def submit_step1(answers, client):
    """Stores validated step 1 answers, advances the session, then generates profile summaries."""
    quiz_session = get_session(answers.session_id)

    quiz_session.step1 = answers_to_dict(answers)
    quiz_session.advance_to(2)
    quiz_session.mark_step_completed(1)
    db.session.commit()

    _generate_step_artifacts_quietly(quiz_session, STEP1, client)
    return quiz_session


def submit_step2(answers, client):
    """Stores validated step 2 answers once step 1 exists, then generates market strategies."""
    quiz_session = get_session(answers.session_id)
    if quiz_session.step1 is None:
        raise PreconditionError('Step 1 must be completed first')

    quiz_session.step2 = answers_to_dict(answers)
    quiz_session.advance_to(3)
    quiz_session.mark_step_completed(2)
    db.session.commit()

    _generate_step_artifacts_quietly(quiz_session, STEP2, client)
    return quiz_session


def _require_answers(quiz_session):
    if quiz_session.step1 is None or quiz_session.step2 is None:
        raise PreconditionError('Both Step 1 and Step 2 must be completed first')


def _generate_final_report(quiz_session, client):
    _set_status(quiz_session, FINAL, PENDING)
    try:
        report = _run_final_generation(quiz_session.step1, quiz_session.step2, client)
    except GenerationFailure:
        _set_status(quiz_session, FINAL, FAILED)
        raise

    quiz_session.final_results = report.to_dict()
    quiz_session.final_generation_status = SUCCEEDED
    return report


def generate_final_results(session_id, client):
    """Generates and stores the final report, completing the session."""
    quiz_session = get_session(session_id)
    _require_answers(quiz_session)

    try:
        _generate_final_report(quiz_session, client)
    except GenerationFailure as e:
        logger.error("Final result generation failed for session %s: %s", session_id, e)
        raise GenerationFailure('Failed to generate final results') from e

    quiz_session.is_completed = True
    quiz_session.completed_at = utcnow()
    quiz_session.mark_step_completed(3)
    db.session.commit()
    logger.info("Completed quiz session %s", session_id)
    return quiz_session


def regenerate(session_id, phase, client):
    """
    Reruns one generation phase for an existing session. Unlike the
    submission path, failures are raised. Regenerating the final report does
    not change the completion state.
    """
    quiz_session = get_session(session_id)
    if phase == STEP1:
        if quiz_session.step1 is None:
            raise PreconditionError('Step 1 data not found for this session')
        return [a.model_dump(by_alias=True) for a in _generate_step_artifacts(quiz_session, STEP1, client)]
    if phase == STEP2:
        _require_answers(quiz_session)
        return [a.model_dump(by_alias=True) for a in _generate_step_artifacts(quiz_session, STEP2, client)]
    if phase == FINAL:
        _require_answers(quiz_session)
        report = _generate_final_report(quiz_session, client)
        db.session.commit()
        return report.to_dict()
    raise ValidationError([{'field': 'type', 'message': 'Invalid regeneration type. Use step1, step2, or final.'}])


SAMPLE_STEP1 = {
    'jobStatus': 'Full-time Employee',
    'industryPreference': 'Marketing & Advertising',
    'experienceLevel': '5-10 years',
    'educationBackground': "Bachelor's Degree",
    'geographicLocation': 'North America',
    'cityMarketSize': 'Major Metropolitan (1M+)',
    'timeAvailability': '10-20 hours',
    'budgetRange': '$150-500',
    'techComfort': 'Tech Enthusiast - I learn eagerly',
    'supportSystem': 'I have mentors or coaches',
    'coreSkills': ['Communication & Presentation', 'Strategic Thinking', 'Creativity & Innovation'],
    'uniqueExperiences': 'Led a successful rebranding campaign for a mid-size company that increased '
                         'brand recognition by 40% and drove 25% more leads.',
    'passionsInterests': "I'm passionate about helping businesses tell their story authentically "
                         "and connect with their audience.",
    'focusArea': 'Marketing & Sales',
    'primaryGoals': ['Be recognized as an expert', 'Build side income ($500-2000/month)'],
    'timeline': 'Within 6 months',
    'biggestConcerns': 'Standing out in a crowded market and finding my unique voice.',
}

SAMPLE_STEP2 = {
    'problemsToSolve': 'Many small businesses struggle with inconsistent messaging and lack a clear '
                       'brand strategy that resonates with their target audience.',
    'idealTargetGroup': 'Small to medium business owners, entrepreneurs, and marketing managers who '
                        'want to build stronger brands but lack the expertise or resources.',
    'industryTrendsImpact': 'Digital transformation and social media have made brand consistency more '
                            'important than ever, while AI tools are changing how we create content.',
    'uniqueAdvantages': 'I combine corporate experience with entrepreneurial insight, and I understand '
                        'both creative and analytical sides of marketing.',
    'marketChallenges': "The market is saturated with marketing consultants, and it's challenging to "
                        "prove ROI in branding efforts.",
}


def preview_generation(phase, sample_data, client):
    """
    Runs one generation phase against sample answers without touching any
    session, for checking prompts and parsing against the live model.

    ``sample_data`` is a step 1 answer set for ``step1``, or
    ``{"step1": ..., "step2": ...}`` for ``step2`` and ``final``; anything
    missing falls back to the built-in sample. Supplied answers are
    validated like real submissions.
    """
    if phase not in PHASES:
        raise ValidationError([{'field': 'type', 'message': 'Invalid generation type. Use step1, step2, or final.'}])

    sample_data = sample_data or {}
    if not isinstance(sample_data, dict):
        raise ValidationError([{'field': 'sampleData', 'message': 'sampleData must be a JSON object'}])
    if phase == STEP1:
        step1, step2 = sample_data, None
    else:
        step1, step2 = sample_data.get('step1'), sample_data.get('step2')

    step1 = answers_to_dict(validate_submission('step1_answers', step1)) if step1 else SAMPLE_STEP1
    step2 = answers_to_dict(validate_submission('step2_answers', step2)) if step2 else SAMPLE_STEP2

    if phase == FINAL:
        return _run_final_generation(step1, step2, client).to_dict()
    return [a.model_dump(by_alias=True) for a in _run_step_generation(phase, step1, step2, client)]
