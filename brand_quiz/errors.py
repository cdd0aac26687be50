"""Error taxonomy for the quiz service and the JSON handlers that render it."""
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException


class QuizError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = 500
    message = 'An unexpected error occurred'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'success': False, 'message': self.message}


class ValidationError(QuizError):
    """A submission failed schema validation. Carries every field-level error."""
    status_code = 400
    message = 'Validation error'

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self):
        payload = super().to_dict()
        payload['errors'] = self.errors
        return payload


class NotFoundError(QuizError):
    status_code = 404
    message = 'Quiz session not found'


class PreconditionError(QuizError):
    """Quiz steps were submitted out of order."""
    status_code = 400


class GenerationFailure(QuizError):
    """The text-generation API errored or produced unusable output."""
    status_code = 500
    message = 'Failed to generate AI results'


def register_error_handlers(app):
    """Renders QuizError subclasses, HTTP errors and crashes as JSON envelopes."""

    @app.errorhandler(QuizError)
    def handle_quiz_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.exception("Unhandled error: %s", error)
        return jsonify({'success': False, 'message': QuizError.message}), 500
