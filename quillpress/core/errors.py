"""
Error Handling
==============

APIError is raised by route handlers and helpers; register_error_handlers()
maps it, pydantic validation failures, HTTP errors and anything unexpected
onto the JSON envelope {success: false, error, details?}.
"""

import logging

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from .database import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    """An error with an HTTP status and a client-facing message"""

    def __init__(self, status, message, details=None, code=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self):
        body = {'success': False, 'error': self.message}
        if self.details is not None:
            body['details'] = self.details
        if self.code:
            body['code'] = self.code
        return body


def validation_details(error):
    """Flatten a pydantic ValidationError into [{field, message}]"""
    return [
        {
            'field': '.'.join(str(part) for part in err['loc']),
            'message': err['msg'],
        }
        for err in error.errors()
    ]


def validate(schema, data):
    """Validate a request body against a pydantic schema.

    A missing or non-object body is treated as an empty object so the
    schema reports the missing fields itself.
    """
    if not isinstance(data, dict):
        data = {}
    return schema.model_validate(data)


def register_error_handlers(app):

    @app.errorhandler(APIError)
    def handle_api_error(error):
        # Drop any half-applied changes so they never ride along on a later flush
        db.session.rollback()
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({
            'success': False,
            'error': 'Validation error',
            'details': validation_details(error),
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        messages = {
            404: 'Route not found',
            413: 'Request body too large',
        }
        return jsonify({
            'success': False,
            'error': messages.get(error.code, error.description or error.name),
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception("Unhandled error: %s", error)

        from .logging_service import LoggingService
        LoggingService.log_error_with_traceback('app', error)

        return jsonify({'success': False, 'error': 'Internal server error'}), 500
