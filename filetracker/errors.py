# filetracker/errors.py
"""Typed errors raised by the movement workflow.

Every error carries a machine-stable ``code`` and the HTTP status it maps
to. Validation errors also carry the offending file ids so the caller can
correct the request without working out which items failed.

    FileTrackerError
    +-- Unauthenticated          401
    +-- Forbidden                403
    +-- ValidationError          400
    |   +-- EmptySelection
    |   +-- UnknownFiles
    |   +-- CrossDepartment
    |   +-- MissingDepartment
    |   +-- RemarkRequired
    |   +-- InvalidPayload
    +-- DuplicateRequest         409
    +-- InvalidTransition        409
    +-- NotFound                 404
    +-- StoreUnavailable         503
"""

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError, OperationalError, DisconnectionError


class FileTrackerError(Exception):
    """Base class for all workflow errors."""
    code = 'error'
    status_code = 400
    message = 'Request failed.'

    def __init__(self, message=None, files=None):
        self.message = message or self.message
        self.files = list(files) if files is not None else None
        super().__init__(self.message)

    def to_dict(self):
        payload = {'error': self.code, 'message': self.message}
        if self.files is not None:
            payload['files'] = self.files
        return payload


class Unauthenticated(FileTrackerError):
    code = 'unauthenticated'
    status_code = 401
    message = 'Please log in to access this resource.'


class Forbidden(FileTrackerError):
    code = 'forbidden'
    status_code = 403
    message = 'You are not allowed to perform this action.'


class ValidationError(FileTrackerError):
    code = 'validation_error'
    status_code = 400


class EmptySelection(ValidationError):
    code = 'empty_selection'
    message = 'At least one file must be selected.'


class UnknownFiles(ValidationError):
    code = 'unknown_files'

    def __init__(self, files):
        super().__init__(
            f"Invalid file(s): {', '.join(str(f) for f in files)}",
            files
        )


class CrossDepartment(ValidationError):
    code = 'cross_department'

    def __init__(self, files):
        super().__init__(
            f"You are not allowed to request: {', '.join(str(f) for f in files)}",
            files
        )


class MissingDepartment(ValidationError):
    code = 'missing_department'
    message = 'User has no department assigned.'


class RemarkRequired(ValidationError):
    code = 'remark_required'
    message = 'A remark is required when rejecting a request.'


class InvalidPayload(ValidationError):
    code = 'invalid_payload'
    message = 'The request body is invalid.'

    def __init__(self, errors):
        super().__init__()
        self.errors = errors

    def to_dict(self):
        payload = super().to_dict()
        payload['fields'] = self.errors
        return payload


class DuplicateRequest(FileTrackerError):
    code = 'duplicate_request'
    status_code = 409

    def __init__(self, files):
        super().__init__(
            f"You already have a pending request for: {', '.join(str(f) for f in files)}",
            files
        )


class InvalidTransition(FileTrackerError):
    code = 'invalid_transition'
    status_code = 409

    def __init__(self, move_id, status_name, operation):
        super().__init__(
            f"Movement {move_id} is {status_name}; cannot {operation.replace('_', ' ')}."
        )
        self.move_id = move_id
        self.status_name = status_name
        self.operation = operation


class NotFound(FileTrackerError):
    code = 'not_found'
    status_code = 404

    def __init__(self, move_id):
        super().__init__(f"File movement {move_id} not found.")
        self.move_id = move_id


class StoreUnavailable(FileTrackerError):
    code = 'store_unavailable'
    status_code = 503
    message = 'Database error. No changes were saved; please try again.'


def register_error_handlers(app, db):
    """Render workflow and database errors as JSON responses.

    Args:
        app: Flask application instance
        db: SQLAlchemy extension whose session is rolled back on failure
    """
    @app.errorhandler(FileTrackerError)
    def handle_workflow_error(error):
        if isinstance(error, StoreUnavailable):
            app.logger.error(f'Store unavailable: {error.__cause__ or error}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        app.logger.error(f'Database error occurred: {str(error)}')
        db.session.rollback()
        body = StoreUnavailable().to_dict()
        if isinstance(error, OperationalError):
            return jsonify(body), 503
        elif isinstance(error, DisconnectionError):
            db.session.remove()  # Clean up the session
            return jsonify(body), 503
        return jsonify(body), 500

    @app.errorhandler(400)
    def handle_bad_request(error):
        return jsonify({'error': 'bad_request', 'message': error.description}), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'not_found', 'message': 'Resource not found.'}), 404

    @app.errorhandler(429)
    def handle_rate_limited(error):
        return jsonify({
            'error': 'rate_limited',
            'message': f'Too many requests: {error.description}'
        }), 429
