# archimedes_prep/core/exceptions.py
"""
Error taxonomy shared by services and the API layer.

Each error carries the HTTP status and error type the exception handlers
in ``main.py`` report back to the client.
"""


class ArchimedesError(Exception):
    """Base class for all application errors"""
    status_code = 500
    error = "Internal Server Error"
    error_type = "server_error"

    def __init__(self, message: str = None):
        super().__init__(message or self.error)
        self.message = message or self.error


class TestNotFoundError(ArchimedesError):
    status_code = 404
    error = "Test not found"
    error_type = "not_found_error"


class UserNotFoundError(ArchimedesError):
    status_code = 404
    error = "User not found"
    error_type = "not_found_error"


class DuplicateDayError(ArchimedesError):
    """A test definition already occupies this day number"""
    status_code = 400
    error = "Test already exists for this day"
    error_type = "conflict_error"


class InvalidAnswerError(ArchimedesError):
    status_code = 400
    error = "Invalid answer"
    error_type = "validation_error"


class NoActiveSessionError(ArchimedesError):
    status_code = 409
    error = "No active session"
    error_type = "session_error"


class SessionFinishedError(ArchimedesError):
    status_code = 409
    error = "Session already finished"
    error_type = "session_error"


class ContentGenerationError(ArchimedesError):
    """The content provider failed or returned unusable content"""
    status_code = 502
    error = "Generation failed"
    error_type = "external_service_error"


class PersistenceError(ArchimedesError):
    status_code = 500
    error = "Storage operation failed"
    error_type = "persistence_error"
