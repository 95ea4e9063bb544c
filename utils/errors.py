"""
Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``app.py`` turn them into
``{"status": "fail", "message": ...}`` responses with the matching code.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class InvalidState(AppError):
    status_code = 400
    default_message = "Operation not allowed in the current state"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"
