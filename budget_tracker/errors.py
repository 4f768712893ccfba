# budget_tracker/errors.py
"""
Error types raised by the services and rendered by the handlers in main.py.

Every error carries a ``kind`` tag, a client-facing ``message`` and the HTTP
status it maps to, so the handlers never have to guess from field presence.
"""


class AppError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationFailed(AppError):
    kind = "validation"
    status_code = 400


class AlreadyExists(AppError):
    kind = "already_exists"
    status_code = 400


class Unauthorized(AppError):
    kind = "unauthorized"
    status_code = 401


class NotFound(AppError):
    kind = "not_found"
    status_code = 404


class StoreUnavailable(AppError):
    kind = "store_unavailable"
    status_code = 503

    def __init__(self, message: str = "Database unavailable"):
        super().__init__(message)
