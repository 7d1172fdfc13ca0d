"""
Domain errors raised by the services.

Each error carries the HTTP status it maps to; main.py renders them as
``{"success": false, "message": ...}``.
"""
from typing import Iterable, List


class HRError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(HRError):
    """Invalid input; carries every failed field message."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, messages: Iterable[str] = ()):
        self.messages: List[str] = [m for m in messages if m]
        super().__init__(", ".join(self.messages) or None)


class DuplicateEmail(HRError):
    status_code = 400
    default_message = "Email already exists"


class EmployeeInUse(HRError):
    status_code = 400
    default_message = "Employee is still referenced by leaves, fun tasks or projects"


class InvalidCredentials(HRError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(HRError):
    status_code = 401
    default_message = "Not authorized to access this route"


class InvalidToken(Unauthenticated):
    pass


class Forbidden(HRError):
    status_code = 403
    default_message = "Operation not permitted"


class NotFound(HRError):
    status_code = 404
    default_message = "Resource not found"
