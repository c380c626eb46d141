"""
Custom exceptions for the application.
"""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Validation error raised before any I/O is attempted."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "VALIDATION_ERROR")


class InvalidStateError(AppError):
    """Operation not allowed in the object's current lifecycle state."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "INVALID_STATE")
