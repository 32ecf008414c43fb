from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails.

    The default message is shared by every credential failure so that
    an unknown email and a wrong password are indistinguishable.
    """

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when a record with the same key already exists."""


class PredictionError(UserError):
    """Raised when the mood-prediction service fails or is unreachable."""


class StoreError(Exception):
    """Raised when the document store fails.

    Not a UserError: the underlying driver message is logged, never shown.
    Callers should treat it as retryable.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"Store operation '{operation}' failed")
        self.operation = operation
