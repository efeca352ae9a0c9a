"""Domain-level exception hierarchy."""


class DomainError(Exception):
    """Base exception for service-layer errors."""

    def __init__(self, message: str = "Domain error") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Raised when a requested resource cannot be located."""


class ConflictError(DomainError):
    """Raised when a unique field or business rule is violated."""


class DuplicateEmailError(ConflictError):
    """Raised when an email address is already registered."""


class ForbiddenError(DomainError):
    """Raised when a user attempts an operation they are not allowed to perform."""


class ValidationError(DomainError):
    """Raised when input fails validation rules."""


class UnauthorizedError(DomainError):
    """Raised when authentication credentials are missing or invalid."""


class UploadFailedError(DomainError):
    """Raised when a resume could not be stored."""


class InvalidUploadError(UploadFailedError):
    """Raised when an uploaded resume is missing, of the wrong type or too large."""


class UpstreamError(DomainError):
    """Raised when a third-party provider (geocoding, SMTP) fails."""
