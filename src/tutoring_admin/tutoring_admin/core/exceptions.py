class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or invalid."""


class UnauthorizedError(DomainError):
    """Raised when a write is attempted without an authenticated identity."""


class NotFoundError(DomainError):
    """Raised when a referenced student/course/lesson does not exist."""


class PersistenceError(DomainError):
    """Raised when the store rejects or fails an operation."""


class UniquenessViolation(PersistenceError):
    """Raised when the store reports a duplicate key."""


class EmailDeliveryError(DomainError):
    """Raised by an email transport when a message could not be delivered."""
