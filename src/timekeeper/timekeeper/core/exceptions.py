class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "DomainError"
    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "BadRequest"
    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "Unauthorized"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "Forbidden"
    status_code = 403


class NotFoundError(DomainError):
    """Raised when a schedule, employee or record does not exist."""

    kind = "NotFound"
    status_code = 404


class ConflictError(DomainError):
    """Raised on state-incompatible transitions, duplicates and overlaps."""

    kind = "Conflict"
    status_code = 409


class DeliveryError(Exception):
    """Raised when a notification that must be delivered was not."""

    kind = "DeliveryFailed"
    status_code = 502
