class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``code`` so callers (HTTP layer, batch
    reports) can tell error kinds apart without matching on messages.
    """

    code = "domain_error"
    http_status = 400
    retryable = False


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class NotFoundError(DomainError):
    """Unknown employee, leave type, entitlement or request."""

    code = "not_found"
    http_status = 404


class InvalidTypeError(DomainError):
    """Leave type unknown or not available to the employee (e.g. gender restriction)."""

    code = "invalid_type"
    http_status = 422


class InvalidRangeError(DomainError):
    """End date before start date, a range that counts zero days, or one crossing a year."""

    code = "invalid_range"
    http_status = 422


class MissingReasonError(DomainError):
    """Leave type requires a special reason and none was given."""

    code = "missing_reason"
    http_status = 422


class InsufficientBalanceError(DomainError):
    code = "insufficient_balance"
    http_status = 409


class InvalidTransitionError(DomainError):
    """Decision or cancellation on a request that is not in an eligible state."""

    code = "invalid_transition"
    http_status = 409


class AlreadyProcessedError(DomainError):
    """Carry-forward already ran for this org and year."""

    code = "already_processed"
    http_status = 409


class OverReleaseError(DomainError):
    """Release would push remaining above total: more days released than reserved."""

    code = "over_release"
    http_status = 500


class LockTimeoutError(DomainError):
    """Could not acquire a ledger lock in time. Safe to retry."""

    code = "lock_timeout"
    http_status = 503
    retryable = True
