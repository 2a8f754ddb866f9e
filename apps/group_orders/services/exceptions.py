"""Domain-specific exceptions for group order services."""


class GroupOrdersServiceError(Exception):
    """Base exception for group order services."""
    pass


class InvalidParametersError(GroupOrdersServiceError):
    """Raised when a request carries out-of-range or inconsistent values."""
    pass


class GroupOrderNotFoundError(GroupOrdersServiceError):
    """Raised when a group order doesn't exist."""
    pass


class ParticipantNotFoundError(GroupOrdersServiceError):
    """Raised when the vendor has no active entry in the group order."""
    pass


class GroupOrderClosedError(GroupOrdersServiceError):
    """Raised when the group order is no longer open."""
    pass


class GroupOrderExpiredError(GroupOrderClosedError):
    """Raised when the group order deadline has passed."""
    pass


class CapacityExceededError(GroupOrdersServiceError):
    """Raised when the group order already has its maximum participants."""
    pass


class AlreadyParticipatingError(GroupOrdersServiceError):
    """Raised when the vendor already has an active entry."""
    pass


class UnauthorizedError(GroupOrdersServiceError):
    """Raised when a user acts on a group order they don't own."""
    pass


class ContentionError(GroupOrdersServiceError):
    """
    Raised when the group order lock could not be taken in time.

    The operation had no effect and may be retried.
    """
    pass
