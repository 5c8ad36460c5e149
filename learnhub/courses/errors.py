"""
Error taxonomy for course, enrollment and certificate operations.

Services raise these; the exception handlers in learnhub.main turn them
into the JSON envelope with the matching HTTP status.
"""


class LearnHubError(Exception):
    """Base class for domain errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(LearnHubError):
    """Entity absent."""

    status_code = 404


class ConflictError(LearnHubError):
    """Duplicate enrollment or duplicate unique field."""

    status_code = 400


class InvalidStateError(LearnHubError):
    """Action not permitted in the entity's current state."""

    status_code = 400


class ForbiddenError(LearnHubError):
    """Ownership check failed."""

    status_code = 403


class UnexpectedError(LearnHubError):
    """Data store or rendering failure."""

    status_code = 500
