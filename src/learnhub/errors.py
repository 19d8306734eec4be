"""Domain exceptions mapped to HTTP responses by middleware.error_handler."""

from __future__ import annotations


class LearnHubError(Exception):
    """Base class for errors raised by LearnHub services."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(LearnHubError):
    """A required field is missing or a value is out of range."""

    status_code = 400


class NotAuthenticatedError(LearnHubError):
    """No signed-in user for an operation that needs one."""

    status_code = 401


class PermissionDeniedError(LearnHubError):
    """Signed-in user lacks the role the operation needs."""

    status_code = 403


class NotFoundError(LearnHubError):
    """Referenced record does not exist."""

    status_code = 404


class ConflictError(LearnHubError):
    """Operation would duplicate an existing record."""

    status_code = 409
