"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers registered in
``globalpoll.main`` turn them into ``{"message": ...}`` JSON bodies.
"""
from typing import Optional


class PollSiteError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PollSiteError):
    """Missing or invalid input."""

    status_code = 400


class NotFoundError(PollSiteError):
    """Poll or other resource does not exist."""

    status_code = 404


class ConflictError(PollSiteError):
    """The identity already voted or commented on this poll."""

    status_code = 400


class PollClosedError(PollSiteError):
    """The poll exists but no longer accepts votes."""

    status_code = 400


class AuthenticationError(PollSiteError):
    """Credentials or admin token rejected."""

    status_code = 401


class RateLimitedError(PollSiteError):
    """Too many vote submissions from one client."""

    status_code = 429

    def __init__(self, message: str = "Too many requests, please try again later",
                 retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after
