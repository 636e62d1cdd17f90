"""Shared API dependencies."""
from fastapi import Request

from globalpoll.core import rate_limit
from globalpoll.core.exceptions import RateLimitedError
from globalpoll.core.identity import get_client_ip
from globalpoll.core.logging_config import get_logger
from globalpoll.core.security import verify_admin_token, verify_cron_secret
from globalpoll.db import get_db, get_db_context

logger = get_logger(__name__)


def enforce_vote_rate_limit(request: Request) -> None:
    """Admit or reject a vote submission based on the client IP."""
    client_ip = get_client_ip(request.headers)
    decision = rate_limit.vote_limiter.admit(client_ip)
    if not decision.allowed:
        logger.warning("rate_limit_exceeded", client_ip=client_ip, retry_after=decision.retry_after)
        raise RateLimitedError(retry_after=decision.retry_after)


__all__ = [
    "get_db",
    "get_db_context",
    "verify_admin_token",
    "verify_cron_secret",
    "enforce_vote_rate_limit",
]
