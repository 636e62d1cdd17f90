"""Public poll endpoints: active poll, history and embed widget."""
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from globalpoll.api.deps import get_db
from globalpoll.core import config
from globalpoll.core.cache import global_cache
from globalpoll.core.constants import CACHE_KEY_ACTIVE_POLL, CACHE_KEY_POLL_HISTORY
from globalpoll.core.exceptions import NotFoundError
from globalpoll.schemas import EmbedPoll, PollWithStatistics
from globalpoll.services.poll import get_active_poll_view, list_history

logger = logging.getLogger(__name__)
router = APIRouter()
embed_router = APIRouter()


def _cached_active_poll(db: Session) -> dict:
    view = global_cache.get_or_fetch(
        CACHE_KEY_ACTIVE_POLL,
        lambda: get_active_poll_view(db),
        ttl_seconds=config.settings.CACHE_TTL_SECONDS,
    )
    if view is None:
        raise NotFoundError("No active poll found")
    return view


@router.get("", response_model=PollWithStatistics)
def get_active_poll_endpoint(db: Session = Depends(get_db)):
    """
    Get the currently active poll with its vote statistics.

    Returns:
        PollWithStatistics for the active poll

    Raises:
        NotFoundError: 404 when no poll is active

    Example:
        Response (200):
            {
                "id": 7,
                "question": "Should cities ban cars downtown?",
                "category": "climate",
                "customCategory": null,
                "createdAt": "2025-06-01T09:00:00Z",
                "expiresAt": "2025-06-02T09:00:00Z",
                "statistics": {
                    "totalVotes": 4,
                    "yesVotes": 3,
                    "noVotes": 1,
                    "yesPercentage": 75,
                    "noPercentage": 25
                }
            }

    Cache:
        Served from the read cache (CACHE_TTL_SECONDS); votes and admin
        changes invalidate it.
    """
    return _cached_active_poll(db)


@router.get("/history", response_model=List[PollWithStatistics])
def get_poll_history_endpoint(db: Session = Depends(get_db)):
    """
    Get archived polls, newest first, each with its statistics.

    Statistics for all polls come from a single grouped query.
    """
    return global_cache.get_or_fetch(
        CACHE_KEY_POLL_HISTORY,
        lambda: list_history(db),
        ttl_seconds=config.settings.CACHE_TTL_SECONDS,
    )


@embed_router.get("", response_model=EmbedPoll)
def get_embed_poll_endpoint(db: Session = Depends(get_db)):
    """Minimal active-poll payload for the iframe widget (404 when none)."""
    return _cached_active_poll(db)
