"""Admin poll management endpoints."""
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from globalpoll.api.deps import get_db, verify_admin_token
from globalpoll.core.cache import invalidate_poll_views
from globalpoll.db.models import Vote
from globalpoll.schemas import (
    AdminPollDetail,
    AdminPollSummary,
    MessageResponse,
    PollCreate,
    PollRead,
    PollUpdate,
    VoteSummary,
)
from globalpoll.services.poll import (
    create_poll,
    delete_poll,
    get_poll_or_404,
    list_polls,
    update_poll,
)

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("", response_model=List[AdminPollSummary])
def list_polls_endpoint(db: Session = Depends(get_db)):
    """Get every poll, newest first, with vote and comment counts (admin only)."""
    return list_polls(db)


@router.post("", response_model=PollRead, status_code=201)
def create_poll_endpoint(poll: PollCreate, db: Session = Depends(get_db)):
    """
    Create the new active poll (admin only).

    Every currently active poll is archived first. The new poll expires
    POLL_DURATION_HOURS (24) after creation. Unknown categories fall back to
    "general"; customCategory is kept only for the "custom" category.

    Example:
        Request:
            POST /api/admin/polls
            {
                "question": "Should the office go four days a week?",
                "category": "custom",
                "customCategory": "Work"
            }

        Response (201):
            {
                "id": 8,
                "question": "Should the office go four days a week?",
                "category": "custom",
                "customCategory": "Work",
                "createdAt": "2025-06-02T09:00:00Z",
                "expiresAt": "2025-06-03T09:00:00Z",
                "isActive": true
            }
    """
    created = create_poll(db, poll.question, poll.category, poll.custom_category)

    invalidate_poll_views()
    logger.info(f"Cache invalidated: poll views (reason: poll created, poll_id={created.id})")

    return created


@router.get("/{poll_id}", response_model=AdminPollDetail)
def get_poll_endpoint(poll_id: int, db: Session = Depends(get_db)):
    """Get one poll with its votes; voter IPs and fingerprints are omitted (admin only)."""
    poll = get_poll_or_404(db, poll_id)
    votes = db.query(Vote).filter(Vote.poll_id == poll_id).order_by(Vote.id).all()
    return AdminPollDetail(
        id=poll.id,
        question=poll.question,
        category=poll.category,
        custom_category=poll.custom_category,
        created_at=poll.created_at,
        expires_at=poll.expires_at,
        is_active=poll.is_active,
        votes=[VoteSummary.model_validate(vote) for vote in votes],
    )


@router.patch("/{poll_id}", response_model=PollRead)
def update_poll_endpoint(poll_id: int, changes: PollUpdate, db: Session = Depends(get_db)):
    """
    Update a poll's question and/or active flag (admin only).

    Activating a poll archives every other poll.
    """
    updated = update_poll(db, poll_id, question=changes.question, is_active=changes.is_active)

    invalidate_poll_views()
    logger.info(f"Cache invalidated: poll views (reason: poll updated, poll_id={poll_id})")

    return updated


@router.delete("/{poll_id}", response_model=MessageResponse)
def delete_poll_endpoint(poll_id: int, db: Session = Depends(get_db)):
    """Delete a poll together with its votes and comments (admin only)."""
    delete_poll(db, poll_id)

    invalidate_poll_views()
    logger.info(f"Cache invalidated: poll views (reason: poll deleted, poll_id={poll_id})")

    return MessageResponse(message="Poll deleted successfully")
