"""Vote business logic."""
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from globalpoll.core.exceptions import ConflictError, PollClosedError
from globalpoll.core.identity import Identity
from globalpoll.core.logging_config import get_logger
from globalpoll.core.utils import utcnow
from globalpoll.db.models import Vote
from globalpoll.services.poll import get_poll_or_404

logger = get_logger(__name__)

ALREADY_VOTED = "You have already voted on this poll"
ALREADY_VOTED_DEVICE = "You have already voted on this poll from this device"


def find_vote(db: Session, poll_id: int, identity: Identity) -> Optional[Vote]:
    """Find the vote cast by ``identity`` (matching IP or device) on a poll."""
    return db.query(Vote).filter(
        Vote.poll_id == poll_id,
        or_(
            Vote.ip_address == identity.ip_address,
            Vote.device_fingerprint == identity.device_fingerprint,
        )
    ).order_by(Vote.id).first()


def submit_vote(db: Session, poll_id: int, answer: bool, identity: Identity) -> Vote:
    """
    Record a vote; an identity gets exactly one vote per poll.

    Votes are never updated. Resubmitting, even with a different answer, is
    rejected.

    Raises:
        NotFoundError: poll does not exist
        PollClosedError: poll is no longer active
        ConflictError: this IP or device already voted on the poll
    """
    poll = get_poll_or_404(db, poll_id)

    if not poll.is_active:
        raise PollClosedError("This poll has expired")

    existing = find_vote(db, poll_id, identity)
    if existing:
        logger.info("duplicate_vote_rejected", poll_id=poll_id, vote_id=existing.id)
        if existing.ip_address == identity.ip_address:
            raise ConflictError(ALREADY_VOTED)
        raise ConflictError(ALREADY_VOTED_DEVICE)

    now = utcnow()
    vote = Vote(
        poll_id=poll_id,
        ip_address=identity.ip_address,
        device_fingerprint=identity.device_fingerprint,
        answer=answer,
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(vote)
        db.commit()
    except IntegrityError:
        # Concurrent submission from the same identity won the race; the
        # unique constraints on (poll_id, ip_address) and
        # (poll_id, device_fingerprint) rejected this one.
        db.rollback()
        logger.info("duplicate_vote_rejected", poll_id=poll_id, reason="constraint")
        raise ConflictError(ALREADY_VOTED)

    db.refresh(vote)
    logger.info("vote_recorded", poll_id=poll_id, vote_id=vote.id)
    return vote


def check_vote_status(db: Session, poll_id: int, identity: Identity) -> Optional[Vote]:
    """Return the identity's vote on the poll, if any. Read-only."""
    return find_vote(db, poll_id, identity)
