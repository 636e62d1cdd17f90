"""Poll lifecycle business logic."""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from globalpoll.core import config
from globalpoll.core.constants import CUSTOM_CATEGORY, DEFAULT_CATEGORY, POLL_CATEGORIES
from globalpoll.core.exceptions import NotFoundError
from globalpoll.core.logging_config import get_logger
from globalpoll.core.sanitization import sanitize_custom_category, sanitize_question
from globalpoll.core.utils import is_past, utcnow
from globalpoll.db.models import Comment, Poll, Vote
from globalpoll.services.stats import PollStatistics, compute_stats, compute_stats_bulk

logger = get_logger(__name__)


def normalize_category(category: Optional[str], custom_category: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Resolve the stored (category, custom_category) pair.

    Unknown or missing categories fall back to "general"; the custom label is
    kept only for the "custom" category.
    """
    final_category = category if category in POLL_CATEGORIES else DEFAULT_CATEGORY
    if final_category != CUSTOM_CATEGORY:
        return final_category, None
    return final_category, sanitize_custom_category(custom_category)


def _deactivate_all(db: Session, except_id: Optional[int] = None) -> int:
    query = db.query(Poll).filter(Poll.is_active.is_(True))
    if except_id is not None:
        query = query.filter(Poll.id != except_id)
    return query.update({Poll.is_active: False}, synchronize_session="fetch")


def create_poll(
    db: Session,
    question: str,
    category: Optional[str] = None,
    custom_category: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Poll:
    """Create the new active poll, archiving whichever poll was active."""
    question = sanitize_question(question)
    final_category, final_custom = normalize_category(category, custom_category)

    created_at = now or utcnow()
    archived = _deactivate_all(db)

    poll = Poll(
        question=question,
        category=final_category,
        custom_category=final_custom,
        created_at=created_at,
        expires_at=created_at + timedelta(hours=config.settings.POLL_DURATION_HOURS),
        is_active=True,
    )
    db.add(poll)
    db.commit()
    db.refresh(poll)

    logger.info("poll_created", poll_id=poll.id, category=final_category, archived_polls=archived)
    return poll


def get_poll(db: Session, poll_id: int) -> Optional[Poll]:
    return db.query(Poll).filter(Poll.id == poll_id).first()


def get_poll_or_404(db: Session, poll_id: int) -> Poll:
    poll = get_poll(db, poll_id)
    if not poll:
        raise NotFoundError("Poll not found")
    return poll


def get_active_poll(db: Session) -> Optional[Poll]:
    """Return the active poll (newest first should two ever coexist)."""
    return (
        db.query(Poll)
        .filter(Poll.is_active.is_(True))
        .order_by(Poll.created_at.desc(), Poll.id.desc())
        .first()
    )


def set_active(db: Session, poll_id: int, active: bool) -> Poll:
    """Activate or deactivate a poll; activation archives every other poll."""
    poll = get_poll_or_404(db, poll_id)

    if active:
        _deactivate_all(db, except_id=poll_id)
    poll.is_active = active
    db.commit()
    db.refresh(poll)

    logger.info("poll_activation_changed", poll_id=poll_id, is_active=active)
    return poll


def update_poll(
    db: Session,
    poll_id: int,
    question: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Poll:
    """Apply a partial update; fields left as None are unchanged."""
    poll = get_poll_or_404(db, poll_id)

    if question is not None:
        poll.question = sanitize_question(question)

    if is_active is None:
        db.commit()
        db.refresh(poll)
        return poll

    return set_active(db, poll_id, is_active)


def delete_poll(db: Session, poll_id: int) -> int:
    """
    Delete a poll with all its comments and votes in one transaction.

    Returns:
        Number of removed rows (comments + votes + the poll itself)
    """
    poll = get_poll_or_404(db, poll_id)

    try:
        comments = db.query(Comment).filter(Comment.poll_id == poll_id).delete(synchronize_session=False)
        votes = db.query(Vote).filter(Vote.poll_id == poll_id).delete(synchronize_session=False)
        db.expire(poll, ["comments", "votes"])
        db.delete(poll)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("poll_deleted", poll_id=poll_id, votes=votes, comments=comments)
    return votes + comments + 1


def sweep_expired(db: Session, now: Optional[datetime] = None) -> List[int]:
    """
    Archive every active poll whose expiry time has passed.

    Safe to call repeatedly; a run with nothing expired changes nothing.

    Returns:
        IDs of the polls archived by this run
    """
    now = now or utcnow()
    archived = []
    for poll in db.query(Poll).filter(Poll.is_active.is_(True)).all():
        if is_past(poll.expires_at, now):
            poll.is_active = False
            archived.append(poll.id)

    if archived:
        db.commit()
        for poll_id in archived:
            logger.info("poll_archived", poll_id=poll_id, reason="expired")

    return archived


def list_polls(db: Session) -> List[Dict]:
    """All polls newest first, with vote and comment counts (admin view)."""
    polls = db.query(Poll).order_by(Poll.created_at.desc(), Poll.id.desc()).all()

    vote_counts = dict(
        db.query(Vote.poll_id, func.count(Vote.id)).group_by(Vote.poll_id).all()
    )
    comment_counts = dict(
        db.query(Comment.poll_id, func.count(Comment.id)).group_by(Comment.poll_id).all()
    )

    return [
        {
            "id": poll.id,
            "question": poll.question,
            "category": poll.category,
            "custom_category": poll.custom_category,
            "created_at": poll.created_at,
            "expires_at": poll.expires_at,
            "is_active": poll.is_active,
            "vote_count": vote_counts.get(poll.id, 0),
            "comment_count": comment_counts.get(poll.id, 0),
        }
        for poll in polls
    ]


def list_history(db: Session) -> List[Dict]:
    """Archived polls newest first, each with its statistics."""
    polls = (
        db.query(Poll)
        .filter(Poll.is_active.is_(False))
        .order_by(Poll.created_at.desc(), Poll.id.desc())
        .all()
    )
    stats = compute_stats_bulk(db, [poll.id for poll in polls])
    return [poll_view(poll, stats[poll.id]) for poll in polls]


def poll_view(poll: Poll, stats: PollStatistics) -> Dict:
    """Public representation of a poll with its statistics."""
    return {
        "id": poll.id,
        "question": poll.question,
        "category": poll.category or DEFAULT_CATEGORY,
        "custom_category": poll.custom_category,
        "created_at": poll.created_at,
        "expires_at": poll.expires_at,
        "statistics": stats.to_dict(),
    }


def get_active_poll_view(db: Session) -> Optional[Dict]:
    """The active poll with statistics, or None when no poll is active."""
    poll = get_active_poll(db)
    if not poll:
        return None
    return poll_view(poll, compute_stats(db, poll.id))
