"""Comment business logic."""
from typing import Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from globalpoll.core.constants import COMMENTS_PAGE_SIZE
from globalpoll.core.exceptions import ConflictError
from globalpoll.core.identity import Identity
from globalpoll.core.logging_config import get_logger
from globalpoll.core.sanitization import sanitize_comment
from globalpoll.core.utils import utcnow
from globalpoll.db.models import Comment
from globalpoll.services.poll import get_poll_or_404

logger = get_logger(__name__)

ALREADY_COMMENTED = "You have already submitted a comment for this poll"
ALREADY_COMMENTED_DEVICE = "You have already submitted a comment for this poll from this device"


def find_comment(db: Session, poll_id: int, identity: Identity) -> Optional[Comment]:
    return db.query(Comment).filter(
        Comment.poll_id == poll_id,
        or_(
            Comment.ip_address == identity.ip_address,
            Comment.device_fingerprint == identity.device_fingerprint,
        )
    ).order_by(Comment.id).first()


def submit_comment(
    db: Session,
    poll_id: int,
    content: str,
    answer: bool,
    identity: Identity,
) -> Comment:
    """
    Add the identity's comment to a poll (one per identity per poll).

    Comment dedup is independent of votes: having voted neither requires nor
    prevents a comment.

    Raises:
        NotFoundError: poll does not exist
        ValidationError: content empty or longer than 280 characters
        ConflictError: this IP or device already commented on the poll
    """
    get_poll_or_404(db, poll_id)
    content = sanitize_comment(content)

    existing = find_comment(db, poll_id, identity)
    if existing:
        logger.info("duplicate_comment_rejected", poll_id=poll_id, comment_id=existing.id)
        if existing.ip_address == identity.ip_address:
            raise ConflictError(ALREADY_COMMENTED)
        raise ConflictError(ALREADY_COMMENTED_DEVICE)

    now = utcnow()
    comment = Comment(
        poll_id=poll_id,
        content=content,
        answer=answer,
        ip_address=identity.ip_address,
        device_fingerprint=identity.device_fingerprint,
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(comment)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("duplicate_comment_rejected", poll_id=poll_id, reason="constraint")
        raise ConflictError(ALREADY_COMMENTED)

    db.refresh(comment)
    logger.info("comment_created", poll_id=poll_id, comment_id=comment.id)
    return comment


def is_own_comment(comment: Comment, identity: Identity) -> bool:
    return (
        comment.ip_address == identity.ip_address
        or comment.device_fingerprint == identity.device_fingerprint
    )


def list_comments(
    db: Session,
    poll_id: int,
    identity: Identity,
    limit: int = COMMENTS_PAGE_SIZE,
) -> List[Dict]:
    """
    Newest comments on a poll, each flagged with whether ``identity`` wrote it.

    The returned dicts never include the IP address or fingerprint.
    """
    comments = (
        db.query(Comment)
        .filter(Comment.poll_id == poll_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": comment.id,
            "poll_id": comment.poll_id,
            "content": comment.content,
            "answer": comment.answer,
            "created_at": comment.created_at,
            "is_yours": is_own_comment(comment, identity),
        }
        for comment in comments
    ]
