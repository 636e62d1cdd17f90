"""Comment endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from globalpoll.api.deps import get_db
from globalpoll.core.constants import MAX_FINGERPRINT_LENGTH
from globalpoll.core.identity import resolve_identity
from globalpoll.schemas import CommentCreate, CommentRead
from globalpoll.services.comment import list_comments, submit_comment

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[CommentRead])
def list_comments_endpoint(
    request: Request,
    poll_id: int = Query(..., alias="pollId"),
    device_id: Optional[str] = Query(None, alias="deviceId", max_length=MAX_FINGERPRINT_LENGTH),
    fingerprint: Optional[str] = Query(None, max_length=MAX_FINGERPRINT_LENGTH),
    db: Session = Depends(get_db)
):
    """
    Get up to 50 of the newest comments on a poll.

    Each comment carries ``isYours`` (written from the caller's IP or
    device). IP addresses and fingerprints are never returned.
    """
    identity = resolve_identity(request, fingerprint, device_id)
    return list_comments(db, poll_id, identity)


@router.post("", response_model=CommentRead, status_code=201)
def create_comment_endpoint(
    request: Request,
    comment_request: CommentCreate,
    db: Session = Depends(get_db)
):
    """
    Add a comment to a poll.

    One comment per identity per poll, independent of voting. Content is
    stripped of HTML and limited to 280 characters.

    Raises:
        ValidationError: 400 if content is empty or too long
        NotFoundError: 404 if the poll does not exist
        ConflictError: 400 if this IP or device already commented

    Example:
        Request:
            POST /api/comments
            {
                "pollId": 7,
                "content": "Public transport first, then talk about bans.",
                "answer": false,
                "deviceId": "device_1717232400000_k3j2h1"
            }

        Response (201):
            {
                "id": 3,
                "pollId": 7,
                "content": "Public transport first, then talk about bans.",
                "answer": false,
                "createdAt": "2025-06-01T10:12:00Z",
                "isYours": true
            }
    """
    identity = resolve_identity(request, comment_request.fingerprint, comment_request.device_id)
    comment = submit_comment(
        db,
        comment_request.poll_id,
        comment_request.content,
        comment_request.answer,
        identity,
    )
    return CommentRead(
        id=comment.id,
        poll_id=comment.poll_id,
        content=comment.content,
        answer=comment.answer,
        created_at=comment.created_at,
        is_yours=True,
    )
