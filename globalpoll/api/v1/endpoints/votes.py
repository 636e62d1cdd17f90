"""Vote endpoints."""
import logging
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional

from globalpoll.api.deps import enforce_vote_rate_limit, get_db
from globalpoll.core.cache import invalidate_poll_views
from globalpoll.core.constants import MAX_FINGERPRINT_LENGTH
from globalpoll.core.identity import resolve_identity
from globalpoll.schemas import VoteRequest, VoteResponse, VoteStatusResponse
from globalpoll.services.vote import check_vote_status, submit_vote

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=VoteResponse, dependencies=[Depends(enforce_vote_rate_limit)])
def vote_endpoint(
    request: Request,
    vote_request: VoteRequest,
    db: Session = Depends(get_db)
) -> VoteResponse:
    """
    Cast a yes/no vote on a poll.

    The voter is identified by client IP and a device fingerprint derived
    from the request headers, the optional client ``fingerprint`` and the
    optional persisted ``deviceId``. Each identity gets one vote per poll;
    votes cannot be changed afterwards.

    Args:
        request: FastAPI Request (identity headers)
        vote_request: VoteRequest with pollId, answer, fingerprint, deviceId
        db: Database session (injected)

    Returns:
        VoteResponse with the new vote id

    Raises:
        ValidationError: 400 if pollId or answer is missing
        NotFoundError: 404 if the poll does not exist
        PollClosedError: 400 if the poll is no longer active
        ConflictError: 400 if this IP or device already voted
        RateLimitedError: 429 after 30 submissions per IP per minute

    Example:
        Request:
            POST /api/votes
            {
                "pollId": 7,
                "answer": true,
                "deviceId": "device_1717232400000_k3j2h1"
            }

        Response (200):
            {
                "message": "Your vote has been recorded",
                "voteId": 42
            }

        Response (400):
            {
                "message": "You have already voted on this poll"
            }
    """
    identity = resolve_identity(request, vote_request.fingerprint, vote_request.device_id)
    vote = submit_vote(db, vote_request.poll_id, vote_request.answer, identity)

    invalidate_poll_views()
    logger.info(f"Cache invalidated: poll views (reason: vote recorded, poll_id={vote_request.poll_id})")

    return VoteResponse(message="Your vote has been recorded", vote_id=vote.id)


@router.get("/check", response_model=VoteStatusResponse, response_model_exclude_none=True)
def check_vote_endpoint(
    request: Request,
    poll_id: int = Query(..., alias="pollId"),
    fingerprint: Optional[str] = Query(None, max_length=MAX_FINGERPRINT_LENGTH),
    device_id: Optional[str] = Query(None, alias="deviceId", max_length=MAX_FINGERPRINT_LENGTH),
    db: Session = Depends(get_db)
) -> VoteStatusResponse:
    """
    Report whether the caller already voted on a poll, and how.

    Lets clients restore their UI state without keeping it locally.
    Response is ``{"hasVoted": false}`` or ``{"hasVoted": true, "vote": <bool>}``.
    """
    identity = resolve_identity(request, fingerprint, device_id)
    vote = check_vote_status(db, poll_id, identity)
    if vote is None:
        return VoteStatusResponse(has_voted=False)
    return VoteStatusResponse(has_voted=True, vote=vote.answer)
