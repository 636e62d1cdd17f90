"""Vote schemas."""
from typing import Optional
from pydantic import Field

from globalpoll.core.constants import MAX_FINGERPRINT_LENGTH
from globalpoll.schemas.common import APIModel


class VoteRequest(APIModel):
    poll_id: int
    answer: bool
    fingerprint: Optional[str] = Field(None, max_length=MAX_FINGERPRINT_LENGTH)
    device_id: Optional[str] = Field(None, max_length=MAX_FINGERPRINT_LENGTH)


class VoteResponse(APIModel):
    message: str
    vote_id: int


class VoteStatusResponse(APIModel):
    has_voted: bool
    vote: Optional[bool] = None
