"""Comment schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field

from globalpoll.core.constants import MAX_FINGERPRINT_LENGTH
from globalpoll.schemas.common import APIModel


class CommentCreate(APIModel):
    poll_id: int
    # Length ceiling is enforced by the service so the client gets a specific message
    content: str
    answer: bool
    fingerprint: Optional[str] = Field(None, max_length=MAX_FINGERPRINT_LENGTH)
    device_id: Optional[str] = Field(None, max_length=MAX_FINGERPRINT_LENGTH)


class CommentRead(APIModel):
    id: int
    poll_id: int
    content: str
    answer: bool
    created_at: datetime
    is_yours: bool
