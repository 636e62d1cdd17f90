"""Poll schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from globalpoll.core.constants import MAX_CUSTOM_CATEGORY_LENGTH, MAX_QUESTION_LENGTH
from globalpoll.schemas.common import APIModel


class PollCreate(APIModel):
    question: str = Field(..., min_length=1, max_length=MAX_QUESTION_LENGTH)
    category: Optional[str] = None
    custom_category: Optional[str] = Field(None, max_length=MAX_CUSTOM_CATEGORY_LENGTH)


class PollUpdate(APIModel):
    question: Optional[str] = Field(None, min_length=1, max_length=MAX_QUESTION_LENGTH)
    is_active: Optional[bool] = None


class PollStatisticsSchema(APIModel):
    total_votes: int
    yes_votes: int
    no_votes: int
    yes_percentage: int
    no_percentage: int


class PollRead(APIModel):
    id: int
    question: str
    category: str
    custom_category: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    is_active: bool


class PollWithStatistics(APIModel):
    """Public view of a poll: the active poll and each history entry."""
    id: int
    question: str
    category: str
    custom_category: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    statistics: PollStatisticsSchema


class EmbedPoll(APIModel):
    """Minimal payload for the iframe widget."""
    id: int
    question: str
    category: str
    custom_category: Optional[str] = None
    statistics: PollStatisticsSchema


class AdminPollSummary(PollRead):
    vote_count: int
    comment_count: int


class VoteSummary(APIModel):
    id: int
    answer: bool
    created_at: datetime
    updated_at: datetime


class AdminPollDetail(PollRead):
    votes: List[VoteSummary]
