"""Pydantic schemas for request/response validation."""
from globalpoll.schemas.auth import AdminInfo, AdminLoginRequest, AdminLoginResponse
from globalpoll.schemas.comment import CommentCreate, CommentRead
from globalpoll.schemas.common import APIModel, ErrorResponse, MessageResponse
from globalpoll.schemas.poll import (
    AdminPollDetail,
    AdminPollSummary,
    EmbedPoll,
    PollCreate,
    PollRead,
    PollStatisticsSchema,
    PollUpdate,
    PollWithStatistics,
    VoteSummary,
)
from globalpoll.schemas.system import CronResponse, InitResponse
from globalpoll.schemas.vote import VoteRequest, VoteResponse, VoteStatusResponse

__all__ = [
    "AdminInfo",
    "AdminLoginRequest",
    "AdminLoginResponse",
    "CommentCreate",
    "CommentRead",
    "APIModel",
    "ErrorResponse",
    "MessageResponse",
    "AdminPollDetail",
    "AdminPollSummary",
    "EmbedPoll",
    "PollCreate",
    "PollRead",
    "PollStatisticsSchema",
    "PollUpdate",
    "PollWithStatistics",
    "VoteSummary",
    "CronResponse",
    "InitResponse",
    "VoteRequest",
    "VoteResponse",
    "VoteStatusResponse",
]
