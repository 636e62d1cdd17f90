"""Scheduler endpoint schemas."""
from datetime import datetime
from typing import List

from globalpoll.schemas.common import APIModel


class CronResponse(APIModel):
    message: str
    archived_poll_ids: List[int]


class InitResponse(APIModel):
    message: str
    timestamp: datetime
    admin_created: bool
    archived_poll_ids: List[int]
