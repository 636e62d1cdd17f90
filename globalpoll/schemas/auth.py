"""Authentication schemas."""
from pydantic import Field

from globalpoll.schemas.common import APIModel


class AdminLoginRequest(APIModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class AdminInfo(APIModel):
    id: int
    username: str


class AdminLoginResponse(APIModel):
    message: str
    admin: AdminInfo
