"""Main API router."""
from fastapi import APIRouter

from globalpoll.api.v1.endpoints import admin, auth, comments, polls, system, votes

api_router = APIRouter(prefix="/api")

# Include all endpoint routers
api_router.include_router(polls.router, prefix="/polls", tags=["Polls"])
api_router.include_router(polls.embed_router, prefix="/embed", tags=["Embed"])
api_router.include_router(votes.router, prefix="/votes", tags=["Votes"])
api_router.include_router(comments.router, prefix="/comments", tags=["Comments"])
api_router.include_router(auth.router, prefix="/admin", tags=["Authentication"])
api_router.include_router(admin.router, prefix="/admin/polls", tags=["Admin"])
api_router.include_router(system.router, tags=["Scheduler"])
