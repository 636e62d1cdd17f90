"""Database models."""
from globalpoll.db.models.poll import Poll
from globalpoll.db.models.vote import Vote
from globalpoll.db.models.comment import Comment
from globalpoll.db.models.admin import Admin

__all__ = ["Poll", "Vote", "Comment", "Admin"]
