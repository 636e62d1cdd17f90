"""Poll model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from globalpoll.core.constants import (
    DEFAULT_CATEGORY,
    MAX_CUSTOM_CATEGORY_LENGTH,
    MAX_QUESTION_LENGTH,
)
from globalpoll.db.base import Base


class Poll(Base):
    __tablename__ = "polls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question = Column(String(MAX_QUESTION_LENGTH), nullable=False)
    category = Column(String(20), nullable=False, default=DEFAULT_CATEGORY)
    custom_category = Column(String(MAX_CUSTOM_CATEGORY_LENGTH), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    votes = relationship("Vote", back_populates="poll", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="poll", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_polls_active", "is_active"),
        Index("idx_polls_created", "created_at"),
    )
