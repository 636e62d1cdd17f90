"""Comment model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from globalpoll.core.constants import MAX_COMMENT_LENGTH, MAX_IP_LENGTH
from globalpoll.db.base import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    poll_id = Column(Integer, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(MAX_COMMENT_LENGTH), nullable=False)
    answer = Column(Boolean, nullable=False)
    ip_address = Column(String(MAX_IP_LENGTH), nullable=False)
    device_fingerprint = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # Relationships
    poll = relationship("Poll", back_populates="comments")

    __table_args__ = (
        Index("idx_comments_poll_created", "poll_id", "created_at"),
        UniqueConstraint("poll_id", "ip_address", name="uq_comment_poll_ip"),
        UniqueConstraint("poll_id", "device_fingerprint", name="uq_comment_poll_device"),
    )
