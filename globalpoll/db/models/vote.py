"""Vote model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from globalpoll.core.constants import MAX_IP_LENGTH
from globalpoll.db.base import Base


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    poll_id = Column(Integer, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False)
    ip_address = Column(String(MAX_IP_LENGTH), nullable=False)
    device_fingerprint = Column(String(64), nullable=False)  # HMAC-SHA256 output (64 hex chars)
    answer = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # Relationships
    poll = relationship("Poll", back_populates="votes")

    __table_args__ = (
        Index("idx_votes_poll", "poll_id"),
        UniqueConstraint("poll_id", "ip_address", name="uq_vote_poll_ip"),
        UniqueConstraint("poll_id", "device_fingerprint", name="uq_vote_poll_device"),
    )
