"""Admin model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, DateTime, Integer, String

from globalpoll.db.base import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)  # Argon2 encoded hash
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
