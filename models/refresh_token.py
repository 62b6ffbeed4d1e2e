"""
RefreshToken model: opaque session credentials kept server-side so they can be revoked.
Fields:
- token (primary key): the random hex string itself
- user_id (String(36)) - FK to users.id, cascades on user delete
- created_at, updated_at, expires_at
- revoked_at: null while the token is active
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin, utcnow


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    @property
    def revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        """Usable iff not revoked and now < expires_at."""
        return not self.revoked and not self.is_expired(now)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} revoked={self.revoked}>"
