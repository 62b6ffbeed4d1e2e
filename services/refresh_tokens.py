"""
Refresh token store.

Refresh tokens are opaque lookup keys, not JWTs: validity lives in the
database row so a token can be revoked immediately.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.security import generate_refresh_token

logger = logging.getLogger("chirpy.refresh_tokens")

REFRESH_TOKEN_TTL = timedelta(days=60)


class RefreshTokenStore:
    def __init__(self, storage, ttl: timedelta = REFRESH_TOKEN_TTL):
        self.storage = storage
        self.ttl = ttl

    @staticmethod
    def generate() -> str:
        return generate_refresh_token()

    def create(self, token: str, user_id: str, now: Optional[datetime] = None) -> RefreshToken:
        """Persist `token` for `user_id`, expiring `ttl` from now. Raises ApiError(INTERNAL) on a missing owner."""
        expires_at = (now or utcnow()) + self.ttl
        return self.storage.create_refresh_token(token, user_id, expires_at)

    def issue(self, user_id: str) -> RefreshToken:
        return self.create(self.generate(), user_id)

    def find(self, token: str) -> Optional[RefreshToken]:
        return self.storage.find_refresh_token(token)

    def revoke(self, token: str) -> None:
        """Idempotent; unknown tokens are a no-op."""
        if self.storage.revoke_refresh_token(token):
            logger.info("Refresh token revoked")

    def revoke_all(self, user_id: str) -> int:
        return self.storage.revoke_user_refresh_tokens(user_id)

    @staticmethod
    def is_usable(record: Optional[RefreshToken], now: Optional[datetime] = None) -> bool:
        return record is not None and record.is_usable(now)
