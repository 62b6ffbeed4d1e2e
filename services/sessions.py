"""
Session lifecycle: login, refresh, revoke and self-update.

Access tokens are minted by utils.security; refresh tokens live in the
RefreshTokenStore. Both are composed here behind one policy boundary.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from datetime import timedelta
from typing import Optional, Mapping, Any

from models.user import User
from services.refresh_tokens import RefreshTokenStore, REFRESH_TOKEN_TTL
from utils.errors import unauthorized, not_found, bad_request
from utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    DEFAULT_ALGORITHM,
)

logger = logging.getLogger("chirpy.sessions")

MAX_ACCESS_TOKEN_TTL = 3600
POLICY_ACCUMULATE = "accumulate"
POLICY_ROTATE = "rotate"
REFRESH_POLICIES = (POLICY_ACCUMULATE, POLICY_ROTATE)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """Hash checked when the email is unknown, so both failures cost one argon2 verify."""
    return hash_password("chirpy-unknown-account")


@dataclass(frozen=True)
class SessionSettings:
    jwt_secret: str
    jwt_algorithm: str = DEFAULT_ALGORITHM
    max_access_token_ttl: int = MAX_ACCESS_TOKEN_TTL
    refresh_token_ttl: timedelta = REFRESH_TOKEN_TTL
    refresh_token_policy: str = POLICY_ACCUMULATE

    def __post_init__(self):
        if not self.jwt_secret:
            raise ValueError("jwt_secret must be set")
        if self.refresh_token_policy not in REFRESH_POLICIES:
            raise ValueError(f"refresh_token_policy must be one of {REFRESH_POLICIES}")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SessionSettings":
        return cls(
            jwt_secret=config["JWT_SECRET"],
            jwt_algorithm=config.get("JWT_ALGORITHM", DEFAULT_ALGORITHM),
            max_access_token_ttl=int(config.get("ACCESS_TOKEN_MAX_TTL_SECONDS", MAX_ACCESS_TOKEN_TTL)),
            refresh_token_ttl=timedelta(days=int(config.get("REFRESH_TOKEN_TTL_DAYS", 60))),
            refresh_token_policy=config.get("REFRESH_TOKEN_POLICY", POLICY_ACCUMULATE),
        )


@dataclass
class LoginResult:
    user: User
    token: str
    refresh_token: str


def clamp_ttl(requested, ceiling: int = MAX_ACCESS_TOKEN_TTL) -> int:
    """Absent, non-positive or over-ceiling TTLs fall back to the ceiling."""
    if requested is None or isinstance(requested, bool) or not isinstance(requested, int):
        return ceiling
    if requested <= 0 or requested > ceiling:
        return ceiling
    return requested


class SessionManager:
    def __init__(self, storage, settings: SessionSettings):
        self.storage = storage
        self.settings = settings
        self.refresh_tokens = RefreshTokenStore(storage, ttl=settings.refresh_token_ttl)

    def issue_access_token(self, user_id: str, expires_in: Optional[int] = None) -> str:
        ttl = clamp_ttl(expires_in, self.settings.max_access_token_ttl)
        return create_access_token(user_id, ttl, self.settings.jwt_secret, self.settings.jwt_algorithm)

    def register(self, email: str, password: str) -> User:
        user = self.storage.create_user(email, hash_password(password))
        logger.info("User %s registered", user.id)
        return user

    def login(self, email: str, password: str, expires_in: Optional[int] = None) -> LoginResult:
        user = self.storage.get_user_by_email(email)
        # unknown email and wrong password look the same to the caller, timing included
        password_hash = user.password_hash if user else _dummy_password_hash()
        if not verify_password(password, password_hash) or not user:
            logger.warning("Failed login attempt")
            raise unauthorized("Incorrect email or password")

        if self.settings.refresh_token_policy == POLICY_ROTATE:
            revoked = self.refresh_tokens.revoke_all(user.id)
            if revoked:
                logger.info("Rotated %d refresh token(s) for user %s", revoked, user.id)

        token = self.issue_access_token(user.id, expires_in)
        record = self.refresh_tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return LoginResult(user=user, token=token, refresh_token=record.token)

    def refresh(self, refresh_token: str) -> str:
        """Mint a new access token; the refresh token itself stays valid."""
        record = self.refresh_tokens.find(refresh_token)
        if not self.refresh_tokens.is_usable(record):
            if record is not None and record.revoked:
                logger.warning("Revoked refresh token presented for user %s", record.user_id)
            raise unauthorized("Invalid or expired refresh token")
        return self.issue_access_token(record.user_id)

    def revoke(self, refresh_token: str) -> None:
        self.refresh_tokens.revoke(refresh_token)

    def update_credentials(self, user_id: str, email: Optional[str], password: Optional[str]) -> User:
        if not email or not password:
            raise bad_request("Email and password are required")
        user = self.storage.update_user(user_id, email=email, password_hash=hash_password(password))
        if user is None:
            # token outlived its user
            raise not_found("User not found")
        logger.info("User %s updated credentials", user.id)
        return user
