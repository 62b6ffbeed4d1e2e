"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access token creation/verification via PyJWT (HS256)
- Opaque refresh token generation
"""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from enum import Enum

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

ISSUER = "chirpy"
DEFAULT_ALGORITHM = "HS256"
REFRESH_TOKEN_BYTES = 32

ph = PasswordHasher()


class TokenErrorKind(Enum):
    INVALID = "invalid"
    EXPIRED = "expired"


class TokenError(Exception):
    """Raised by decode_access_token; `kind` tells expired from invalid."""

    def __init__(self, kind: TokenErrorKind, message: str = ""):
        super().__init__(message or f"Token {kind.value}")
        self.kind = kind


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (random salt per call)
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password against an Argon2 hash.
    Never raises for a wrong password or an unreadable hash.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(subject: str, expires_in: int, secret: str,
                        algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Sign a short-lived access token for `subject`.
    `expires_in` is taken as given; callers own the TTL policy.
    """
    iat = int(_now().timestamp())
    payload = {
        "iss": ISSUER,
        "sub": str(subject),
        "iat": iat,
        "exp": iat + int(expires_in),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str,
                        algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Verify signature and expiry and return the subject.
    A token is expired exactly when now >= exp.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError(TokenErrorKind.EXPIRED, "Token has expired")
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.INVALID, f"Invalid token: {exc}")

    subject = decoded.get("sub")
    if not subject or not isinstance(subject, str):
        raise TokenError(TokenErrorKind.INVALID, "Invalid token: missing subject")
    return subject


def generate_refresh_token() -> str:
    """256 bits from the OS CSPRNG as 64 lowercase hex characters."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)
