"""Session lifecycle service: login, refresh, revoke, self-update, TTL policy."""

from datetime import timedelta

import jwt
import pytest

from models.base_model import utcnow
from services.sessions import (
    MAX_ACCESS_TOKEN_TTL,
    SessionManager,
    SessionSettings,
    clamp_ttl,
)
from utils.errors import ApiError, ErrorKind
from utils.security import decode_access_token, verify_password

SECRET = "session-secret"


@pytest.fixture
def sessions(services):
    return SessionManager(services.storage, SessionSettings(jwt_secret=SECRET))


@pytest.fixture
def dave(sessions):
    return sessions.register("dave@example.com", "pw123456")


class TestClampTtl:
    @pytest.mark.parametrize("requested", [None, 0, -1, -3600, 3601, 10_000, True, "60"])
    def test_out_of_policy_falls_back_to_ceiling(self, requested):
        assert clamp_ttl(requested) == MAX_ACCESS_TOKEN_TTL

    @pytest.mark.parametrize("requested", [1, 60, 3600])
    def test_in_policy_kept(self, requested):
        assert clamp_ttl(requested) == requested


class TestSessionSettings:
    def test_rejects_unknown_policy(self):
        with pytest.raises(ValueError):
            SessionSettings(jwt_secret="x", refresh_token_policy="sometimes")

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            SessionSettings(jwt_secret="")

    def test_from_config(self):
        settings = SessionSettings.from_config({
            "JWT_SECRET": "s",
            "REFRESH_TOKEN_TTL_DAYS": "7",
            "REFRESH_TOKEN_POLICY": "rotate",
        })
        assert settings.refresh_token_ttl == timedelta(days=7)
        assert settings.refresh_token_policy == "rotate"


class TestLogin:
    def test_login_returns_both_tokens(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456")
        assert result.user.id == dave.id
        assert decode_access_token(result.token, SECRET) == dave.id
        assert len(result.refresh_token) == 64

    def test_requested_ttl_is_clamped(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456", expires_in=99999)
        claims = jwt.decode(result.token, SECRET, algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == 3600

    def test_short_ttl_honoured(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456", expires_in=30)
        claims = jwt.decode(result.token, SECRET, algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == 30

    def test_unknown_email_and_wrong_password_look_alike(self, sessions, dave):
        with pytest.raises(ApiError) as missing:
            sessions.login("nobody@example.com", "pw123456")
        with pytest.raises(ApiError) as wrong:
            sessions.login("dave@example.com", "wrong-password")
        assert missing.value.kind is wrong.value.kind is ErrorKind.UNAUTHORIZED
        assert missing.value.message == wrong.value.message

    def test_unknown_email_still_verifies_a_password(self, sessions, monkeypatch):
        calls = []

        def spy(password, password_hash):
            calls.append(password_hash)
            return verify_password(password, password_hash)

        monkeypatch.setattr("services.sessions.verify_password", spy)
        with pytest.raises(ApiError):
            sessions.login("nobody@example.com", "pw123456")
        assert len(calls) == 1
        assert calls[0].startswith("$argon2")

    def test_logins_accumulate_sessions_by_default(self, sessions, dave):
        first = sessions.login("dave@example.com", "pw123456")
        sessions.login("dave@example.com", "pw123456")
        assert sessions.refresh(first.refresh_token)

    def test_rotate_policy_revokes_older_sessions(self, services, dave):
        rotating = SessionManager(
            services.storage, SessionSettings(jwt_secret=SECRET, refresh_token_policy="rotate")
        )
        first = rotating.login("dave@example.com", "pw123456")
        second = rotating.login("dave@example.com", "pw123456")
        with pytest.raises(ApiError) as exc:
            rotating.refresh(first.refresh_token)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED
        assert rotating.refresh(second.refresh_token)


class TestRefreshAndRevoke:
    def test_refresh_mints_access_token_and_keeps_refresh_token(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456")
        token = sessions.refresh(result.refresh_token)
        assert decode_access_token(token, SECRET) == dave.id
        store = sessions.refresh_tokens
        assert store.is_usable(store.find(result.refresh_token))

    def test_refresh_defers_to_store_usability(self, sessions, dave, monkeypatch):
        result = sessions.login("dave@example.com", "pw123456")
        monkeypatch.setattr(sessions.refresh_tokens, "is_usable", lambda record, now=None: False)
        with pytest.raises(ApiError) as exc:
            sessions.refresh(result.refresh_token)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_unknown_refresh_token(self, sessions):
        with pytest.raises(ApiError) as exc:
            sessions.refresh("f" * 64)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_revoked_refresh_token(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456")
        sessions.revoke(result.refresh_token)
        with pytest.raises(ApiError) as exc:
            sessions.refresh(result.refresh_token)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_expired_refresh_token(self, sessions, dave):
        store = sessions.refresh_tokens
        record = store.create(store.generate(), dave.id, now=utcnow() - timedelta(days=60, seconds=1))
        with pytest.raises(ApiError) as exc:
            sessions.refresh(record.token)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_access_token_is_not_a_refresh_token(self, sessions, dave):
        result = sessions.login("dave@example.com", "pw123456")
        with pytest.raises(ApiError):
            sessions.refresh(result.token)

    def test_revoke_is_idempotent(self, sessions):
        sessions.revoke("a" * 64)
        sessions.revoke("a" * 64)


class TestUpdateCredentials:
    def test_updates_email_and_password(self, services, sessions, dave):
        user = sessions.update_credentials(dave.id, "dave2@example.com", "newpass99")
        assert user.email == "dave2@example.com"
        assert verify_password("newpass99", services.storage.get_user(dave.id).password_hash)

    @pytest.mark.parametrize("email,password", [(None, "newpass99"), ("d@example.com", None), ("", "")])
    def test_partial_update_rejected(self, sessions, dave, email, password):
        with pytest.raises(ApiError) as exc:
            sessions.update_credentials(dave.id, email, password)
        assert exc.value.kind is ErrorKind.BAD_REQUEST

    def test_taken_email_conflicts(self, sessions, dave):
        sessions.register("erin@example.com", "pw123456")
        with pytest.raises(ApiError) as exc:
            sessions.update_credentials(dave.id, "erin@example.com", "newpass99")
        assert exc.value.kind is ErrorKind.CONFLICT

    def test_unknown_user(self, sessions):
        with pytest.raises(ApiError) as exc:
            sessions.update_credentials("ghost", "g@example.com", "newpass99")
        assert exc.value.kind is ErrorKind.NOT_FOUND
