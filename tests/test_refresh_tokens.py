"""Refresh token store against a real SQLite database."""

from datetime import timedelta

import pytest

from models.base_model import utcnow
from services.refresh_tokens import RefreshTokenStore
from utils.errors import ApiError, ErrorKind
from utils.security import hash_password


@pytest.fixture
def user(services):
    return services.storage.create_user("carol@example.com", hash_password("pw123456"))


@pytest.fixture
def store(services):
    return RefreshTokenStore(services.storage)


class TestRefreshTokenStore:
    def test_fresh_token_is_usable(self, store, user):
        record = store.issue(user.id)
        found = store.find(record.token)
        assert found is not None
        assert found.user_id == user.id
        assert found.revoked_at is None
        assert store.is_usable(found)

    def test_expiry_is_sixty_days_out(self, store, user):
        now = utcnow()
        record = store.create(store.generate(), user.id, now=now)
        assert record.expires_at == now + timedelta(days=60)

    def test_revoked_token_is_never_usable(self, store, user):
        record = store.issue(user.id)
        store.revoke(record.token)
        found = store.find(record.token)
        assert found.revoked_at is not None
        assert not store.is_usable(found)

    def test_expired_token_is_unusable_without_revocation(self, store, user):
        record = store.create(store.generate(), user.id, now=utcnow() - timedelta(days=61))
        found = store.find(record.token)
        assert found.revoked_at is None
        assert not store.is_usable(found)

    def test_revoke_twice_keeps_first_timestamp(self, store, user):
        record = store.issue(user.id)
        store.revoke(record.token)
        first = store.find(record.token).revoked_at
        store.revoke(record.token)
        assert store.find(record.token).revoked_at == first

    def test_revoke_unknown_token_is_noop(self, store):
        store.revoke("0" * 64)
        assert store.find("0" * 64) is None

    def test_unknown_token_not_found(self, store):
        assert store.find(store.generate()) is None
        assert not store.is_usable(None)

    def test_missing_owner_surfaces_store_error(self, store):
        with pytest.raises(ApiError) as exc:
            store.issue("no-such-user")
        assert exc.value.kind is ErrorKind.INTERNAL

    def test_multiple_tokens_per_user(self, store, user):
        first = store.issue(user.id)
        second = store.issue(user.id)
        assert store.is_usable(store.find(first.token))
        assert store.is_usable(store.find(second.token))

    def test_tokens_removed_with_owner(self, services, store, user):
        record = store.issue(user.id)
        services.storage.delete_all_users()
        assert store.find(record.token) is None
