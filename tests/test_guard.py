"""Unit tests for bearer/API key extraction and the ownership check."""

from types import SimpleNamespace

import pytest

from utils.decorators import authenticate, authorize_ownership, get_api_key, get_bearer_token
from utils.errors import ApiError, ErrorKind
from utils.security import create_access_token

SECRET = "guard-secret"


def fake_request(authorization=None):
    headers = {} if authorization is None else {"Authorization": authorization}
    return SimpleNamespace(headers=headers)


class TestBearerExtraction:
    def test_returns_token_after_prefix(self):
        assert get_bearer_token(fake_request("Bearer abc.def.ghi")) == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "bearer abc", "ApiKey abc", "Bearer "])
    def test_missing_or_wrong_prefix_is_unauthorized(self, header):
        with pytest.raises(ApiError) as exc:
            get_bearer_token(fake_request(header))
        assert exc.value.kind is ErrorKind.UNAUTHORIZED


class TestApiKeyExtraction:
    def test_returns_key(self):
        assert get_api_key(fake_request("ApiKey f271c81ff7084ee5b99a5091b42d486e")) == "f271c81ff7084ee5b99a5091b42d486e"

    def test_bearer_prefix_rejected(self):
        with pytest.raises(ApiError) as exc:
            get_api_key(fake_request("Bearer abc"))
        assert exc.value.kind is ErrorKind.UNAUTHORIZED


class TestAuthenticate:
    def test_valid_token_yields_subject(self):
        token = create_access_token("user-1", 60, SECRET)
        assert authenticate(fake_request(f"Bearer {token}"), SECRET) == "user-1"

    def test_expired_token_is_unauthorized(self):
        token = create_access_token("user-1", -1, SECRET)
        with pytest.raises(ApiError) as exc:
            authenticate(fake_request(f"Bearer {token}"), SECRET)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_wrong_secret_is_unauthorized(self):
        token = create_access_token("user-1", 60, "other")
        with pytest.raises(ApiError) as exc:
            authenticate(fake_request(f"Bearer {token}"), SECRET)
        assert exc.value.kind is ErrorKind.UNAUTHORIZED

    def test_missing_header_is_unauthorized(self):
        with pytest.raises(ApiError) as exc:
            authenticate(fake_request(), SECRET)
        assert exc.value.status == 401


class TestOwnership:
    def test_owner_passes(self):
        authorize_ownership("a", "a")

    def test_other_user_forbidden(self):
        with pytest.raises(ApiError) as exc:
            authorize_ownership("a", "b")
        assert exc.value.kind is ErrorKind.FORBIDDEN
