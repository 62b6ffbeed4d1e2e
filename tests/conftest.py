import pytest

from api import create_app
from api.extensions import get_services
from models import storage

PASSWORD = "pw123456"


@pytest.fixture
def app_overrides():
    """Per-module hook for extra config values."""
    return {}


@pytest.fixture
def app(tmp_path, app_overrides):
    app = create_app(
        "testing",
        DATABASE_URL=f"sqlite:///{tmp_path / 'chirpy-test.db'}",
        **app_overrides,
    )
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    with app.app_context():
        yield get_services()


def register(client, email, password=PASSWORD):
    return client.post("/api/users", json={"email": email, "password": password})


def login(client, email, password=PASSWORD, **extra):
    return client.post("/api/login", json={"email": email, "password": password, **extra})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Register and log in a user; returns the login payload."""

    def _make(email, password=PASSWORD):
        assert register(client, email, password).status_code == 201
        resp = login(client, email, password)
        assert resp.status_code == 200
        return resp.get_json()

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com")
