import pytest

from fintrack.backend import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DB_PATH": str(tmp_path / "test.db"),
        "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_and_login(client):
    """Create a user and return Authorization headers for them."""

    def _make(email="alice@example.com", password="secret123", name="Alice"):
        resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _make


@pytest.fixture
def auth_headers(register_and_login):
    return register_and_login()
