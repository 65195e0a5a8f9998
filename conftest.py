"""Test configuration and shared fixtures"""

import os

# key material must be in place before bankcards.config is imported
os.environ["BANKCARDS_SECRET_KEY"] = "test-secret-key-0123456789-abcdefghijklmnop"
os.environ["BANKCARDS_ENCRYPTION_KEY"] = "0123456789abcdef"

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bankcards.app import app  # noqa: E402
from bankcards.config import Config, get_config  # noqa: E402
from bankcards.db import DatabaseConnection  # noqa: E402
from bankcards.services.user import IdentityCache, get_identity_cache  # noqa: E402


# each test class have it's own empty database and identity cache
@pytest.fixture(scope="class")
def test_app():
    test_config = Config(
        # overwrite application name so it will use another database file
        app_name="bankcards-test",
        database_url_env=None,
    )
    identity_cache = IdentityCache(maxsize=128, ttl=60)
    app.dependency_overrides = {
        get_config: lambda: test_config,
        get_identity_cache: lambda: identity_cache,
    }

    db_conn = DatabaseConnection(config=test_config)
    db_conn.drop_tables()
    db_conn.create_tables()

    client = TestClient(app)
    yield client
    db_conn.engine.dispose()
    # clean up test database file after tests
    if os.path.exists(test_config.database_path):
        os.remove(test_config.database_path)


@pytest.fixture(scope="class")
def register(test_app: TestClient):
    """Register a user through the public endpoint, return its token pair"""

    def f(username: str, password: str = "password-123", role: str = "USER"):
        r = test_app.post(
            "/users/registration",
            json={"username": username, "password": password, "role": role},
        )
        assert r.status_code == 200, r.text
        return r.json()

    return f


@pytest.fixture(scope="class")
def admin_token(register):
    return register("admin", role="ADMIN")["access_token"]


@pytest.fixture(scope="class")
def user_factory(test_app: TestClient, register, admin_token):
    """Register a USER, return (user id, access token)"""

    def f(username: str):
        tokens = register(username)
        r = test_app.get(
            "/admin/users", params={"q": username}, headers={"x-token": admin_token}
        )
        assert r.status_code == 200
        user_id = next(
            u["id"] for u in r.json()["items"] if u["username"] == username
        )
        return user_id, tokens["access_token"]

    return f


@pytest.fixture(scope="class")
def card_factory(test_app: TestClient, admin_token):
    """Issue a card as admin, return the card as the API shows it"""

    def f(
        owner_id: int,
        number: str = "4000123412341234",
        balance: str = "0.00",
        expiration: date | None = None,
    ):
        expiration = expiration or date.today() + timedelta(days=365)
        r = test_app.post(
            "/cards",
            json={
                "number": number,
                "owner_id": owner_id,
                "expiration": expiration.isoformat(),
                "balance": balance,
            },
            headers={"x-token": admin_token},
        )
        assert r.status_code == 200, r.text
        return r.json()

    return f
