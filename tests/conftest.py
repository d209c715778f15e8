import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext

from j_user_svc.app import create_app
from j_user_svc.config import Settings
from j_user_svc.models.user import User

TEST_SECRET = "test-signing-key-that-is-long-enough-for-hs256"

# Lowest bcrypt work factor keeps the suite fast
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def create_user(db_session):
    """Insert a user directly, bypassing the API."""

    def _create(email="test@example.com", password="secret", name="Test User"):
        user = User(name=name, email=email, password_hash=pwd_context.hash(password))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def login(client):
    """Log in through the API and return ready-to-use Authorization headers."""

    def _login(email="test@example.com", password="secret"):
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
