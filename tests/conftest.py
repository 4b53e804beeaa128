import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test-unused.db")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from sweetshop.core.config import Settings, get_settings
from sweetshop.database import build_engine, get_session
from sweetshop.main import app
from sweetshop.models.user import User
from sweetshop.repositories.user_repo import UserRepository
from sweetshop.services.auth_service import hash_password

ADMIN_EMAIL = "admin@sweetshop.io"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def engine(tmp_path):
    # A file database so separate connections (threads) share the data.
    eng = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_policy(client):
    """Disable the admin-role policy for the duration of a test."""
    app.dependency_overrides[get_settings] = lambda: Settings(ENFORCE_ADMIN_ROLE=False)
    yield


@pytest.fixture
def admin_user(session):
    user = User(
        email=ADMIN_EMAIL,
        name="Admin",
        password_hash=hash_password(ADMIN_PASSWORD),
        role="admin",
    )
    return UserRepository().create(session, user)


def _login(client, email, password) -> dict:
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def customer_headers(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Ann", "email": "ann@x.com", "password": "secret1"},
    )
    assert res.status_code == 201, res.text
    return _login(client, "ann@x.com", "secret1")


@pytest.fixture
def make_sweet(client, admin_headers):
    def _make(name="Chocolate Bar", category="Chocolate", price=5.0, quantity=10):
        res = client.post(
            "/api/sweets",
            json={"name": name, "category": category, "price": price, "quantity": quantity},
            headers=admin_headers,
        )
        assert res.status_code == 201, res.text
        return res.json()

    return _make
