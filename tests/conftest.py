"""
Pytest fixtures for the PaintPro API test suite.

Provides:
- a fresh in-memory SQLite database per test (foreign keys enforced)
- a TestClient wired to that database through the get_db override
- authenticated clients for an admin and for a plain user
- helpers that create the parent records most tests need
"""
import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_DB"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DEFAULT_LOCALE"] = "en"
os.environ["RATE_LIMIT"] = "100000/minute"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from paintpro.auth.security import get_password_hash
from paintpro.db import Base, enable_sqlite_foreign_keys, get_db
from paintpro.main import app
from paintpro.models.models import User


PASSWORD = "secret123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def override_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_db):
    return TestClient(app)


def _create_user(session_factory, username: str, role: str) -> int:
    session = session_factory()
    try:
        user = User(username=username, password=get_password_hash(PASSWORD), name=username.title(), role=role)
        session.add(user)
        session.commit()
        return user.id
    finally:
        session.close()


def _login(client: TestClient, username: str) -> str:
    resp = client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()["accessToken"]


@pytest.fixture
def admin_user_id(session_factory):
    return _create_user(session_factory, "admin", "admin")


@pytest.fixture
def plain_user_id(session_factory):
    return _create_user(session_factory, "painter", "user")


@pytest.fixture
def admin_token(client, admin_user_id):
    return _login(client, "admin")


@pytest.fixture
def user_token(client, plain_user_id):
    return _login(client, "painter")


@pytest.fixture
def admin_client(override_db, admin_token):
    return TestClient(app, headers={"Authorization": f"Bearer {admin_token}"})


@pytest.fixture
def user_client(override_db, user_token):
    return TestClient(app, headers={"Authorization": f"Bearer {user_token}"})


@pytest.fixture
def make_client(admin_client):
    def _make(**overrides):
        body = {
            "name": "Jane Smith",
            "email": "jane@example.com",
            "phone": "555-0100",
            "address": "12 Maple St",
        }
        body.update(overrides)
        resp = admin_client.post("/api/clients", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_project(admin_client, make_client):
    def _make(client_id=None, **overrides):
        if client_id is None:
            client_id = make_client()["id"]
        body = {
            "clientId": client_id,
            "title": "Kitchen repaint",
            "description": "Walls and ceiling",
            "address": "12 Maple St",
            "serviceType": "interior",
        }
        body.update(overrides)
        resp = admin_client.post("/api/projects", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_staff(admin_client):
    def _make(**overrides):
        body = {"name": "Alex", "role": "Painter", "phone": "555-1234"}
        body.update(overrides)
        resp = admin_client.post("/api/staff", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_supplier(admin_client):
    def _make(**overrides):
        body = {"name": "Coastal Paint", "company": "Coastal Paint Supply", "category": "paint"}
        body.update(overrides)
        resp = admin_client.post("/api/suppliers", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
