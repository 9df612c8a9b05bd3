import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAIL"] = "admin@memberportal.org"
os.environ["ADMIN_PASSWORD"] = "Adm1n!pass"
os.environ.pop("BREVO_API_KEY", None)

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from portal.main import app
from portal.db.base import Base
from portal.db.session import engine, SessionLocal
from portal.db.models import Member
from portal.core.rate_limit import reset_rate_limits
from portal.core.security import create_access_token, hash_password


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_member(db):
    counter = {"n": 0}

    def _make(tier="Free Member", password="Passw0rd!", **extra):
        counter["n"] += 1
        member = Member(
            name=f"Member {counter['n']}",
            email=f"member{counter['n']}@memberportal.org",
            selected_tier=tier,
            hashed_password=hash_password(password),
            **extra,
        )
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    return _make


@pytest.fixture
def auth_headers(make_member):
    def _headers(tier="Free Member"):
        member = make_member(tier)
        token = create_access_token(member.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/admin/auth/login",
        json={"email": "admin@memberportal.org", "password": "Adm1n!pass"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def stamp():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _stamp(days: int) -> datetime:
        return base + timedelta(days=days)

    return _stamp
