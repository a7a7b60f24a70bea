import itertools
import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the test database has to be chosen first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = "smtp.test.local"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from worktrack.core.enums import Role
from worktrack.core.security import create_access_token, hash_password
from worktrack.database.base import Base
from worktrack.database.session import SessionLocal, engine
from worktrack.main import app
from worktrack.models.profile import Profile
from worktrack.models.user_session import UserSession

PASSWORD = "Passw0rd!123"


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_profile(db, password_hash):
    counter = itertools.count(1)

    def _make(role=Role.EMPLOYEE, *, email=None, tz="UTC", is_active=True, full_name=None):
        n = next(counter)
        profile = Profile(
            email=email or f"{role.value}{n}@example.com",
            password_hash=password_hash,
            full_name=full_name or f"{role.value.title()} {n}",
            employee_id=f"EMPT{n:04d}",
            role=role,
            timezone=tz,
            is_active=is_active,
            force_password_change=False,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def employee(make_profile):
    return make_profile(Role.EMPLOYEE)


@pytest.fixture
def manager(make_profile):
    return make_profile(Role.MANAGER)


@pytest.fixture
def admin(make_profile):
    return make_profile(Role.ADMIN)


@pytest.fixture
def auth_headers(db):
    """Open a session for a profile and return a bearer header for it."""

    def _headers(profile):
        now = datetime.now(timezone.utc)
        session = UserSession(
            session_id=uuid.uuid4().hex,
            user_id=profile.id,
            last_seen_at=now,
            expires_at=now + timedelta(days=1),
        )
        db.add(session)
        db.commit()
        token = create_access_token({"sub": str(profile.id), "sid": session.session_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers
