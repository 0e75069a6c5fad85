"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seeded companies, jobs, users and applications
- FastAPI test client
- Auth headers for an admin (u1) and regular users (u2, u3)
"""

import os

# Keep the application's own engine off PostgreSQL during tests
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db, make_engine
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Application, Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = make_engine(SQLALCHEMY_TEST_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt is slow on purpose; hash the seed passwords once
PASSWORD_HASHES = {
    "u1": get_password_hash("password1"),
    "u2": get_password_hash("password2"),
    "u3": get_password_hash("password3"),
}


def seed(db):
    """Insert the fixture data every test starts from."""
    db.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db.flush()

    jobs = {
        "j1": Job(title="j1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        "j2": Job(title="j2", salary=200, equity=Decimal("0.2"), company_handle="c1"),
        "j3": Job(title="j3", salary=300, equity=Decimal("0"), company_handle="c2"),
        "j4": Job(title="Intern", salary=None, equity=None, company_handle="c3"),
    }
    db.add_all(jobs.values())

    for idx, is_admin in ((1, True), (2, False), (3, False)):
        db.add(User(
            username=f"u{idx}",
            password=PASSWORD_HASHES[f"u{idx}"],
            first_name=f"U{idx}F",
            last_name=f"U{idx}L",
            email=f"user{idx}@user.com",
            is_admin=is_admin,
        ))
    db.flush()

    db.add_all([
        Application(username="u1", job_id=jobs["j1"].id, state="applied"),
        Application(username="u1", job_id=jobs["j2"].id, state="interested"),
    ])
    db.commit()

    return {key: job.id for key, job in jobs.items()}


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        db.info["job_ids"] = seed(db)
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(db_session):
    """Seeded job ids keyed by fixture name (j1..j4)."""
    return db_session.info["job_ids"]


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """u1 is an admin"""
    return {"Authorization": f"Bearer {create_access_token('u1', is_admin=True)}"}


@pytest.fixture
def user_headers():
    """u2 is a regular user"""
    return {"Authorization": f"Bearer {create_access_token('u2')}"}


@pytest.fixture
def other_user_headers():
    """u3 is a regular user"""
    return {"Authorization": f"Bearer {create_access_token('u3')}"}
