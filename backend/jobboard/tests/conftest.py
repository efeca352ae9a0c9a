"""Test configuration and fixtures."""

import os
from datetime import datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["TESTING"] = "true"  # Disable rate limiting in tests
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")

from jobboard.core.security import get_password_hash  # noqa: E402
from jobboard.core.time import days_from_now  # noqa: E402
from jobboard.db import Base, get_db  # noqa: E402
from jobboard.db.models import Job, User  # noqa: E402
from jobboard.dependencies import get_geocoder, get_mailer, get_resume_storage  # noqa: E402
from jobboard.domain.exceptions import UpstreamError  # noqa: E402
from jobboard.main import app  # noqa: E402 - must set env vars before importing
from jobboard.services import Geocoder, Mailer, ResumeStorage, SmtpConfig  # noqa: E402

# Use in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_PASSWORD = "Seeker123!"
EMPLOYER_PASSWORD = "Employer123!"
ADMIN_PASSWORD = "Admin123!"

# Addresses the mock geocoder knows, keyed by the ``location`` query value.
KNOWN_LOCATIONS = {
    "651 Rr 2, Oquawka, IL, 61469": {
        "latLng": {"lat": 40.9319, "lng": -90.9466},
        "street": "651 Rr 2",
        "adminArea5": "Oquawka",
        "adminArea3": "IL",
        "postalCode": "61469",
        "adminArea1": "US",
    },
    "61469": {
        "latLng": {"lat": 40.9319, "lng": -90.9466},
        "adminArea5": "Oquawka",
        "adminArea3": "IL",
        "postalCode": "61469",
        "adminArea1": "US",
    },
    "1 Main St, Burlington, IA, 52601": {
        "latLng": {"lat": 40.8075, "lng": -91.1129},
        "street": "1 Main St",
        "adminArea5": "Burlington",
        "adminArea3": "IA",
        "postalCode": "52601",
        "adminArea1": "US",
    },
    "100 Market St, San Francisco, CA, 94105": {
        "latLng": {"lat": 37.7936, "lng": -122.3958},
        "street": "100 Market St",
        "adminArea5": "San Francisco",
        "adminArea3": "CA",
        "postalCode": "94105",
        "adminArea1": "US",
    },
}


def mapquest_handler(request: httpx.Request) -> httpx.Response:
    """Answer geocoding requests the way the MapQuest address endpoint does."""
    location = request.url.params.get("location", "")
    match = KNOWN_LOCATIONS.get(location)
    return httpx.Response(
        200, json={"results": [{"locations": [match] if match else []}]}
    )


class RecordingMailer(Mailer):
    """Mailer that keeps messages in memory instead of talking SMTP."""

    def __init__(self) -> None:
        super().__init__(SmtpConfig(hostname="smtp.test"))
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, *, to: str, subject: str, text: str) -> None:
        if self.fail:
            raise UpstreamError("Problem occurred while sending the email")
        self.sent.append({"to": to, "subject": subject, "text": text})


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def geocoder():
    return Geocoder(
        "https://geocoder.test/geocoding/v1/address",
        "test-key",
        transport=httpx.MockTransport(mapquest_handler),
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def storage(tmp_path):
    return ResumeStorage(tmp_path / "uploads")


@pytest.fixture
def client(db_session, geocoder, mailer, storage):
    """Create a test client with overridden database and provider dependencies."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_resume_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db_session, *, name, email, password, role):
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def job_seeker(db_session):
    """Create a job seeker (role ``user``)."""
    return _make_user(
        db_session,
        name="Jane Seeker",
        email="seeker@example.com",
        password=USER_PASSWORD,
        role="user",
    )


@pytest.fixture
def employer_user(db_session):
    return _make_user(
        db_session,
        name="Acme Recruiting",
        email="employer@example.com",
        password=EMPLOYER_PASSWORD,
        role="employer",
    )


@pytest.fixture
def admin_user(db_session):
    return _make_user(
        db_session,
        name="Administrator",
        email="admin@example.com",
        password=ADMIN_PASSWORD,
        role="admin",
    )


def _login(client, email, password):
    response = client.post("/api/v1/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def seeker_headers(client, job_seeker):
    return _login(client, job_seeker.email, USER_PASSWORD)


@pytest.fixture
def employer_headers(client, employer_user):
    return _login(client, employer_user.email, EMPLOYER_PASSWORD)


@pytest.fixture
def admin_headers(client, admin_user):
    return _login(client, admin_user.email, ADMIN_PASSWORD)


@pytest.fixture
def make_job(db_session, employer_user):
    """Factory inserting jobs directly, bypassing geocoding."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        industry = overrides.pop("industry", ["Information Technology"])
        fields = {
            "title": f"Engineer {n}",
            "slug": f"engineer-{n}",
            "description": "Build things.",
            "email": "jobs@example.com",
            "address": "651 Rr 2, Oquawka, IL, 61469",
            "latitude": 40.9319,
            "longitude": -90.9466,
            "formatted_address": "651 Rr 2, Oquawka, IL 61469, US",
            "city": "Oquawka",
            "state": "IL",
            "zipcode": "61469",
            "country": "US",
            "company": "Acme",
            "job_type": "Permanent",
            "min_education": "Bachelors",
            "positions": 1,
            "experience": "No Experience",
            "salary": 50000,
            "posting_date": datetime(2024, 1, 1) + timedelta(days=n),
            "last_date": days_from_now(7),
            "user_id": employer_user.id,
        }
        fields.update(overrides)
        job = Job(**fields)
        job.industry = industry
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make


@pytest.fixture
def job_payload():
    return {
        "title": "Node Developer",
        "description": "Must be a full-stack developer.",
        "email": "hr@acme.example",
        "address": "651 Rr 2, Oquawka, IL, 61469",
        "company": "Acme",
        "industry": ["Information Technology"],
        "job_type": "Permanent",
        "min_education": "Bachelors",
        "positions": 2,
        "experience": "No Experience",
        "salary": 155000,
    }
