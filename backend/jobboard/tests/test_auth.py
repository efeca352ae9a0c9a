"""Tests for authentication endpoints."""

from datetime import timedelta

from jobboard.core.security import create_access_token, hash_reset_token
from jobboard.core.time import utcnow
from jobboard.db.models import User

USER_PASSWORD = "Seeker123!"


def _register(client, **overrides):
    payload = {
        "name": "New Person",
        "email": "new.person@example.com",
        "password": "Password123",
        "role": "user",
    }
    payload.update(overrides)
    return client.post("/api/v1/register", json=payload)


def test_register_returns_token_and_cookie(client, db_session):
    response = _register(client)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["token"]
    assert response.cookies.get("token") == data["token"]
    user = db_session.query(User).filter(User.email == "new.person@example.com").one()
    assert user.role == "user"
    assert user.hashed_password != "Password123"


def test_register_employer(client, db_session):
    response = _register(client, email="Boss@Example.com", role="employer")
    assert response.status_code == 201
    user = db_session.query(User).filter(User.email == "boss@example.com").one()
    assert user.role == "employer"


def test_register_cannot_self_assign_admin(client):
    response = _register(client, role="admin")
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_register_rejects_short_password(client):
    response = _register(client, password="short")
    assert response.status_code == 400
    assert "password" in response.json()["message"]


def test_register_rejects_invalid_email(client):
    response = _register(client, email="not-an-email")
    assert response.status_code == 400


def test_register_duplicate_email_conflicts(client, job_seeker):
    response = _register(client, email=job_seeker.email.upper())
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Duplicate field entered"}


def test_register_then_login(client):
    assert _register(client).status_code == 201

    response = client.post(
        "/api/v1/login", json={"email": "new.person@example.com", "password": "Password123"}
    )

    assert response.status_code == 200
    assert response.json()["token"]


def test_login_invalid_credentials(client, job_seeker):
    response = client.post(
        "/api/v1/login", json={"email": job_seeker.email, "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid Credentials"


def test_login_unknown_user(client):
    response = client.post("/api/v1/login", json={"email": "ghost@example.com", "password": "x"})
    assert response.status_code == 401


def test_login_requires_email_and_password(client):
    response = client.post("/api/v1/login", json={"email": "someone@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please enter email and password"


def test_protected_route_requires_token(client):
    response = client.get("/api/v1/me")
    assert response.status_code == 401
    assert response.json()["message"] == "Login first to access this resource"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_is_rejected(client, job_seeker):
    token = create_access_token(job_seeker.id, expires_delta=timedelta(seconds=-1))
    response = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_cookie_authenticates(client, job_seeker):
    login = client.post(
        "/api/v1/login", json={"email": job_seeker.email, "password": USER_PASSWORD}
    )
    assert login.status_code == 200

    # The client keeps the cookie set by login.
    response = client.get("/api/v1/me")

    assert response.status_code == 200
    assert response.json()["data"]["email"] == job_seeker.email


def test_logout_expires_cookie(client, seeker_headers):
    response = client.get("/api/v1/logout", headers=seeker_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User logout successfully"
    assert "token=" in response.headers["set-cookie"]


def test_forgot_password_sends_reset_link(client, db_session, job_seeker, mailer):
    response = client.post("/api/v1/password/forgot", json={"email": job_seeker.email})

    assert response.status_code == 200
    assert response.json()["message"] == f"Email sent successfully to {job_seeker.email}"
    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message["to"] == job_seeker.email
    assert "/api/v1/password/reset/" in message["text"]

    db_session.refresh(job_seeker)
    token = message["text"].split("/password/reset/")[1].split()[0]
    assert job_seeker.reset_password_token == hash_reset_token(token)
    assert job_seeker.reset_password_expire > utcnow()


def test_forgot_password_unknown_email(client):
    response = client.post("/api/v1/password/forgot", json={"email": "ghost@example.com"})
    assert response.status_code == 404


def test_forgot_password_mail_failure_clears_token(client, db_session, job_seeker, mailer):
    mailer.fail = True

    response = client.post("/api/v1/password/forgot", json={"email": job_seeker.email})

    assert response.status_code == 502
    db_session.refresh(job_seeker)
    assert job_seeker.reset_password_token is None
    assert job_seeker.reset_password_expire is None


def test_reset_password_flow(client, db_session, job_seeker, mailer):
    client.post("/api/v1/password/forgot", json={"email": job_seeker.email})
    token = mailer.sent[0]["text"].split("/password/reset/")[1].split()[0]

    response = client.post(f"/api/v1/password/reset/{token}", json={"password": "BrandNew123"})

    assert response.status_code == 200
    assert response.json()["token"]
    db_session.refresh(job_seeker)
    assert job_seeker.reset_password_token is None

    login = client.post(
        "/api/v1/login", json={"email": job_seeker.email, "password": "BrandNew123"}
    )
    assert login.status_code == 200

    reused = client.post(f"/api/v1/password/reset/{token}", json={"password": "Another123"})
    assert reused.status_code == 400
    assert reused.json()["message"] == "Reset password token is invalid"


def test_reset_password_expired_token(client, db_session, job_seeker):
    token = "expired-token"
    job_seeker.reset_password_token = hash_reset_token(token)
    job_seeker.reset_password_expire = utcnow() - timedelta(minutes=1)
    db_session.commit()

    response = client.post(f"/api/v1/password/reset/{token}", json={"password": "BrandNew123"})

    assert response.status_code == 400
