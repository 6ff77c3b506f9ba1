from datetime import timedelta

from jose import jwt

from beautycenter.config import JWT_ALGORITHM, SECRET_KEY
from beautycenter.domain.events import UserCreated
from beautycenter.models import Role
from beautycenter.security_utils import create_access_token

from .conftest import STRONG_PASSWORD, auth_headers

REGISTRATION = {
    "username": "new.user",
    "password": STRONG_PASSWORD,
    "email": "New.User@Example.com",
    "firstName": "New",
    "lastName": "User",
}


def test_register_creates_user_role_account(client, recorder):
    resp = client.post("/api/auth/register", json=REGISTRATION)
    assert resp.status_code == 201
    body = resp.json()
    assert body["tokenType"] == "Bearer"
    assert body["username"] == "new.user"
    assert body["email"] == "new.user@example.com"
    assert body["roles"] == ["USER"]
    assert [e.username for e in recorder.of_type(UserCreated)] == ["new.user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["id"] == body["userId"]


def test_register_ignores_requested_roles(client):
    payload = dict(REGISTRATION, roles=["ADMIN"])
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201
    assert resp.json()["roles"] == ["USER"]


def test_register_duplicates_conflict(client):
    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201

    resp = client.post("/api/auth/register", json=dict(REGISTRATION, email="other@example.com"))
    assert resp.status_code == 409

    resp = client.post("/api/auth/register", json=dict(REGISTRATION, username="someone.else"))
    assert resp.status_code == 409


def test_register_rejects_weak_password(client):
    resp = client.post("/api/auth/register", json=dict(REGISTRATION, password="password"))
    assert resp.status_code == 400


def test_register_rejects_bad_email(client):
    resp = client.post("/api/auth/register", json=dict(REGISTRATION, email="not-an-email"))
    assert resp.status_code == 422


def test_login_returns_token_with_claims(client, make_user, company):
    user = make_user("stylist", roles=(Role.EMPLOYEE,), company=company)

    resp = client.post("/api/auth/login", json={"username": "stylist", "password": STRONG_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["userId"] == user.id
    assert body["companyId"] == company.id

    claims = jwt.decode(body["accessToken"], SECRET_KEY, algorithms=[JWT_ALGORITHM])
    assert claims["sub"] == user.id
    assert claims["username"] == "stylist"
    assert claims["roles"] == ["EMPLOYEE"]
    assert claims["companyId"] == company.id
    assert claims["jti"]
    assert claims["exp"] > claims["iat"]


def test_login_wrong_password_is_401(client, make_user):
    make_user("stylist")
    resp = client.post("/api/auth/login", json={"username": "stylist", "password": "Wr0ng!Pass"})
    assert resp.status_code == 401

    resp = client.post("/api/auth/login", json={"username": "nobody", "password": STRONG_PASSWORD})
    assert resp.status_code == 401


def test_login_inactive_user_is_401(client, make_user):
    make_user("gone", active=False)
    resp = client.post("/api/auth/login", json={"username": "gone", "password": STRONG_PASSWORD})
    assert resp.status_code == 401


def test_check_username_and_email(client, make_user):
    make_user("taken")

    assert client.get("/api/auth/check-username/taken").json() is False
    assert client.get("/api/auth/check-username/free").json() is True
    assert client.get("/api/auth/check-email/taken@example.com").json() is False
    assert client.get("/api/auth/check-email/free@example.com").json() is True


def test_validate_token(client, make_user):
    user = make_user("stylist")
    token, _ = create_access_token(user.id)

    assert client.get("/api/auth/validate-token", params={"token": token}).json() is True
    assert client.get("/api/auth/validate-token", params={"token": "garbage"}).json() is False

    expired, _ = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
    assert client.get("/api/auth/validate-token", params={"token": expired}).json() is False


def test_protected_route_requires_token(client):
    assert client.get("/api/companies").status_code == 401
    assert client.get("/api/companies", headers={"Authorization": "Bearer not.a.jwt"}).status_code == 401
    assert client.get("/api/companies", headers={"Authorization": "Bearer abc"}).status_code == 401


def test_deactivated_user_token_is_rejected(client, make_user):
    user = make_user("sleepy", active=False)
    assert client.get("/api/auth/me", headers=auth_headers(user)).status_code == 403


def test_health_and_security_headers(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}

    resp = client.get("/api/auth/check-username/anyone")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
