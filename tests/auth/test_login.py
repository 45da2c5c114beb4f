"""
Tests for login, access tokens and the current-user endpoint.
"""
from jose import jwt

from healthenroll.auth import service as auth_service
from healthenroll.auth.models import User, UserRole


def test_login_returns_token_and_profile(client_account, client):
    response = client.post(
        "/login", json={"email": client_account["email"], "password": client_account["password"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["user_id"] == client_account["user_id"]
    assert data["user"]["role"] == "client"
    assert data["user"]["profile"]["first_name"] == "Jane"
    assert "password_hash" not in data["user"]


def test_access_token_claims(client_account, client, test_app):
    response = client.post(
        "/login", json={"email": client_account["email"], "password": client_account["password"]}
    )
    settings = test_app.state.settings
    claims = jwt.decode(response.json()["access_token"], settings.secret_key, algorithms=[settings.algorithm])
    assert claims["user_id"] == client_account["user_id"]
    assert claims["email"] == client_account["email"]
    assert claims["role"] == "client"
    assert "exp" in claims


def test_wrong_password_and_unknown_email_look_the_same(client_account, client):
    wrong_password = client.post("/login", json={"email": client_account["email"], "password": "nope"})
    unknown_email = client.post("/login", json={"email": "ghost@example.com", "password": "nope"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["detail"] == "Invalid credentials"
    assert wrong_password.headers["WWW-Authenticate"] == "Bearer"


def test_unverified_account_with_wrong_password(register, client):
    register()
    response = client.post("/login", json={"email": "jane@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_deactivated_account_cannot_log_in(client_account, client, db):
    user = db.query(User).filter(User.user_id == client_account["user_id"]).one()
    user.is_active = False
    db.commit()

    response = client.post(
        "/login", json={"email": client_account["email"], "password": client_account["password"]}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Account is deactivated"


def test_me_returns_current_user(client_headers, client_account, client):
    response = client.get("/me", headers=client_headers)
    assert response.status_code == 200
    assert response.json()["user_id"] == client_account["user_id"]
    assert response.json()["is_verified"] is True


def test_me_requires_token(client):
    response = client.get("/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_me_rejects_garbage_token(client):
    response = client.get("/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_token_of_deleted_account_is_rejected(client_headers, client_account, client, db):
    db.delete(db.query(User).filter(User.user_id == client_account["user_id"]).one())
    db.commit()
    assert client.get("/me", headers=client_headers).status_code == 401


def test_admin_profile_is_null(make_user, login, client):
    admin = make_user("root@example.com", UserRole.ADMIN)
    response = client.get("/me", headers=login(admin.email))
    assert response.json()["role"] == "admin"
    assert response.json()["profile"] is None


def test_unknown_email_still_checks_a_password_hash(client, monkeypatch):
    checked = []

    def recording_verify(password, hashed):
        checked.append(hashed)
        return False

    monkeypatch.setattr(auth_service, "verify_password", recording_verify)
    response = client.post("/login", json={"email": "ghost@example.com", "password": "nope"})
    assert response.status_code == 401
    assert checked == [auth_service.DUMMY_PASSWORD_HASH]
