"""
Tests for the password reset flow.
"""
from datetime import timedelta

from healthenroll.auth.models import User
from healthenroll.core.security import utcnow, verify_password


def stored_user(db, email):
    db.expire_all()
    return db.query(User).filter(User.email == email).one()


def request_reset(client, db, email):
    response = client.post("/request-password-reset", json={"email": email})
    assert response.status_code == 200
    return stored_user(db, email).password_reset_token


def test_request_password_reset_stores_token_and_sends_email(client_account, client, db, outbox):
    response = client.post("/request-password-reset", json={"email": client_account["email"]})
    assert response.status_code == 200
    assert response.json()["message"] == "Password reset link sent to your email"

    user = stored_user(db, client_account["email"])
    assert len(user.password_reset_token) == 64
    assert user.password_reset_expires_at is not None
    assert outbox[-1]["Subject"] == "Health Programs - Password reset"


def test_request_password_reset_unknown_email(client):
    response = client.post("/request-password-reset", json={"email": "ghost@example.com"})
    assert response.status_code == 404


def test_reset_password_with_valid_token(client_account, client, db, outbox):
    token = request_reset(client, db, client_account["email"])

    response = client.post("/reset-password", params={"token": token}, json={"new_password": "NewPass456!"})
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated successfully"

    user = stored_user(db, client_account["email"])
    assert verify_password("NewPass456!", user.password_hash)
    assert user.password_reset_token is None
    assert user.password_reset_expires_at is None
    assert outbox[-1]["Subject"] == "Health Programs - Password changed"

    old = client.post("/login", json={"email": client_account["email"], "password": client_account["password"]})
    assert old.status_code == 401
    new = client.post("/login", json={"email": client_account["email"], "password": "NewPass456!"})
    assert new.status_code == 200


def test_reset_token_is_single_use(client_account, client, db):
    token = request_reset(client, db, client_account["email"])
    assert client.post("/reset-password", params={"token": token}, json={"new_password": "First1!"}).status_code == 200

    response = client.post("/reset-password", params={"token": token}, json={"new_password": "Second2!"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_reset_token_valid_just_before_expiry(client_account, client, db):
    token = request_reset(client, db, client_account["email"])
    user = stored_user(db, client_account["email"])
    user.password_reset_expires_at = utcnow() + timedelta(seconds=30)
    db.commit()

    response = client.post("/reset-password", params={"token": token}, json={"new_password": "NewPass456!"})
    assert response.status_code == 200


def test_reset_token_rejected_after_expiry(client_account, client, db):
    token = request_reset(client, db, client_account["email"])
    user = stored_user(db, client_account["email"])
    user.password_reset_expires_at = utcnow() - timedelta(seconds=1)
    db.commit()

    response = client.post("/reset-password", params={"token": token}, json={"new_password": "NewPass456!"})
    assert response.status_code == 401
    assert verify_password(client_account["password"], stored_user(db, client_account["email"]).password_hash)


def test_reset_password_unknown_token(client):
    response = client.post("/reset-password", params={"token": "f" * 64}, json={"new_password": "x"})
    assert response.status_code == 401


def test_new_reset_request_replaces_previous_token(client_account, client, db):
    first = request_reset(client, db, client_account["email"])
    second = request_reset(client, db, client_account["email"])
    assert first != second
    assert client.post("/reset-password", params={"token": first}, json={"new_password": "x1"}).status_code == 401
    assert client.post("/reset-password", params={"token": second}, json={"new_password": "x2"}).status_code == 200
