"""
Tests for changing a password with the current one.
"""


def test_change_password_then_login(client_account, client_headers, client):
    user_id = client_account["user_id"]
    email = client_account["email"]

    response = client.post(
        f"/users/{user_id}/change-password",
        headers=client_headers,
        json={"current_password": "Password123!", "new_password": "Changed789!"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Password changed successfully"

    assert client.post("/login", json={"email": email, "password": "Password123!"}).status_code == 401
    assert client.post("/login", json={"email": email, "password": "Changed789!"}).status_code == 200


def test_change_password_with_wrong_current_password(client_account, client_headers, client):
    response = client.post(
        f"/users/{client_account['user_id']}/change-password",
        headers=client_headers,
        json={"current_password": "wrong", "new_password": "Changed789!"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Current password is incorrect"


def test_change_password_of_other_user_is_forbidden(verified_client, login, client):
    jane = verified_client("jane@example.com")
    john = verified_client("john@example.com")
    response = client.post(
        f"/users/{john['user_id']}/change-password",
        headers=login(jane["email"]),
        json={"current_password": "Password123!", "new_password": "Hijack1!"},
    )
    assert response.status_code == 403


def test_change_password_requires_authentication(client_account, client):
    response = client.post(
        f"/users/{client_account['user_id']}/change-password",
        json={"current_password": "Password123!", "new_password": "Changed789!"},
    )
    assert response.status_code == 401
