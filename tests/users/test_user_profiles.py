"""
Tests for profile reads and updates, and account administration.
"""
from healthenroll.auth.models import User, UserRole
from healthenroll.clients.models import ClientProfile
from healthenroll.enrollments.models import Enrollment
from healthenroll.programs.models import HealthProgram, generate_program_id


def test_get_own_profile(client_account, client_headers, client):
    response = client.get(f"/users/{client_account['user_id']}", headers=client_headers)
    assert response.status_code == 200
    assert response.json()["profile"]["last_name"] == "Doe"


def test_client_cannot_read_other_user(verified_client, login, client):
    jane = verified_client("jane@example.com")
    john = verified_client("john@example.com")
    response = client.get(f"/users/{john['user_id']}", headers=login(jane["email"]))
    assert response.status_code == 403


def test_admin_can_read_any_user(client_account, admin_headers, client):
    response = client.get(f"/users/{client_account['user_id']}", headers=admin_headers)
    assert response.status_code == 200


def test_get_unknown_user(admin_headers, client):
    response = client.get("/users/USER-000000000000", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_update_client_profile_fields(client_account, client_headers, client):
    response = client.put(
        f"/users/{client_account['user_id']}",
        headers=client_headers,
        json={"first_name": "Janet", "phone": "555-0199", "image_url": "https://img.example.com/j.png"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["first_name"] == "Janet"
    assert data["profile"]["last_name"] == "Doe"
    assert data["profile"]["phone"] == "555-0199"
    assert data["image_url"] == "https://img.example.com/j.png"


def test_update_ignores_fields_of_other_role(client_account, client_headers, client, db):
    response = client.put(
        f"/users/{client_account['user_id']}", headers=client_headers, json={"license_number": "LIC-9"}
    )
    assert response.status_code == 200
    user = db.query(User).filter(User.user_id == client_account["user_id"]).one()
    assert user.doctor_profile is None


def test_update_email_to_taken_address(verified_client, login, client):
    verified_client("john@example.com")
    jane = verified_client("jane@example.com")
    response = client.put(
        f"/users/{jane['user_id']}", headers=login(jane["email"]), json={"email": "john@example.com"}
    )
    assert response.status_code == 409


def test_required_field_cannot_be_cleared(client_account, client_headers, client, db):
    response = client.put(
        f"/users/{client_account['user_id']}",
        headers=client_headers,
        json={"first_name": None, "phone": "555-0000"},
    )
    assert response.status_code == 400
    db.expire_all()
    profile = db.query(ClientProfile).filter(ClientProfile.user_id == client_account["user_id"]).one()
    assert profile.first_name == "Jane"
    assert profile.phone == "555-0100"


def test_update_doctor_profile(make_user, login, client):
    doctor = make_user("doc@example.com", UserRole.DOCTOR, license_number="LIC-1")
    make_user("other-doc@example.com", UserRole.DOCTOR, license_number="LIC-2")
    headers = login(doctor.email)

    response = client.put(f"/users/{doctor.user_id}", headers=headers, json={"specialization": "Oncology"})
    assert response.status_code == 200
    assert response.json()["profile"] == {"license_number": "LIC-1", "specialization": "Oncology"}

    response = client.put(f"/users/{doctor.user_id}", headers=headers, json={"license_number": "LIC-2"})
    assert response.status_code == 409


def test_list_and_search_users(verified_client, admin_headers, client):
    verified_client("jane@example.com")
    verified_client("john@example.com")

    response = client.get("/users", headers=admin_headers, params={"limit": 2})
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = client.get("/users/search", headers=admin_headers, params={"query": "JOHN"})
    assert [u["email"] for u in response.json()] == ["john@example.com"]

    response = client.get("/users/search", headers=admin_headers, params={"role": "admin"})
    assert [u["email"] for u in response.json()] == ["admin@example.com"]


def test_listing_users_requires_admin(client_headers, client):
    response = client.get("/users", headers=client_headers)
    assert response.status_code == 403
    assert response.json()["kind"] == "forbidden"


def test_deactivate_user(client_account, admin_headers, client):
    response = client.patch(
        f"/users/{client_account['user_id']}/status", headers=admin_headers, json={"is_active": False}
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    login = client.post("/login", json={"email": client_account["email"], "password": client_account["password"]})
    assert login.json()["detail"] == "Account is deactivated"


def test_token_stops_working_after_deactivation(client_account, client_headers, admin_headers, client):
    client.patch(f"/users/{client_account['user_id']}/status", headers=admin_headers, json={"is_active": False})
    response = client.get("/me", headers=client_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Account is deactivated"


def test_delete_user_removes_profile_and_enrollments(client_account, admin_headers, client, db):
    program = HealthProgram(program_id=generate_program_id(), name="Walking", is_active=True)
    db.add(program)
    db.commit()
    db.add(Enrollment(user_id=client_account["user_id"], program_id=program.program_id))
    db.commit()

    response = client.delete(f"/users/{client_account['user_id']}", headers=admin_headers)
    assert response.status_code == 204

    db.expire_all()
    assert db.query(User).filter(User.user_id == client_account["user_id"]).count() == 0
    assert db.query(ClientProfile).count() == 0
    assert db.query(Enrollment).count() == 0
    assert db.query(HealthProgram).count() == 1


def test_search_treats_wildcards_literally(verified_client, admin_headers, client):
    verified_client("jane@example.com")
    verified_client("john_smith@example.com")

    response = client.get("/users/search", headers=admin_headers, params={"query": "_"})
    assert [u["email"] for u in response.json()] == ["john_smith@example.com"]

    response = client.get("/users/search", headers=admin_headers, params={"query": "%"})
    assert response.json() == []
