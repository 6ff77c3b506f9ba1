from beautycenter.domain.events import UserDeleted, UserUpdated
from beautycenter.models import Role

from .conftest import STRONG_PASSWORD, auth_headers


def test_admin_creates_staff_user(client, admin_headers, company, recorder):
    resp = client.post(
        "/api/users",
        json={
            "username": "desk.one",
            "password": STRONG_PASSWORD,
            "email": "desk.one@example.com",
            "firstName": "Desk",
            "lastName": "One",
            "roles": ["RECEPTIONIST"],
            "companyId": company.id,
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["roles"] == ["RECEPTIONIST"]
    assert body["companyId"] == company.id
    assert body["fullName"] == "Desk One"

    login = client.post("/api/auth/login", json={"username": "desk.one", "password": STRONG_PASSWORD})
    assert login.status_code == 200


def test_create_user_rejects_unknown_company(client, admin_headers):
    resp = client.post(
        "/api/users",
        json={"username": "ghost", "password": STRONG_PASSWORD, "email": "ghost@example.com", "companyId": "nope"},
        headers=admin_headers,
    )
    assert resp.status_code == 404


def test_only_admin_creates_users(client, staff_headers):
    resp = client.post(
        "/api/users",
        json={"username": "sneaky", "password": STRONG_PASSWORD, "email": "sneaky@example.com", "roles": ["ADMIN"]},
        headers=staff_headers,
    )
    assert resp.status_code == 403


def test_listing_is_company_scoped(client, make_company, make_user, company, staff, staff_headers, admin_headers):
    other = make_company("Other Salon")
    colleague = make_user("colleague", roles=(Role.EMPLOYEE,), company=company)
    make_user("outsider", roles=(Role.EMPLOYEE,), company=other)

    names = [u["username"] for u in client.get("/api/users", headers=staff_headers).json()]
    assert names == ["colleague", "reception"]

    everyone = [u["username"] for u in client.get("/api/users", headers=admin_headers).json()]
    assert set(everyone) == {"admin", "colleague", "outsider", "reception"}

    resp = client.get(f"/api/users/company/{company.id}", headers=staff_headers)
    assert {u["id"] for u in resp.json()} == {colleague.id, staff.id}
    assert client.get(f"/api/users/company/{other.id}", headers=staff_headers).status_code == 403

    employees = client.get("/api/users/role/EMPLOYEE", headers=staff_headers).json()
    assert [u["username"] for u in employees] == ["colleague"]


def test_plain_users_cannot_list(client, make_user):
    user = make_user("someone")
    assert client.get("/api/users", headers=auth_headers(user)).status_code == 403


def test_get_user_visibility(client, make_company, make_user, company, staff, staff_headers):
    colleague = make_user("colleague", roles=(Role.EMPLOYEE,), company=company)
    outsider = make_user("outsider", company=make_company("Other Salon"))

    assert client.get(f"/api/users/{staff.id}", headers=staff_headers).json()["username"] == "reception"
    assert client.get(f"/api/users/{colleague.id}", headers=staff_headers).status_code == 200
    assert client.get(f"/api/users/{outsider.id}", headers=staff_headers).status_code == 404

    loner = make_user("loner")
    assert client.get(f"/api/users/{loner.id}", headers=auth_headers(loner)).status_code == 200
    assert client.get(f"/api/users/{staff.id}", headers=auth_headers(loner)).status_code == 404


def test_update_user(client, admin_headers, make_user, company, recorder):
    user = make_user("stylist")

    resp = client.put(
        f"/api/users/{user.id}",
        json={"firstName": "Sara", "roles": ["EMPLOYEE", "STANDARDIST"], "companyId": company.id},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["firstName"] == "Sara"
    assert body["roles"] == ["EMPLOYEE", "STANDARDIST"]
    assert body["companyId"] == company.id
    assert [e.change for e in recorder.of_type(UserUpdated)] == ["profile"]

    make_user("taken")
    resp = client.put(f"/api/users/{user.id}", json={"username": "taken"}, headers=admin_headers)
    assert resp.status_code == 409


def test_change_status(client, admin_headers, make_user, recorder):
    user = make_user("stylist")

    resp = client.patch(f"/api/users/{user.id}/status", params={"active": False}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["active"] is False
    assert client.post("/api/auth/login", json={"username": "stylist", "password": STRONG_PASSWORD}).status_code == 401

    client.patch(f"/api/users/{user.id}/status", params={"active": True}, headers=admin_headers)
    assert [e.change for e in recorder.of_type(UserUpdated)] == ["deactivated", "activated"]


def test_change_own_password_requires_current(client, make_user, recorder):
    user = make_user("stylist")
    headers = auth_headers(user)
    new_password = "N3w!Passw0rd"

    resp = client.patch(
        f"/api/users/{user.id}/password",
        json={"currentPassword": "Wr0ng!Pass", "newPassword": new_password},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.patch(f"/api/users/{user.id}/password", json={"newPassword": new_password}, headers=headers)
    assert resp.status_code == 400

    resp = client.patch(
        f"/api/users/{user.id}/password",
        json={"currentPassword": STRONG_PASSWORD, "newPassword": "weak"},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.patch(
        f"/api/users/{user.id}/password",
        json={"currentPassword": STRONG_PASSWORD, "newPassword": new_password},
        headers=headers,
    )
    assert resp.status_code == 200
    assert [e.change for e in recorder.of_type(UserUpdated)] == ["password"]
    assert client.post("/api/auth/login", json={"username": "stylist", "password": new_password}).status_code == 200


def test_admin_resets_password_without_current(client, admin_headers, make_user):
    user = make_user("stylist")
    resp = client.patch(
        f"/api/users/{user.id}/password",
        json={"newPassword": "R3set!Passw0rd"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert client.post("/api/auth/login", json={"username": "stylist", "password": "R3set!Passw0rd"}).status_code == 200


def test_cannot_change_someone_elses_password(client, make_user, staff_headers):
    victim = make_user("victim")
    resp = client.patch(
        f"/api/users/{victim.id}/password",
        json={"currentPassword": STRONG_PASSWORD, "newPassword": "H4cked!Pass"},
        headers=staff_headers,
    )
    assert resp.status_code == 403


def test_delete_user(client, admin_headers, make_user, recorder):
    user = make_user("leaver")

    assert client.delete(f"/api/users/{user.id}", headers=admin_headers).status_code == 204
    assert [e.username for e in recorder.of_type(UserDeleted)] == ["leaver"]
    assert client.get(f"/api/users/{user.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/users/{user.id}", headers=admin_headers).status_code == 404
