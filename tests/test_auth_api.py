import pytest
from sqlmodel import select

from storefront.core.auth import (
    ADMIN_COOKIE_NAME,
    ADMIN_ROLE_COOKIE_NAME,
    can_create_user_role,
    can_delete_user,
    resolve_role,
)
from storefront.models.notification import AdminNotification
from storefront.models.user import User
from storefront.services.user_service import (
    RESET_NEUTRAL_MESSAGE,
    UserService,
    next_unique_username,
    normalize_username,
)

from conftest import login_as

JANE = {"name": "Jane", "surname": "Doe", "email": "Jane@Example.com", "password": "secret1"}


@pytest.mark.parametrize(
    "value, expected",
    [("Jane Doe", "janedoe"), ("Zoë Ånström", "zoeanstrom"), ("  ", "user"), ("李", "user")],
)
def test_normalize_username(value, expected):
    assert normalize_username(value) == expected


def test_next_unique_username():
    assert next_unique_username("Jane Doe", set()) == "janedoe"
    assert next_unique_username("Jane Doe", {"janedoe", "janedoe1"}) == "janedoe2"


@pytest.mark.parametrize(
    "value, expected",
    [("superadmin", "Super Admin"), ("ADMIN", "Admin"), ("manager", "Manager"), ("root", "Customer"), (None, "Customer")],
)
def test_resolve_role(value, expected):
    assert resolve_role(value) == expected


def test_role_rules():
    assert can_create_user_role("Admin", "Manager")
    assert not can_create_user_role("Admin", "Super Admin")
    assert not can_create_user_role("Manager", "Admin")
    assert not can_create_user_role("Customer", "Customer")
    assert can_delete_user("Super Admin", "Super Admin")
    assert not can_delete_user("Admin", "Super Admin")
    assert not can_delete_user("Customer", "Customer")


def test_configured_admin_login(client):
    res = client.post("/api/auth/login", json={"identifier": "admin", "password": "admin12345"})

    assert res.status_code == 200
    assert res.json() == {"ok": True, "username": "admin", "role": "Super Admin"}
    assert ADMIN_COOKIE_NAME in res.cookies
    assert res.cookies[ADMIN_ROLE_COOKIE_NAME].strip('"') == "Super Admin"

    # The built-in login has no account record.
    assert client.get("/api/auth/me").json()["authenticated"] is False


def test_wrong_password(client):
    res = client.post("/api/auth/login", json={"identifier": "admin", "password": "nope"})

    assert res.status_code == 401
    assert res.json() == {"error": "Invalid username or password."}
    assert ADMIN_COOKIE_NAME not in res.cookies


def test_register_signs_in_and_notifies_staff(client, session):
    res = client.post("/api/auth/register", json=JANE)

    assert res.status_code == 201
    assert res.json() == {"ok": True, "username": "janedoe", "role": "Customer"}

    me = client.get("/api/auth/me").json()
    assert me["authenticated"] is True
    assert me["role"] == "Customer"
    assert me["user"]["email"] == "jane@example.com"
    assert "password_hash" not in me["user"]

    notification = session.exec(select(AdminNotification)).one()
    assert notification.type == "User"
    assert notification.title == "New user register"
    assert notification.message == "Jane Doe"


def test_register_rejects_duplicates_and_short_passwords(client):
    client.post("/api/auth/register", json=JANE)

    res = client.post("/api/auth/register", json=dict(JANE, email="jane@example.com"))
    assert res.status_code == 400
    assert res.json() == {"error": "Registration failed. Email may already exist."}

    res = client.post("/api/auth/register", json=dict(JANE, email="other@example.com", password="123"))
    assert res.status_code == 400
    assert res.json() == {"error": "Please fill valid name, email and password."}


def test_usernames_get_a_numeric_suffix(client):
    client.post("/api/auth/register", json=JANE)
    res = client.post("/api/auth/register", json=dict(JANE, email="jane2@example.com"))

    assert res.json()["username"] == "janedoe1"


def test_login_by_email_or_username(client):
    client.post("/api/auth/register", json=JANE)
    client.post("/api/auth/logout")

    for identifier in ("jane@example.com", "JaneDoe"):
        res = client.post("/api/auth/login", json={"identifier": identifier, "password": "secret1"})
        assert res.status_code == 200
        assert res.json()["username"] == "janedoe"


def test_deactivated_accounts_cannot_sign_in(client, session):
    user = UserService().create_account(
        session, name="Jane", email="jane@example.com", password="secret1", source="Checkout"
    )
    user.is_active = False
    session.add(user)
    session.commit()

    res = client.post("/api/auth/login", json={"identifier": "jane@example.com", "password": "secret1"})
    assert res.status_code == 401


def test_password_reset_flow(client):
    client.post("/api/auth/register", json=JANE)

    res = client.post("/api/auth/request-reset", json={"identifier": "jane@example.com"})
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == RESET_NEUTRAL_MESSAGE
    token = body["preview_token"]
    assert len(token) == 6 and token.isdigit()

    wrong = client.post(
        "/api/auth/reset-password",
        json={"identifier": "janedoe", "token": "000000" if token != "000000" else "111111", "new_password": "newpass1"},
    )
    assert wrong.status_code == 400

    res = client.post(
        "/api/auth/reset-password",
        json={"identifier": "janedoe", "token": token, "new_password": "newpass1"},
    )
    assert res.status_code == 200
    assert res.json() == {"ok": True}

    reused = client.post(
        "/api/auth/reset-password",
        json={"identifier": "janedoe", "token": token, "new_password": "another1"},
    )
    assert reused.status_code == 400
    assert reused.json() == {"error": "Invalid or expired token. Please request a new token."}

    old = client.post("/api/auth/login", json={"identifier": "janedoe", "password": "secret1"})
    assert old.status_code == 401
    new = client.post("/api/auth/login", json={"identifier": "janedoe", "password": "newpass1"})
    assert new.status_code == 200


def test_reset_request_for_unknown_account_is_neutral(client):
    res = client.post("/api/auth/request-reset", json={"identifier": "ghost@example.com"})

    assert res.status_code == 200
    assert res.json() == {"ok": True, "message": RESET_NEUTRAL_MESSAGE, "preview_token": None}


def test_reset_request_needs_an_identifier(client):
    res = client.post("/api/auth/request-reset", json={"identifier": " "})
    assert res.status_code == 400


# ---- role gates ----


def test_guests_and_customers_are_kept_out_of_the_back_office(client):
    assert client.get("/api/admin/orders").status_code == 401

    login_as(client, "jane", "Customer")
    res = client.get("/api/admin/orders")
    assert res.status_code == 403
    assert res.json() == {"error": "Admin access required"}


def test_managers_cannot_manage_users(client):
    login_as(client, "max", "Manager")

    assert client.get("/api/admin/orders").status_code == 200
    assert client.get("/api/admin/users").status_code == 403


def test_admin_user_creation_respects_role_rules(client, session):
    login_as(client, "root", "Admin")

    res = client.post(
        "/api/admin/users",
        json={"name": "Boss", "email": "boss@example.com", "password": "secret1", "role": "Super Admin"},
    )
    assert res.status_code == 403

    res = client.post(
        "/api/admin/users",
        json={"name": "Max", "surname": "Payne", "email": "max@example.com", "password": "secret1", "role": "Manager"},
    )
    assert res.status_code == 201
    created = res.json()
    assert created["role"] == "Manager"
    assert created["source"] == "Admin"
    assert created["username"] == "maxpayne"

    listed = client.get("/api/admin/users").json()
    assert [u["email"] for u in listed] == ["max@example.com"]


def test_admin_cannot_delete_a_super_admin(client, session):
    boss = UserService().create_account(
        session, name="Boss", email="boss@example.com", password="secret1", role="Super Admin"
    )
    login_as(client, "root", "Admin")

    assert client.delete(f"/api/admin/users/{boss.id}").status_code == 403

    login_as(client, "owner", "Super Admin")
    assert client.delete(f"/api/admin/users/{boss.id}").status_code == 204
    assert session.exec(select(User)).all() == []


def test_deactivate_user(client, session):
    user = UserService().create_account(
        session, name="Jane", email="jane@example.com", password="secret1", source="Checkout"
    )
    login_as(client, "root", "Admin")

    res = client.post(f"/api/admin/users/{user.id}/deactivate")

    assert res.status_code == 200
    assert res.json()["is_active"] is False
