import pytest
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, USER_EMAIL, USER_PASSWORD, add_account
from fastapi.testclient import TestClient

from portal.main import create_app
from portal.router import ACCESS_DENIED_MESSAGE


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(create_app(app))


@pytest.fixture
def admin_client(client) -> TestClient:
    resp = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


def test_root(client):
    assert client.get("/").json() == {"status": "Employee Portal running"}


def test_state_starts_at_home(client):
    state = client.get("/state").json()
    assert state["fragment"] == "#/"
    assert state["activePage"] == "home-page"
    assert state["markers"] == []
    assert state["outcome"] is None


class TestLogin:
    def test_admin_login(self, client):
        resp = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        state = resp.json()

        assert resp.status_code == 200
        assert state["outcome"] == "done"
        assert state["activePage"] == "profile-page"
        assert state["markers"] == ["authenticated", "is-admin"]
        assert state["view"]["email"] == ADMIN_EMAIL

    def test_wrong_password(self, client):
        resp = client.post("/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        state = resp.json()

        assert resp.status_code == 401
        assert state["outcome"] == "failed"
        assert state["error"]["error_code"] == "INVALID_CREDENTIALS"
        assert state["notices"][0]["level"] == "error"
        assert state["markers"] == []

    def test_logout(self, admin_client):
        state = admin_client.post("/logout").json()
        assert state["fragment"] == "#/"
        assert state["markers"] == []


class TestRegistration:
    def test_register_then_verify(self, client):
        resp = client.post("/register", json={
            "firstName": "Jane", "lastName": "Doe", "email": USER_EMAIL, "password": USER_PASSWORD,
        })
        assert resp.status_code == 200
        assert resp.json()["activePage"] == "verify-email-page"

        resp = client.post("/verify-email")
        assert resp.status_code == 200
        assert resp.json()["fragment"] == "#/login"

    def test_duplicate_email_conflicts(self, client):
        resp = client.post("/register", json={
            "firstName": "A", "lastName": "B", "email": ADMIN_EMAIL.upper(), "password": "x",
        })
        assert resp.status_code == 409

    def test_verify_without_pending_email(self, client):
        assert client.post("/verify-email").status_code == 400


class TestNavigation:
    def test_admin_page_without_login_redirects(self, client):
        state = client.post("/navigate", json={"fragment": "#/accounts"}).json()
        assert state["fragment"] == "#/login"
        assert state["activePage"] == "login-page"

    def test_admin_page_as_user_is_denied(self, app, client):
        add_account(app)
        client.post("/login", json={"email": USER_EMAIL, "password": USER_PASSWORD})
        state = client.post("/navigate", json={"fragment": "#/employees"}).json()

        assert state["activePage"] == "home-page"
        assert [n["message"] for n in state["notices"]] == [ACCESS_DENIED_MESSAGE]

    def test_admin_sees_departments(self, admin_client):
        state = admin_client.post("/navigate", json={"fragment": "#/departments"}).json()
        assert [row["name"] for row in state["view"]["rows"]] == ["Engineering", "HR"]


class TestCrudEndpoints:
    def test_requires_login(self, client):
        assert client.post("/departments", json={"name": "Ops", "description": "x"}).status_code == 401

    def test_requires_admin(self, app, client):
        add_account(app)
        client.post("/login", json={"email": USER_EMAIL, "password": USER_PASSWORD})
        resp = client.post("/departments", json={"name": "Ops", "description": "x"})
        assert resp.status_code == 403

    def test_create_department(self, app, admin_client):
        resp = admin_client.post("/departments", json={"name": "Ops", "description": "Operations"})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == "done"
        assert app.store.db.departments[-1].name == "Ops"

    def test_partial_form(self, app, admin_client):
        resp = admin_client.post("/departments", json={"name": "Ops"})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == "partial"
        assert len(app.store.db.departments) == 2

    def test_create_employee_accepts_numeric_department(self, app, admin_client):
        resp = admin_client.post("/employees", json={
            "employeeId": "E-1", "userEmail": ADMIN_EMAIL, "position": "Lead",
            "departmentId": 2, "hireDate": "2024-01-01",
        })
        assert resp.json()["outcome"] == "done"
        assert app.store.db.employees[0].department_id == 2

    def test_edit_account_bad_role(self, admin_client):
        resp = admin_client.post("/accounts/1/edit", json={"role": "owner"})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"]["field"] == "role"

    def test_delete_needs_confirmation(self, app, admin_client):
        resp = admin_client.delete("/departments/1")
        assert resp.json()["outcome"] == "cancelled"
        assert app.store.find_department(1) is not None

        resp = admin_client.delete("/departments/1", params={"confirm": "true"})
        assert resp.json()["outcome"] == "done"
        assert app.store.find_department(1) is None

    def test_cannot_delete_self(self, admin_client):
        resp = admin_client.delete("/accounts/1", params={"confirm": "true"})
        assert resp.status_code == 400

    def test_unknown_employee(self, admin_client):
        assert admin_client.delete("/employees/5", params={"confirm": "true"}).status_code == 404
        assert admin_client.post("/employees/5/edit", json={}).status_code == 404
