from conftest import add_account

from portal.models import Account, Department, Employee
from portal.views import (
    UNKNOWN,
    Reference,
    render_accounts,
    render_departments,
    render_employees,
    render_profile,
    resolve,
)


class TestReference:
    def test_resolved_reference_displays_target(self):
        ref = resolve([Department(id=3, name="Ops")], 3)
        assert not ref.dangling
        assert ref.display(lambda d: d.name) == "Ops"

    def test_dangling_reference_displays_fallback(self):
        ref: Reference[Department] = resolve([], 3)
        assert ref.dangling
        assert ref.id == 3
        assert ref.display(lambda d: d.name) == UNKNOWN
        assert ref.display(lambda d: d.name, fallback="-") == "-"


def test_accounts_view_rows(app):
    add_account(app, verified=False)
    view = render_accounts(app.store, app.session)

    admin, jane = view.rows
    assert (admin.name, admin.role, admin.role_badge, admin.verified_label) == (
        "Admin User", "admin", "Admin", "Verified")
    assert (jane.email, jane.role_badge, jane.verified, jane.verified_label) == (
        "jane@example.com", "User", False, "Not verified")
    assert jane.actions == ["edit", "delete"]


def test_departments_view(app):
    view = render_departments(app.store, app.session)
    assert [(r.id, r.name, r.description) for r in view.rows] == [
        (1, "Engineering", "Software team"),
        (2, "HR", "Human Resources"),
    ]
    assert view.empty_message is None


def test_employees_view_joins_and_falls_back(app):
    app.store.db.employees = [
        Employee(id=1, employee_id="E-1", user_id=1, position="Lead", department_id=2, hire_date="2024-01-01"),
        Employee(id=2, employee_id="E-2", user_id=404, position="Dev", department_id=404, hire_date="2024-01-02"),
    ]
    view = render_employees(app.store, app.session)

    known, dangling = view.rows
    assert (known.user_email, known.department_name) == ("admin@example.com", "HR")
    assert (dangling.user_email, dangling.department_name) == (UNKNOWN, UNKNOWN)


def test_employees_empty_state(app):
    assert render_employees(app.store, app.session).empty_message == "No employees found."


def test_profile_needs_a_session(app):
    assert render_profile(app.store, app.session) is None


def test_profile_shows_session_identity(admin_app):
    view = render_profile(admin_app.store, admin_app.session)
    assert (view.name, view.email, view.role_badge, view.verified_badge) == (
        "Admin User", "admin@example.com", "Admin", "Verified")


def test_renderers_do_not_mutate_the_store(admin_app):
    admin_app.store.db.employees.append(
        Employee(id=9, employee_id="E-9", user_id=123, position="X", department_id=456, hire_date="d"))
    before = admin_app.store.db.model_copy(deep=True)
    for render in (render_accounts, render_departments, render_employees, render_profile):
        render(admin_app.store, admin_app.session)
    assert admin_app.store.db == before


def test_account_full_name():
    account = Account(id=1, first_name="Grace", last_name="Hopper", email="g@x", password="p", created_at="")
    assert account.full_name == "Grace Hopper"
