import logging

from portal.errors import NotFoundError, ValidationError
from portal.forms import FormField, InputSource, Outcome, collect
from portal.models import Department, Employee
from portal.router import Page

logger = logging.getLogger(__name__)

EMPLOYEE_ID = FormField("employeeId", "Employee ID")
USER_EMAIL = FormField("userEmail", "User email")
POSITION = FormField("position", "Position")
DEPARTMENT_ID = FormField("departmentId", "Department ID")
HIRE_DATE = FormField("hireDate", "Hire date (YYYY-MM-DD)")

CREATE_FIELDS = [EMPLOYEE_ID, USER_EMAIL, POSITION, DEPARTMENT_ID, HIRE_DATE]
EDIT_FIELDS = [EMPLOYEE_ID, POSITION, DEPARTMENT_ID, HIRE_DATE]


def get_employee(app, employee_id: int) -> Employee:
    employee = app.store.find_employee(employee_id)
    if employee is None:
        raise NotFoundError("Employee not found.", collection="employees", key=employee_id)
    return employee


def _department_from(app, raw: str) -> Department:
    try:
        department_id = int(raw.strip())
    except ValueError:
        raise ValidationError("Department ID must be a number.", field="departmentId", value=raw)
    department = app.store.find_department(department_id)
    if department is None:
        raise ValidationError("Department not found.", field="departmentId", value=department_id)
    return department


def create_employee(app, source: InputSource) -> Outcome:
    form = collect(source, CREATE_FIELDS)
    if form.partial:
        return Outcome.PARTIAL

    account = app.store.find_account_by_email(form["userEmail"])
    if account is None:
        raise ValidationError("User not found. The email must belong to an existing account.",
                              field="userEmail", value=form["userEmail"])
    department = _department_from(app, form["departmentId"])

    employees = app.store.db.employees
    employees.append(Employee(
        id=app.store.next_id(employees),
        employee_id=form["employeeId"],
        user_id=account.id,
        position=form["position"],
        department_id=department.id,
        hire_date=form["hireDate"],
    ))
    logger.info("Created employee %s for %s", form["employeeId"], account.email)
    return app.commit(Page.EMPLOYEES, "Employee added successfully!")


def edit_employee(app, employee_id: int, source: InputSource) -> Outcome:
    employee = get_employee(app, employee_id)
    form = collect(source, EDIT_FIELDS, {
        "employeeId": employee.employee_id,
        "position": employee.position,
        "departmentId": str(employee.department_id),
        "hireDate": employee.hire_date,
    })
    if form.partial:
        return Outcome.PARTIAL

    department = _department_from(app, form["departmentId"])
    employee.employee_id = form["employeeId"]
    employee.position = form["position"]
    employee.department_id = department.id
    employee.hire_date = form["hireDate"]
    return app.commit(Page.EMPLOYEES, "Employee updated successfully!")


def delete_employee(app, employee_id: int, source: InputSource) -> Outcome:
    employee = get_employee(app, employee_id)
    if not source.confirm(f"Delete employee {employee.employee_id}?"):
        return Outcome.CANCELLED

    app.store.db.employees = [e for e in app.store.db.employees if e.id != employee_id]
    logger.info("Deleted employee %s", employee_id)
    return app.commit(Page.EMPLOYEES, "Employee deleted.")
