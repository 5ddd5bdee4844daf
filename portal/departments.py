import logging

from portal.errors import NotFoundError
from portal.forms import FormField, InputSource, Outcome, collect
from portal.models import Department
from portal.router import Page

logger = logging.getLogger(__name__)

DEPARTMENT_FIELDS = [
    FormField("name", "Department name"),
    FormField("description", "Description"),
]


def get_department(app, department_id: int) -> Department:
    department = app.store.find_department(department_id)
    if department is None:
        raise NotFoundError("Department not found.", collection="departments", key=department_id)
    return department


def create_department(app, source: InputSource) -> Outcome:
    form = collect(source, DEPARTMENT_FIELDS)
    if form.partial:
        return Outcome.PARTIAL

    departments = app.store.db.departments
    departments.append(Department(
        id=app.store.next_id(departments),
        name=form["name"],
        description=form["description"],
    ))
    logger.info("Created department %s", form["name"])
    return app.commit(Page.DEPARTMENTS, "Department added successfully!")


def edit_department(app, department_id: int, source: InputSource) -> Outcome:
    department = get_department(app, department_id)
    form = collect(source, DEPARTMENT_FIELDS, {
        "name": department.name,
        "description": department.description,
    })
    if form.partial:
        return Outcome.PARTIAL

    department.name = form["name"]
    department.description = form["description"]
    return app.commit(Page.DEPARTMENTS, "Department updated successfully!")


def delete_department(app, department_id: int, source: InputSource) -> Outcome:
    """Remove a department. Employees pointing at it keep the dangling id."""
    department = get_department(app, department_id)
    if not source.confirm(f"Delete department {department.name}?"):
        return Outcome.CANCELLED

    app.store.db.departments = [d for d in app.store.db.departments if d.id != department_id]
    logger.info("Deleted department %s", department_id)
    return app.commit(Page.DEPARTMENTS, "Department deleted.")
