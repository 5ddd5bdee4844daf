from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel

from portal.models import Account, Department
from portal.session import Session
from portal.store import Store

UNKNOWN = "Unknown"

T = TypeVar("T")


# =============================
# OPTIONAL REFERENCES
# =============================

@dataclass(frozen=True)
class Reference(Generic[T]):
    """A foreign id and whatever it resolved to, if anything."""

    id: int
    target: Optional[T] = None

    @property
    def dangling(self) -> bool:
        return self.target is None

    def display(self, attr: Callable[[T], str], fallback: str = UNKNOWN) -> str:
        return fallback if self.target is None else attr(self.target)


def resolve(records: Sequence[T], record_id: int) -> Reference[T]:
    for record in records:
        if record.id == record_id:
            return Reference(record_id, record)
    return Reference(record_id)


# =============================
# VIEW MODELS
# =============================

class AccountRow(BaseModel):
    id: int
    name: str
    email: str
    role: str
    role_badge: str
    verified: bool
    verified_label: str
    actions: List[str]


class AccountsView(BaseModel):
    rows: List[AccountRow]


class DepartmentRow(BaseModel):
    id: int
    name: str
    description: str


class DepartmentsView(BaseModel):
    rows: List[DepartmentRow]
    empty_message: Optional[str] = None


class EmployeeRow(BaseModel):
    id: int
    employee_id: str
    user_email: str
    position: str
    department_name: str
    hire_date: str


class EmployeesView(BaseModel):
    rows: List[EmployeeRow]
    empty_message: Optional[str] = None


class ProfileView(BaseModel):
    name: str
    email: str
    role: str
    role_badge: str
    verified: bool
    verified_badge: str


# =============================
# RENDERERS
# =============================

def _role_badge(account: Account) -> str:
    return "Admin" if account.is_admin else "User"


def _verified_label(account: Account) -> str:
    return "Verified" if account.verified else "Not verified"


def render_accounts(store: Store, session: Session) -> AccountsView:
    rows = [
        AccountRow(
            id=a.id,
            name=a.full_name,
            email=a.email,
            role=a.role.value,
            role_badge=_role_badge(a),
            verified=a.verified,
            verified_label=_verified_label(a),
            actions=["edit", "delete"],
        )
        for a in store.db.accounts
    ]
    return AccountsView(rows=rows)


def render_departments(store: Store, session: Session) -> DepartmentsView:
    rows = [DepartmentRow(id=d.id, name=d.name, description=d.description) for d in store.db.departments]
    return DepartmentsView(rows=rows, empty_message=None if rows else "No departments found.")


def render_employees(store: Store, session: Session) -> EmployeesView:
    rows = []
    for e in store.db.employees:
        user: Reference[Account] = resolve(store.db.accounts, e.user_id)
        department: Reference[Department] = resolve(store.db.departments, e.department_id)
        rows.append(
            EmployeeRow(
                id=e.id,
                employee_id=e.employee_id,
                user_email=user.display(lambda a: a.email),
                position=e.position,
                department_name=department.display(lambda d: d.name),
                hire_date=e.hire_date,
            )
        )
    return EmployeesView(rows=rows, empty_message=None if rows else "No employees found.")


def render_profile(store: Store, session: Session) -> Optional[ProfileView]:
    account = session.current_account
    if not session.authenticated or account is None:
        return None
    return ProfileView(
        name=account.full_name,
        email=account.email,
        role=account.role.value,
        role_badge=_role_badge(account),
        verified=account.verified,
        verified_badge=_verified_label(account),
    )
