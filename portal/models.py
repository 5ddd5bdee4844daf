from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


# -----------------------------
# Records
# -----------------------------
class Record(BaseModel):
    # Persisted as camelCase (firstName, departmentId, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int


class Account(Record):
    first_name: str
    last_name: str
    email: str
    password: str
    role: Role = Role.USER
    verified: bool = False
    created_at: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Department(Record):
    name: str
    description: str = ""


class Employee(Record):
    employee_id: str
    user_id: int
    position: str
    department_id: int
    hire_date: str


class Request(Record):
    """Reserved collection. Nothing creates requests yet; unknown fields are kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# -----------------------------
# Persisted blob
# -----------------------------
class Database(BaseModel):
    accounts: List[Account] = []
    departments: List[Department] = []
    employees: List[Employee] = []
    requests: List[Request] = []

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
