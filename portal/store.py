import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from pydantic import ValidationError as SchemaError

from portal.errors import CorruptStateError, PersistenceError
from portal.models import Account, Database, Department, Employee, Role, normalize_email
from portal.storage import LocalStorage
from portal.surface import Surface

logger = logging.getLogger(__name__)

SEED_ADMIN_EMAIL = "admin@example.com"
SEED_ADMIN_PASSWORD = "Password123!"


class Store:
    """The live collections and their persisted copy under one storage key."""

    def __init__(
        self,
        storage: LocalStorage,
        key: str,
        surface: Surface,
        clock: Callable[[], datetime],
    ):
        self.storage = storage
        self.key = key
        self.surface = surface
        self.clock = clock
        self.db = Database()

    # --- 1. Persistence ---

    def load(self) -> None:
        raw = self.storage.get_item(self.key)
        if raw is None:
            logger.info("No stored data under '%s', seeding", self.key)
            self.seed()
            return
        try:
            self.db = self._parse(raw)
        except CorruptStateError as e:
            logger.warning("%s Reseeding.", e.message)
            self.seed()

    def _parse(self, raw: str) -> Database:
        try:
            return Database.model_validate_json(raw)
        except SchemaError as e:
            raise CorruptStateError(f"Stored data under '{self.key}' is unreadable.", key=self.key) from e

    def save(self) -> bool:
        """Persist the live collections. Failures are shown to the user, never raised."""
        try:
            self.storage.set_item(self.key, self.db.to_json())
        except PersistenceError as e:
            logger.error("Save failed: %s", e.message)
            self.surface.notify(f"Could not save data: {e.message}", "error")
            return False
        return True

    def seed(self) -> None:
        self.db = Database(
            accounts=[
                Account(
                    id=1,
                    first_name="Admin",
                    last_name="User",
                    email=SEED_ADMIN_EMAIL,
                    password=SEED_ADMIN_PASSWORD,
                    role=Role.ADMIN,
                    verified=True,
                    created_at=self.clock().isoformat(),
                )
            ],
            departments=[
                Department(id=1, name="Engineering", description="Software team"),
                Department(id=2, name="HR", description="Human Resources"),
            ],
            employees=[],
            requests=[],
        )
        logger.info("Seeded store with %d account(s) and %d department(s)",
                    len(self.db.accounts), len(self.db.departments))
        self.save()

    # --- 2. Lookups ---

    def find_account(self, account_id: int) -> Optional[Account]:
        return _by_id(self.db.accounts, account_id)

    def find_account_by_email(self, email: str) -> Optional[Account]:
        matches = self.find_accounts_by_email(email)
        return matches[0] if matches else None

    def find_accounts_by_email(self, email: str) -> List[Account]:
        email = normalize_email(email)
        return [a for a in self.db.accounts if a.email == email]

    def find_department(self, department_id: int) -> Optional[Department]:
        return _by_id(self.db.departments, department_id)

    def find_employee(self, employee_id: int) -> Optional[Employee]:
        return _by_id(self.db.employees, employee_id)

    # --- 3. Ids ---

    def next_id(self, records: Iterable) -> int:
        """Millisecond clock reading, bumped past any id already taken."""
        taken = {r.id for r in records}
        new_id = int(self.clock().timestamp() * 1000)
        while new_id in taken:
            new_id += 1
        return new_id

    def timestamp(self) -> str:
        return self.clock().isoformat()


def _by_id(records: List, record_id: int):
    for record in records:
        if record.id == record_id:
            return record
    return None
