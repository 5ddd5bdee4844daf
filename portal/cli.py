"""Drive the portal from a terminal.

    python -m portal.cli

Commands: go <fragment>, register, verify, login, logout, state, quit,
add department|employee, edit|delete account|department|employee <id>.
"""

import logging
import shlex
from typing import Callable, Dict, List, Optional

from portal import accounts, auth, departments, employees
from portal.app import Application
from portal.config import settings
from portal.forms import ConsoleInput, FormField, InputSource, collect
from portal.router import ACCESS_DENIED_MESSAGE

REGISTER_FIELDS = [
    FormField("firstName", "First name"),
    FormField("lastName", "Last name"),
    FormField("email", "Email"),
    FormField("password", "Password"),
]
LOGIN_FIELDS = [FormField("email", "Email"), FormField("password", "Password")]

ADD = {
    "department": departments.create_department,
    "employee": employees.create_employee,
}
EDIT = {
    "account": accounts.edit_account,
    "department": departments.edit_department,
    "employee": employees.edit_employee,
}
DELETE = {
    "account": accounts.delete_account,
    "department": departments.delete_department,
    "employee": employees.delete_employee,
}


def show(application: Application) -> None:
    for notice in application.surface.drain_notices():
        print(f"[{notice.level}] {notice.message}")
    surface = application.surface
    print(f"{application.location.fragment} -> {surface.active_page or '(none)'}")
    view = surface.views.get(surface.active_page) if surface.active_page else None
    if view is not None:
        print(view.model_dump_json(indent=2))


def run_command(application: Application, source: InputSource, words: List[str]) -> bool:
    """Run one command line. Returns False when the user asked to quit."""
    if not words:
        return True
    command, args = words[0].lower(), words[1:]

    if command in ("quit", "exit"):
        return False
    if command == "state":
        return True
    if command in ("add", "edit", "delete") and not application.session.is_admin:
        application.surface.notify(ACCESS_DENIED_MESSAGE, "error")
        return True
    if command == "go" and len(args) == 1:
        application.navigate(args[0])
    elif command == "register":
        form = collect(source, REGISTER_FIELDS)
        if not form.partial:
            application.perform(auth.register, form["firstName"], form["lastName"], form["email"], form["password"])
    elif command == "verify":
        application.perform(auth.verify_email)
    elif command == "login":
        form = collect(source, LOGIN_FIELDS)
        if not form.partial:
            application.perform(auth.login, form["email"], form["password"])
    elif command == "logout":
        application.perform(auth.logout)
    elif command == "add" and len(args) == 1 and args[0] in ADD:
        application.perform(ADD[args[0]], source)
    elif command in ("edit", "delete") and len(args) == 2:
        table: Dict[str, Callable] = EDIT if command == "edit" else DELETE
        record_id = _parse_id(args[1])
        if args[0] not in table or record_id is None:
            print(f"Usage: {command} account|department|employee <id>")
            return True
        application.perform(table[args[0]], record_id, source)
    else:
        print(__doc__)
    return True


def _parse_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    application = Application()
    application.start()
    source = ConsoleInput()
    show(application)
    while True:
        try:
            line = input("portal> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        try:
            words = shlex.split(line)
        except ValueError as e:
            print(f"Could not parse command: {e}")
            continue
        if not run_command(application, source, words):
            break
        show(application)


if __name__ == "__main__":
    main()
