import logging

from portal.errors import NotFoundError, ValidationError
from portal.forms import FormField, InputSource, Outcome, collect
from portal.models import Account, Role, normalize_email
from portal.router import Page

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = [
    FormField("firstName", "First name"),
    FormField("lastName", "Last name"),
    FormField("email", "Email"),
    FormField("role", "Role (user/admin)"),
]


def get_account(app, account_id: int) -> Account:
    account = app.store.find_account(account_id)
    if account is None:
        raise NotFoundError("Account not found.", collection="accounts", key=account_id)
    return account


def edit_account(app, account_id: int, source: InputSource) -> Outcome:
    account = get_account(app, account_id)
    form = collect(source, ACCOUNT_FIELDS, {
        "firstName": account.first_name,
        "lastName": account.last_name,
        "email": account.email,
        "role": account.role.value,
    })
    if form.partial:
        return Outcome.PARTIAL

    role = form["role"]
    if role not in (Role.USER.value, Role.ADMIN.value):
        raise ValidationError("Invalid role. Must be 'user' or 'admin'.", field="role", value=role)
    email = normalize_email(form["email"])
    if not email:
        raise ValidationError("Email cannot be blank.", field="email", value=form["email"])

    account.first_name = form["firstName"]
    account.last_name = form["lastName"]
    account.email = email
    account.role = Role(role)
    logger.info("Updated account %s", account.id)
    return app.commit(Page.ACCOUNTS, "Account updated successfully!")


def delete_account(app, account_id: int, source: InputSource) -> Outcome:
    account = get_account(app, account_id)
    current = app.session.current_account
    if current is not None and current.id == account.id:
        raise ValidationError("You cannot delete your own account.", field="id", value=account_id)

    if not source.confirm(f"Delete account {account.email}?"):
        return Outcome.CANCELLED

    app.store.db.accounts = [a for a in app.store.db.accounts if a.id != account_id]
    logger.info("Deleted account %s", account_id)
    return app.commit(Page.ACCOUNTS, "Account deleted.")
