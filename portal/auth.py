import logging

from portal.errors import ConflictError, InvalidCredentialsError, NotFoundError, PersistenceError, ValidationError
from portal.forms import Outcome
from portal.models import Account, Role, normalize_email
from portal.router import Page

logger = logging.getLogger(__name__)


def validate_user(app, email, password):
    """Return the first verified account matching email and password exactly, or None.

    Edits do not recheck email uniqueness, so every account sharing the email
    is a candidate.
    """
    for account in app.store.find_accounts_by_email(email):
        if account.password == password and account.verified:
            return account
    return None


def _write(app, key, value=None):
    """Write or clear a storage key, reporting failures as a notice."""
    try:
        if value is None:
            app.storage.remove_item(key)
        else:
            app.storage.set_item(key, value)
    except PersistenceError as e:
        logger.error("Could not update %s: %s", key, e.message)
        app.surface.notify(f"Could not save data: {e.message}", "error")


def register(app, first_name: str, last_name: str, email: str, password: str) -> Outcome:
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    email = normalize_email(email)
    for name, value in (("firstName", first_name), ("lastName", last_name), ("email", email), ("password", password)):
        if not value:
            raise ValidationError("Please fill in all fields.", field=name)

    if app.store.find_account_by_email(email) is not None:
        raise ConflictError("An account with this email already exists.", field="email", value=email)

    accounts = app.store.db.accounts
    account = Account(
        id=app.store.next_id(accounts),
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        role=Role.USER,
        verified=False,
        created_at=app.store.timestamp(),
    )
    accounts.append(account)
    app.store.save()
    _write(app, app.settings.PENDING_VERIFICATION_KEY, email)
    logger.info("Registered %s", email)
    app.surface.notify("Registration successful! Please verify your email.", "success")
    app.navigate(Page.VERIFY_EMAIL.fragment)
    return Outcome.DONE


def verify_email(app) -> Outcome:
    email = app.storage.get_item(app.settings.PENDING_VERIFICATION_KEY)
    if not email:
        raise ValidationError("No email pending verification. Please register first.")

    account = app.store.find_account_by_email(email)
    if account is None:
        raise NotFoundError("Account not found.", collection="accounts", key=email)

    account.verified = True
    app.store.save()
    _write(app, app.settings.PENDING_VERIFICATION_KEY)
    app.surface.notify("Email verified! You can now log in.", "success")
    app.navigate(Page.LOGIN.fragment)
    return Outcome.DONE


def login(app, email: str, password: str) -> Outcome:
    email = normalize_email(email)
    account = validate_user(app, email, password)
    if account is None:
        logger.info("Failed login for %s", email)
        raise InvalidCredentialsError()

    _write(app, app.settings.TOKEN_KEY, account.email)
    app.session.set_auth_state(True, account)
    app.surface.notify(f"Welcome back, {account.first_name}!", "success")
    app.navigate(Page.PROFILE.fragment)
    return Outcome.DONE


def logout(app) -> Outcome:
    _write(app, app.settings.TOKEN_KEY)
    app.session.set_auth_state(False)
    app.navigate(Page.HOME.fragment)
    return Outcome.DONE
