"""pytest fixtures: an Application on in-memory storage with a ticking clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from portal import auth
from portal.app import Application
from portal.config import Settings
from portal.models import Account, Role
from portal.storage import LocalStorage

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Password123!"
USER_EMAIL = "jane@example.com"
USER_PASSWORD = "secret"


class TickingClock:
    """Advances one second per reading so generated ids never collide."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(STORAGE_URL="sqlite://", STORAGE_QUOTA_CHARS=1_000_000)


@pytest.fixture
def storage(settings: Settings) -> LocalStorage:
    return LocalStorage(settings.STORAGE_URL, quota_chars=settings.STORAGE_QUOTA_CHARS)


@pytest.fixture
def make_app(settings: Settings, storage: LocalStorage) -> Callable[..., Application]:
    def _make(**kwargs) -> Application:
        kwargs.setdefault("storage", storage)
        kwargs.setdefault("clock", TickingClock())
        return Application(settings=settings, **kwargs)

    return _make


@pytest.fixture
def app(make_app) -> Application:
    application = make_app()
    application.start()
    application.surface.drain_notices()
    return application


def add_account(
    app: Application,
    email: str = USER_EMAIL,
    password: str = USER_PASSWORD,
    role: Role = Role.USER,
    verified: bool = True,
    first_name: str = "Jane",
    last_name: str = "Doe",
) -> Account:
    account = Account(
        id=app.store.next_id(app.store.db.accounts),
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        role=role,
        verified=verified,
        created_at=app.store.timestamp(),
    )
    app.store.db.accounts.append(account)
    app.store.save()
    return account


def login_as(app: Application, email: str, password: str) -> None:
    result = app.perform(auth.login, email, password)
    assert result.ok, result.error
    app.surface.drain_notices()


@pytest.fixture
def admin_app(app: Application) -> Application:
    login_as(app, ADMIN_EMAIL, ADMIN_PASSWORD)
    return app


@pytest.fixture
def user_app(app: Application) -> Application:
    add_account(app)
    login_as(app, USER_EMAIL, USER_PASSWORD)
    return app
