import logging
from typing import Optional

from portal.errors import PersistenceError
from portal.models import Account
from portal.storage import LocalStorage
from portal.store import Store
from portal.surface import Surface

logger = logging.getLogger(__name__)

AUTHENTICATED_MARKER = "authenticated"
ADMIN_MARKER = "is-admin"


class Session:
    """Who is logged in. Holds a copy of the account as it was at login."""

    def __init__(self, surface: Surface):
        self.surface = surface
        self.current_account: Optional[Account] = None
        self.authenticated = False

    @property
    def is_admin(self) -> bool:
        return self.authenticated and self.current_account is not None and self.current_account.is_admin

    def set_auth_state(self, authenticated: bool, account: Optional[Account] = None) -> None:
        if authenticated:
            if account is None:
                raise ValueError("An account is required to authenticate")
            self.current_account = account.model_copy(deep=True)
            self.authenticated = True
            self.surface.set_marker(AUTHENTICATED_MARKER, True)
            self.surface.set_marker(ADMIN_MARKER, account.is_admin)
            logger.info("Authenticated %s (%s)", account.email, account.role.value)
        else:
            self.current_account = None
            self.authenticated = False
            self.surface.set_marker(AUTHENTICATED_MARKER, False)
            self.surface.set_marker(ADMIN_MARKER, False)


def restore_session(session: Session, store: Store, storage: LocalStorage, token_key: str) -> bool:
    """Silently log back in from a persisted token. The token alone is trusted."""
    token = storage.get_item(token_key)
    if not token:
        return False
    account = store.find_account_by_email(token)
    if account is not None and account.verified:
        session.set_auth_state(True, account)
        return True
    logger.info("Discarding stale login token for %s", token)
    try:
        storage.remove_item(token_key)
    except PersistenceError as e:
        logger.warning("Could not discard stale token: %s", e.message)
    return False
