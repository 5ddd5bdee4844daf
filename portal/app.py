"""Application state: one object owning the store, session, surface and router.

Start order matters: the store is loaded and the session restored before the
first route runs.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from portal.config import Settings, settings as default_settings
from portal.errors import PortalError
from portal.forms import ActionResult, Outcome
from portal.router import Page, RouteResult, Router
from portal.session import Session, restore_session
from portal.storage import LocalStorage
from portal.store import Store
from portal.surface import Location, Surface

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Application:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[LocalStorage] = None,
        surface: Optional[Surface] = None,
        clock: Callable[[], datetime] = utc_now,
        fragment: str = "",
    ):
        self.settings = settings or default_settings
        self.storage = storage or LocalStorage(
            self.settings.STORAGE_URL, quota_chars=self.settings.STORAGE_QUOTA_CHARS
        )
        self.surface = surface or Surface(p.element_id for p in Page)
        self.location = Location(fragment)
        self.store = Store(self.storage, self.settings.STORAGE_KEY, self.surface, clock)
        self.session = Session(self.surface)
        self.router = Router(self.store, self.session, self.surface, self.location)
        self.last_route: Optional[RouteResult] = None

    def start(self) -> None:
        self.store.load()
        restore_session(self.session, self.store, self.storage, self.settings.TOKEN_KEY)
        if not self.location.fragment:
            self.location.replace(Page.HOME.fragment)
        self.last_route = self.router.route(self.location.fragment)
        self.dispatch(redirects=0)
        logger.info("Application started on %s", self.location.fragment)

    # -----------------------------
    # Navigation
    # -----------------------------
    def navigate(self, fragment: str) -> None:
        self.location.assign(fragment)
        self.dispatch()

    def dispatch(self, redirects: int = -1) -> None:
        """Handle queued fragment changes, one route per change.

        The first change routed is the navigation itself unless ``redirects``
        says routing already happened; every later change is a redirect.
        """
        while self.location.next_change() is not None:
            redirects += 1
            if redirects > self.settings.MAX_REDIRECTS:
                logger.error("Gave up routing after %d redirects at %s",
                             self.settings.MAX_REDIRECTS, self.location.fragment)
                self.location.discard_changes()
                return
            self.last_route = self.router.route(self.location.fragment)

    def render(self, page: Page) -> None:
        self.router.render(page)

    # -----------------------------
    # Actions
    # -----------------------------
    def commit(self, page: Page, message: str) -> Outcome:
        """Persist a mutation, refresh the list that shows it and tell the user."""
        self.store.save()
        self.render(page)
        self.surface.notify(message, "success")
        return Outcome.DONE

    def perform(self, action: Callable[..., Outcome], *args: Any, **kwargs: Any) -> ActionResult:
        """Run an action, turning any PortalError into a notice."""
        try:
            outcome = action(self, *args, **kwargs)
        except PortalError as e:
            logger.info("%s failed: %s", getattr(action, "__name__", action), e.message)
            self.surface.notify(e.message, "error")
            return ActionResult(Outcome.FAILED, e)
        return ActionResult(outcome)
