import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from portal.session import Session
from portal.store import Store
from portal.surface import Location, Surface
from portal import views

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access denied. Admin privileges required."


class Page(str, Enum):
    HOME = "home"
    LOGIN = "login"
    REGISTER = "register"
    VERIFY_EMAIL = "verify-email"
    PROFILE = "profile"
    REQUESTS = "requests"
    ACCOUNTS = "accounts"
    DEPARTMENTS = "departments"
    EMPLOYEES = "employees"

    @property
    def element_id(self) -> str:
        return f"{self.value}-page"

    @property
    def fragment(self) -> str:
        return "#/" if self is Page.HOME else f"#/{self.value}"

    @classmethod
    def lookup(cls, name: str) -> Optional["Page"]:
        try:
            return cls(name)
        except ValueError:
            return None


class Access(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


Renderer = Callable[[Store, Session], Optional[BaseModel]]


@dataclass(frozen=True)
class PageSpec:
    access: Access
    renderer: Optional[Renderer] = None


PAGES: Dict[Page, PageSpec] = {
    Page.HOME: PageSpec(Access.PUBLIC),
    Page.LOGIN: PageSpec(Access.PUBLIC),
    Page.REGISTER: PageSpec(Access.PUBLIC),
    Page.VERIFY_EMAIL: PageSpec(Access.PUBLIC),
    Page.PROFILE: PageSpec(Access.AUTHENTICATED, views.render_profile),
    Page.REQUESTS: PageSpec(Access.AUTHENTICATED),
    Page.ACCOUNTS: PageSpec(Access.ADMIN, views.render_accounts),
    Page.DEPARTMENTS: PageSpec(Access.ADMIN, views.render_departments),
    Page.EMPLOYEES: PageSpec(Access.ADMIN, views.render_employees),
}

_missing = set(Page) - set(PAGES)
if _missing:
    raise RuntimeError(f"Pages without a route entry: {sorted(p.value for p in _missing)}")


def parse_fragment(fragment: str) -> str:
    """'#/accounts' -> 'accounts'; '', '#' and '#/' -> 'home'."""
    text = fragment or "#/"
    if text.startswith("#"):
        text = text[1:]
    if text.startswith("/"):
        text = text[1:]
    return text or Page.HOME.value


@dataclass
class RouteResult:
    page: Optional[Page] = None
    redirect: Optional[str] = None
    denied: bool = False


class Router:
    def __init__(self, store: Store, session: Session, surface: Surface, location: Location):
        self.store = store
        self.session = session
        self.surface = surface
        self.location = location

    def route(self, fragment: str) -> RouteResult:
        name = parse_fragment(fragment)
        page = Page.lookup(name)
        access = PAGES[page].access if page is not None else Access.PUBLIC
        logger.debug("Routing %r -> %s (%s)", fragment, name, access.value)

        if access is Access.AUTHENTICATED and not self.session.authenticated:
            logger.info("Access denied to %s: not logged in", name)
            return self._redirect(Page.LOGIN)

        if access is Access.ADMIN:
            if not self.session.authenticated:
                logger.info("Access denied to %s: not logged in", name)
                return self._redirect(Page.LOGIN)
            if not self.session.is_admin:
                logger.info("Access denied to %s: not admin", name)
                self.surface.notify(ACCESS_DENIED_MESSAGE, "error")
                result = self._redirect(Page.HOME)
                result.denied = True
                return result

        self.surface.deactivate_all()
        if page is None or not self.surface.has_page(page.element_id):
            logger.info("Page not found: %s", name)
            return self._redirect(Page.HOME)

        self.surface.activate(page.element_id)
        self.render(page)
        return RouteResult(page=page)

    def render(self, page: Page) -> None:
        """Re-run the page's renderer, if it has one, without changing the active page."""
        renderer = PAGES[page].renderer
        if renderer is None:
            return
        view = renderer(self.store, self.session)
        if view is not None:
            self.surface.render(page.element_id, view)

    def _redirect(self, page: Page) -> RouteResult:
        self.location.assign(page.fragment)
        return RouteResult(redirect=page.fragment)
