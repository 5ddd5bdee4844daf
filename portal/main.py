import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from portal import accounts, auth, departments, employees
from portal.app import Application
from portal.config import settings
from portal.forms import ActionResult, FormInput
from portal.router import ACCESS_DENIED_MESSAGE

logger = logging.getLogger(__name__)


# -----------------------------
# Models
# -----------------------------
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(CamelModel):
    email: str
    password: str


class NavigateRequest(CamelModel):
    fragment: str


class StateSnapshot(CamelModel):
    fragment: str
    active_page: Optional[str] = None
    markers: List[str] = []
    notices: List[Dict[str, str]] = []
    view: Optional[Dict[str, Any]] = None
    outcome: Optional[str] = None
    error: Optional[Dict[str, Any]] = None


def snapshot_of(application: Application, result: Optional[ActionResult] = None) -> StateSnapshot:
    surface = application.surface
    view = surface.views.get(surface.active_page) if surface.active_page else None
    return StateSnapshot(
        fragment=application.location.fragment,
        active_page=surface.active_page,
        markers=sorted(surface.markers),
        notices=[{"message": n.message, "level": n.level} for n in surface.drain_notices()],
        view=view.model_dump() if view is not None else None,
        outcome=result.outcome.value if result else None,
        error=result.error.to_dict() if result and result.error else None,
    )


def respond(application: Application, result: Optional[ActionResult] = None) -> JSONResponse:
    status_code = result.error.status_code if result and result.error else status.HTTP_200_OK
    snapshot = snapshot_of(application, result)
    return JSONResponse(snapshot.model_dump(by_alias=True), status_code=status_code)


# -----------------------------
# Dependencies
# -----------------------------
def get_application(request: Request) -> Application:
    return request.app.state.application


def require_admin(application: Application = Depends(get_application)) -> Application:
    if not application.session.authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not application.session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED_MESSAGE)
    return application


def create_app(application: Optional[Application] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(api: FastAPI):
        if application is None:
            started = Application()
            started.start()
            api.state.application = started
        yield

    api = FastAPI(
        title="Employee Portal",
        description="Role-gated employee management over a locally persisted store",
        version="1.0",
        lifespan=lifespan,
    )
    if application is not None:
        api.state.application = application

    # Allow frontend (vite) to call the API during local development
    api.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _add_routes(api)
    return api


def _add_routes(api: FastAPI) -> None:
    # -----------------------------
    # Root
    # -----------------------------
    @api.get("/")
    def root():
        return {"status": "Employee Portal running"}

    # -----------------------------
    # Navigation
    # -----------------------------
    @api.get("/state")
    def get_state(application: Application = Depends(get_application)):
        return respond(application)

    @api.post("/navigate")
    def navigate(req: NavigateRequest, application: Application = Depends(get_application)):
        application.navigate(req.fragment)
        return respond(application)

    # -----------------------------
    # Registration / Login
    # -----------------------------
    @api.post("/register")
    def register(req: RegisterRequest, application: Application = Depends(get_application)):
        result = application.perform(auth.register, req.first_name, req.last_name, req.email, req.password)
        return respond(application, result)

    @api.post("/verify-email")
    def verify_email(application: Application = Depends(get_application)):
        return respond(application, application.perform(auth.verify_email))

    @api.post("/login")
    def login(req: LoginRequest, request: Request, application: Application = Depends(get_application)):
        client = request.client.host if request.client else "unknown"
        logger.info("[/login] request from %s for %s", client, req.email)
        return respond(application, application.perform(auth.login, req.email, req.password))

    @api.post("/logout")
    def logout(application: Application = Depends(get_application)):
        return respond(application, application.perform(auth.logout))

    # -----------------------------
    # Accounts
    # -----------------------------
    @api.post("/accounts/{account_id}/edit")
    def edit_account(account_id: int, body: Dict[str, Any] = Body(default={}),
                     application: Application = Depends(require_admin)):
        result = application.perform(accounts.edit_account, account_id, FormInput(body))
        return respond(application, result)

    @api.delete("/accounts/{account_id}")
    def delete_account(account_id: int, confirm: bool = False,
                       application: Application = Depends(require_admin)):
        result = application.perform(accounts.delete_account, account_id, FormInput(confirmed=confirm))
        return respond(application, result)

    # -----------------------------
    # Departments
    # -----------------------------
    @api.post("/departments")
    def create_department(body: Dict[str, Any] = Body(default={}),
                          application: Application = Depends(require_admin)):
        result = application.perform(departments.create_department, FormInput(body))
        return respond(application, result)

    @api.post("/departments/{department_id}/edit")
    def edit_department(department_id: int, body: Dict[str, Any] = Body(default={}),
                        application: Application = Depends(require_admin)):
        result = application.perform(departments.edit_department, department_id, FormInput(body))
        return respond(application, result)

    @api.delete("/departments/{department_id}")
    def delete_department(department_id: int, confirm: bool = False,
                          application: Application = Depends(require_admin)):
        result = application.perform(departments.delete_department, department_id, FormInput(confirmed=confirm))
        return respond(application, result)

    # -----------------------------
    # Employees
    # -----------------------------
    @api.post("/employees")
    def create_employee(body: Dict[str, Any] = Body(default={}),
                        application: Application = Depends(require_admin)):
        result = application.perform(employees.create_employee, FormInput(body))
        return respond(application, result)

    @api.post("/employees/{employee_id}/edit")
    def edit_employee(employee_id: int, body: Dict[str, Any] = Body(default={}),
                      application: Application = Depends(require_admin)):
        result = application.perform(employees.edit_employee, employee_id, FormInput(body))
        return respond(application, result)

    @api.delete("/employees/{employee_id}")
    def delete_employee(employee_id: int, confirm: bool = False,
                        application: Application = Depends(require_admin)):
        result = application.perform(employees.delete_employee, employee_id, FormInput(confirmed=confirm))
        return respond(application, result)


logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app()
