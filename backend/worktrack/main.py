import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from worktrack.config import settings
from worktrack.core.exceptions import WorktrackError
from worktrack.core.logging_config import configure_logging
from worktrack.core.route_gate import AdminRouteGate
from worktrack.database.base import Base
from worktrack.database.session import engine
from worktrack.models.attendance import AttendanceRecord  # noqa: F401
from worktrack.models.attendance_edit_log import AttendanceEditLog  # noqa: F401
from worktrack.models.attendance_summary import AttendanceSummary  # noqa: F401
from worktrack.models.leave import LeaveRequest  # noqa: F401
from worktrack.models.notification import AttendanceNotification  # noqa: F401
from worktrack.models.profile import Profile  # noqa: F401
from worktrack.models.user_session import UserSession  # noqa: F401
from worktrack.routes import admin, analytics, attendance, auth, dashboard, leaves, manager, notifications, pages, profile

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="worktrack")

app.add_middleware(AdminRouteGate)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)


def _format_validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(v) for v in err.get("loc", []) if str(v) not in {"body", "query", "path"}]
        field = ".".join(loc) if loc else "field"
        err_type = str(err.get("type", ""))
        message = str(err.get("msg", "Invalid value"))

        if err_type in {"missing", "value_error.missing"}:
            messages.append(f"{field} is required")
        elif err_type == "extra_forbidden":
            messages.append(f"{field} is not an editable field")
        elif "none.not_allowed" in err_type:
            messages.append(f"{field} cannot be null")
        elif field:
            messages.append(f"{field}: {message}")
        else:
            messages.append(message)

    # Preserve order while de-duplicating.
    return list(dict.fromkeys(messages))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = _format_validation_messages(exc)
    detail = messages[0] if len(messages) == 1 else "Validation failed"
    return JSONResponse(
        status_code=400,
        content={
            "detail": detail,
            "code": "invalid_input",
            "errors": messages,
        },
    )


@app.exception_handler(WorktrackError)
async def worktrack_exception_handler(request: Request, exc: WorktrackError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


@app.get("/", tags=["Meta"])
def root():
    return {"app": "worktrack", "status": "ok"}


@app.get("/error", tags=["Meta"])
def error_page():
    return JSONResponse(
        status_code=500,
        content={"detail": "Something went wrong. Please try again.", "code": "error"},
    )


app.include_router(auth.login_router)
app.include_router(auth.router)
app.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
app.include_router(dashboard.router)
app.include_router(leaves.router)
app.include_router(profile.router)
app.include_router(notifications.router)
app.include_router(analytics.router)
app.include_router(admin.router)
app.include_router(manager.router)
app.include_router(pages.router)
