import logging

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from worktrack.config import settings
from worktrack.core.dependencies import resolve_session_profile
from worktrack.core.enums import Role
from worktrack.core.exceptions import NotAuthenticatedError
from worktrack.core.security import extract_token
from worktrack.database import session as db_session

logger = logging.getLogger(__name__)

ERROR_PATH = "/error"


def is_admin_section(path: str, prefix: str = "/admin") -> bool:
    return path == prefix or path.startswith(prefix + "/")


class AdminRouteGate(BaseHTTPMiddleware):
    """Redirects navigation into the admin section unless the caller is an admin.

    The session and role are looked up again on every request; nothing is
    cached between navigations.
    """

    def __init__(self, app, prefix: str = "/admin"):
        super().__init__(app)
        self.prefix = prefix

    def _redirect_target(self, token: str | None) -> str | None:
        db = db_session.SessionLocal()
        try:
            try:
                profile = resolve_session_profile(db, token, touch=False)
            except NotAuthenticatedError:
                return settings.LOGIN_PATH
            if not profile.is_active or profile.role != Role.ADMIN:
                return settings.DEFAULT_PATH
            return None
        finally:
            db.close()

    async def dispatch(self, request: Request, call_next):
        if not is_admin_section(request.url.path, self.prefix):
            return await call_next(request)

        try:
            target = await run_in_threadpool(self._redirect_target, extract_token(request))
        except SQLAlchemyError:
            logger.exception("Route gate failed for %s", request.url.path)
            return RedirectResponse(ERROR_PATH, status_code=303)

        if target is not None:
            logger.info("Route gate redirected %s to %s", request.url.path, target)
            return RedirectResponse(target, status_code=303)
        return await call_next(request)
