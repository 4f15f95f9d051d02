"""
Admin token authentication middleware.

Guards /api/v1/admin/* with a bearer token from ADMIN_TOKEN. Outside
production with no token configured, admin routes are open; in production
without a token every admin request is rejected.
"""
import hmac
from typing import Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

ADMIN_PREFIX = "/api/v1/admin"


def admin_guard_required(settings) -> bool:
    """Whether the API must install AdminTokenMiddleware"""
    return bool(settings.admin_token) or settings.environment == "production"


class AdminTokenMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, token: Optional[str]):
        super().__init__(app)
        self.token = token or None

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(ADMIN_PREFIX):
            return await call_next(request)

        header = request.headers.get("authorization", "")
        scheme, _, supplied = header.partition(" ")
        authorized = (
            self.token is not None
            and scheme.lower() == "bearer"
            and hmac.compare_digest(supplied, self.token)
        )
        if not authorized:
            logger.warning("admin_auth_rejected",
                           path=request.url.path,
                           token_configured=self.token is not None,
                           ip=request.headers.get("x-forwarded-for", "unknown"))
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Admin authentication required"},
            )

        return await call_next(request)
