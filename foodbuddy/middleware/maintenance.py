"""
Maintenance mode middleware.

When enabled, every request is answered with a static 503 page before it
reaches any route.
"""

from typing import Optional
from fastapi import Request
from fastapi.responses import HTMLResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

from foodbuddy.core.config import settings

logger = structlog.get_logger(__name__)

MAINTENANCE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>FoodBuddy is under maintenance</title>
</head>
<body>
  <h1>We'll be back soon</h1>
  <p>FoodBuddy is undergoing scheduled maintenance. Please check back shortly.</p>
</body>
</html>
"""


class MaintenanceModeMiddleware(BaseHTTPMiddleware):
    """Short-circuits all traffic while maintenance mode is on."""

    def __init__(self, app, enabled: Optional[bool] = None):
        super().__init__(app)
        self.enabled = settings.maintenance_mode if enabled is None else enabled

    async def dispatch(self, request: Request, call_next):
        if not self.enabled:
            return await call_next(request)

        logger.info("Request blocked by maintenance mode", method=request.method, path=request.url.path)
        return HTMLResponse(
            content=MAINTENANCE_PAGE,
            status_code=503,
            headers={"Retry-After": "3600"}
        )
