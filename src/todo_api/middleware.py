"""HTTP middleware: origin allow-list guard.

Pure ASGI middleware (not BaseHTTPMiddleware) so it sits in front of
CORSMiddleware and rejects unlisted origins before any route runs.
"""

from __future__ import annotations

import logging
from typing import Iterable

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class OriginGuardMiddleware:
    """Reject requests whose Origin header is not in the allow-list.

    Requests without an Origin header (curl, server-to-server) pass through.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        self.app = app
        self._allowed = frozenset(allowed_origins)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        origin = headers.get(b"origin")
        if origin is None:
            await self.app(scope, receive, send)
            return

        origin_str = origin.decode("latin-1")
        if origin_str in self._allowed:
            await self.app(scope, receive, send)
            return

        logger.warning("Blocked by CORS: %s", origin_str)
        response = JSONResponse(status_code=403, content={"error": "Not allowed by CORS"})
        await response(scope, receive, send)
