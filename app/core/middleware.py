# app/core/middleware.py
import time
import uuid
import logging

from typing import Iterable
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from app.core.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id, stamps security headers on the response
    and writes one access-log line per request.

    The line carries the acting user when an endpoint resolved one
    (request.state.user_id is set by the auth dependency).
    """

    def __init__(self, app, exclude_paths: Iterable[str] = ()):
        super().__init__(app)
        self.exclude_paths = frozenset(exclude_paths)

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers.update(SECURITY_HEADERS)

        if request.url.path not in self.exclude_paths:
            user_id = getattr(request.state, "user_id", None)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "request_id": request_id,
                    "user_id": str(user_id) if user_id else None,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return response


def cors_origins() -> list[str]:
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    if not origins:
        logger.warning("CORS_ORIGINS is empty, falling back to localhost")
        origins = ["http://localhost:3000"]
    return origins


def register_middlewares(app: FastAPI):
    """
    Registers all middlewares for the FastAPI application.
    Middlewares run in reverse order of registration.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(
        RequestContextMiddleware, exclude_paths=settings.LOGGING_EXCLUDE_PATHS
    )
