"""Request logging middleware with request-id propagation."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("dictation_api.middleware.structured")

REQUEST_ID_HEADER = "X-Request-ID"

COLOR_RESET = "\u001b[0m"
_STATUS_COLORS = (
    (500, "\u001b[31m"),
    (400, "\u001b[33m"),
    (200, "\u001b[32m"),
)
_DEFAULT_COLOR = "\u001b[36m"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and echo its id back to the client."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(self._describe(request, request_id, 500, start_time))
            raise

        # The auth dependency populates request.state only while the endpoint runs.
        logger.info(self._describe(request, request_id, response.status_code, start_time))
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @classmethod
    def _describe(
        cls,
        request: Request,
        request_id: str,
        status_code: int,
        start_time: float,
    ) -> str:
        fields: list[tuple[str, Any]] = [
            ("request_id", request_id),
            ("method", request.method),
            ("path", request.url.path),
            ("status", status_code),
            ("duration_ms", round((time.perf_counter() - start_time) * 1000, 2)),
            ("client_ip", request.client.host if request.client else None),
            ("user_id", cls._user_id(request)),
        ]
        message = ", ".join(
            f"{name}={value if value is not None else '-'}" for name, value in fields
        )
        color = next(
            (code for floor, code in _STATUS_COLORS if status_code >= floor),
            _DEFAULT_COLOR,
        )
        return f"{color}{message}{COLOR_RESET}"

    @staticmethod
    def _user_id(request: Request) -> Any:
        user = getattr(request.state, "user", None)
        if isinstance(user, dict):
            return user.get("id")
        return getattr(user, "id", None)
