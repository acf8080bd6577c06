"""Request context middleware for logging."""

import time
import uuid
from contextvars import ContextVar
from typing import Any
from typing import Callable

from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from santa_api.monitoring.logger import log_request_info
from santa_api.monitoring.logger import log_response_info

# Context variables to store request-specific data
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
client_ip_ctx: ContextVar[str] = ContextVar("client_ip", default="")
request_path_ctx: ContextVar[str] = ContextVar("request_path", default="")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware to capture request context and log each request and response.

    Request and response bodies are never read or logged: wishes and
    addresses travel in them.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_ctx.set(request_id)

        client_ip = self._get_client_ip(request)
        client_ip_ctx.set(client_ip)

        request_path = f"{request.method} {request.url.path}"
        request_path_ctx.set(request_path)

        with logger.contextualize(
            request_id=request_id,
            client_ip=client_ip,
            request_path=request_path,
            user_agent=request.headers.get("User-Agent", "unknown"),
        ):
            log_request_info(request)
            start_time = time.time()
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000

            # set by the auth dependency once the bearer token is verified
            user_identity = getattr(request.state, "user_id", None) or "anonymous"

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code}",
                event_type="http_request",
                http_method=request.method,
                url_path=str(request.url.path),
                url_query=str(request.query_params) if request.query_params else None,
                user_identity=user_identity,
                status_code=response.status_code,
                response_time_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            log_response_info(response)
            return response

    def _get_client_ip(self, request: Request) -> str:
        """Real client IP, honouring X-Forwarded-For from a reverse proxy."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # X-Forwarded-For can contain multiple IPs, take the first one
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"


def get_request_context() -> dict:
    """
    Get current request context for logging.

    Returns:
        Dictionary with request context variables
    """
    return {
        "request_id": request_id_ctx.get(),
        "client_ip": client_ip_ctx.get(),
        "request_path": request_path_ctx.get(),
    }
