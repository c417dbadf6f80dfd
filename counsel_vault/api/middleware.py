"""API middleware: correlation ID, caller identity, request log."""

import logging
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from counsel_vault.core.context import actor_id_ctx, correlation_id_ctx
from counsel_vault.security.identity import Caller, Role

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
ACTOR_HEADER = "X-Actor-ID"
ROLE_HEADER = "X-Actor-Role"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _parse_role(value: Optional[str]) -> Optional[Role]:
    if not value:
        return None
    try:
        return Role(value.strip().upper())
    except ValueError:
        return None


class CallerContextMiddleware(BaseHTTPMiddleware):
    """
    Resolve the caller from identity headers set by the authenticating gateway.
    Missing or unknown identity yields an anonymous caller; the access guard refuses it.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        actor_id = (request.headers.get(ACTOR_HEADER) or "").strip() or None
        role = _parse_role(request.headers.get(ROLE_HEADER))
        if actor_id is None or role is None:
            actor_id, role = None, None
        request.state.caller = Caller(
            actor_id=actor_id,
            role=role,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
        actor_id_ctx.set(actor_id)
        return await call_next(request)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """After response: one structured line per request. Bodies are never logged."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        logger.info(
            "request_completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
            },
        )
        return response
