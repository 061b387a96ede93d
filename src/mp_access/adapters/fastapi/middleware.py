"""FastAPI adapter – ASGI middleware implementations.

FastAPISubjectMiddleware  resolves the subject and stores it in SecurityContext
FastAPIGuardMiddleware    fires the dispatcher's guards before the route runs

Starlette runs the most recently added middleware first, so add the guard
middleware *before* the subject middleware::

    app.add_middleware(FastAPIGuardMiddleware, dispatcher=dispatcher)
    app.add_middleware(FastAPISubjectMiddleware, resolver=verify_token)
"""
from __future__ import annotations

import inspect
import json
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from mp_access.application.guards.dispatcher import InMemoryDispatcher
from mp_access.application.guards.outcome import FORBIDDEN_STATUS, Outcome, OutcomeKind
from mp_access.kernel.security.security_context import SecurityContext
from mp_access.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

logger = get_logger(__name__)


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'mp-access[fastapi]' to use the FastAPI adapter"
        ) from exc


async def _send_json(send: "Send", status: int, payload: Any) -> None:
    body = json.dumps(payload, default=str).encode()
    await send({"type": "http.response.start", "status": status, "headers": [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
    ]})
    await send({"type": "http.response.body", "body": body})


# ---------------------------------------------------------------------------
# Subject middleware
# ---------------------------------------------------------------------------

class FastAPISubjectMiddleware:
    """Extract a Bearer token, resolve it, and populate :class:`SecurityContext`.

    Parameters
    ----------
    app:
        The inner ASGI application.
    resolver:
        Any callable ``async (token: str) -> Subject | None``.
    require_auth:
        When ``True`` requests without a resolvable subject receive 401.
        When ``False`` (default) the request proceeds anonymously and guards
        treat it as holding no roles or permissions.
    """

    def __init__(
        self,
        app: "ASGIApp",
        resolver: Callable[[str], Awaitable[Any]],
        require_auth: bool = False,
    ) -> None:
        _require_fastapi()
        self.app = app
        self._resolver = resolver
        self._require_auth = require_auth

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        auth_value = headers.get(b"authorization", b"").decode().strip()

        subject = None
        if auth_value.lower().startswith("bearer "):
            token = auth_value[7:].strip()
            if token:
                subject = await self._resolver(token)

        if subject is None and self._require_auth:
            await _send_json(
                send, 401, {"code": "unauthorized", "message": "Missing or invalid credentials"}
            )
            return

        context_token = SecurityContext.set_current(subject)
        try:
            await self.app(scope, receive, send)
        finally:
            SecurityContext.reset(context_token)


# ---------------------------------------------------------------------------
# Guard middleware
# ---------------------------------------------------------------------------

class FastAPIGuardMiddleware:
    """Fire the guards bound to the request path before routing.

    * ``ALLOW`` – the request continues to the route.
    * ``FORBIDDEN`` – ``403`` with ``{"code": "forbidden", "message": "Access denied"}``.
    * ``FALLBACK`` – a Starlette ``Response`` or any other ASGI callable is
      served in place of the route; any other value is rendered as the JSON
      body of a ``403`` (values JSON cannot encode are rendered with ``str``).
    """

    def __init__(self, app: "ASGIApp", dispatcher: InMemoryDispatcher) -> None:
        _require_fastapi()
        self.app = app
        self._dispatcher = dispatcher

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        outcome = self._dispatcher.dispatch(scope.get("path", ""))
        if outcome.is_allowed:
            await self.app(scope, receive, send)
            return
        await self._render(outcome, scope, receive, send)

    async def _render(
        self, outcome: Outcome, scope: "Scope", receive: "Receive", send: "Send"
    ) -> None:
        if outcome.kind is OutcomeKind.FALLBACK:
            value = outcome.value
            if callable(value) and not (inspect.isroutine(value) or isinstance(value, type)):
                await value(scope, receive, send)
                return
            await _send_json(send, FORBIDDEN_STATUS, value)
            return
        await _send_json(send, FORBIDDEN_STATUS, {"code": "forbidden", "message": "Access denied"})


__all__ = ["FastAPIGuardMiddleware", "FastAPISubjectMiddleware"]
