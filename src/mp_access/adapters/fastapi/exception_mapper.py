"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from mp_access.adapters.fastapi.middleware import _require_fastapi


class FastAPIExceptionMapper:
    """Register mp_access error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "forbidden", "message": "...", "detail": {...}}

    Mappings
    --------
    ``ValidationError`` (incl. ``InvalidArgumentError``) → 400
    ``UnauthorizedError``                                → 401
    ``ForbiddenError``                                   → 403
    ``DomainError``                                      → 422
    """

    def __init__(self) -> None:
        _require_fastapi()
        from mp_access.kernel.errors import (
            DomainError,
            ForbiddenError,
            UnauthorizedError,
            ValidationError,
        )

        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (UnauthorizedError, 401),
            (ForbiddenError, 403),
            (DomainError, 422),
        ]

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        from fastapi.responses import JSONResponse

        from mp_access.kernel.errors.base import BaseError

        def make_handler(code: int) -> Callable[[Any, Any], Any]:
            def handler(request: Any, exc: Any) -> Any:  # noqa: ARG001
                if isinstance(exc, BaseError):
                    body = exc.to_dict()
                else:
                    body = {"code": "error", "message": str(exc)}
                return JSONResponse(status_code=code, content=body)

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["FastAPIExceptionMapper"]
