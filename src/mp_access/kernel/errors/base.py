"""Root of the mp-access error hierarchy.

Every error serialises to the body the FastAPI adapter sends back::

    {"code": "forbidden", "message": "Access denied",
     "detail": {"roles": ["admin"], "permissions": []}}

``detail`` carries the facts a caller needs to react to the failure: the
offending argument or setting, the roles and permissions a policy asked for.
Subclasses pass them as keyword fields.  ``None`` fields are dropped and
tuples or sets become lists, so ``detail`` is always JSON-ready.
"""

from __future__ import annotations

from typing import Any


def _plain(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, tuple):
        return list(value)
    return value


class BaseError(Exception):
    """Base class for mp-access errors.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        cause: Original exception that triggered this error.  It is chained
            as ``__cause__`` but never serialised.
        **detail: Structured context, see the module docstring.
    """

    default_code: str = "error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
        **detail: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = {
            key: _plain(value) for key, value in detail.items() if value is not None
        }
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return the response body for this error."""
        return {"code": self.code, "message": self.message, "detail": dict(self.detail)}


__all__ = ["BaseError"]
