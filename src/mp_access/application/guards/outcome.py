"""Guards – Outcome returned to the dispatcher."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

FORBIDDEN_STATUS = 403


class OutcomeKind(str, Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    FALLBACK = "fallback"


@dataclasses.dataclass(frozen=True)
class Outcome:
    """Result of firing a guard.

    ``ALLOW`` means no override: the dispatcher handles the route as usual.
    ``FORBIDDEN`` asks for a plain 403 with no substitute content.
    ``FALLBACK`` carries the value supplied when the guard was compiled
    (a redirect response, a rendered page, ...).
    """

    kind: OutcomeKind
    value: Any = None

    @classmethod
    def allow(cls) -> Outcome:
        return _ALLOW

    @classmethod
    def forbidden(cls) -> Outcome:
        return _FORBIDDEN

    @classmethod
    def fallback(cls, value: Any) -> Outcome:
        return cls(OutcomeKind.FALLBACK, value)

    @property
    def is_allowed(self) -> bool:
        return self.kind is OutcomeKind.ALLOW

    @property
    def is_denied(self) -> bool:
        return not self.is_allowed

    @property
    def status_code(self) -> int | None:
        return FORBIDDEN_STATUS if self.kind is OutcomeKind.FORBIDDEN else None

    def __bool__(self) -> bool:
        return self.is_allowed


_ALLOW = Outcome(OutcomeKind.ALLOW)
_FORBIDDEN = Outcome(OutcomeKind.FORBIDDEN)


__all__ = ["FORBIDDEN_STATUS", "Outcome", "OutcomeKind"]
