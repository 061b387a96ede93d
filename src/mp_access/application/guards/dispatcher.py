"""Guards – Dispatcher port and an in-process implementation."""
from __future__ import annotations

import functools
import re
import threading
from typing import Callable, Protocol

from mp_access.application.guards.outcome import Outcome
from mp_access.observability.logging import get_logger

logger = get_logger(__name__)

DecisionFn = Callable[[], Outcome]


class Dispatcher(Protocol):
    """Port: the routing layer guards are registered with."""

    def register_guard(self, name: str, decision_fn: DecisionFn) -> None: ...

    def bind_guard_to_pattern(self, pattern: str, name: str) -> None: ...


def _strip(path: str) -> str:
    return path.lstrip("/")


@functools.lru_cache(maxsize=512)
def _pattern_regex(pattern: str) -> re.Pattern[str]:
    # only "*" is special; "?" and "[...]" are literal route characters
    parts = (re.escape(part) for part in _strip(pattern).split("*"))
    return re.compile(".*".join(parts), re.DOTALL)


class InMemoryDispatcher:
    """Thread-safe guard table with glob route patterns.

    * Registering a name twice replaces the previous decision function.
    * Binding the same ``(pattern, name)`` twice is a no-op.
    * ``*`` in a pattern matches any run of characters, ``/`` included;
      leading slashes are ignored on both sides (``"admin/*"`` matches
      ``"/admin/users/3"``).
    * ``?`` and ``[...]`` have no special meaning.
    """

    def __init__(self) -> None:
        self._guards: dict[str, DecisionFn] = {}
        self._bindings: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def register_guard(self, name: str, decision_fn: DecisionFn) -> None:
        with self._lock:
            replaced = name in self._guards
            self._guards[name] = decision_fn
        logger.debug("dispatcher.guard_registered", guard=name, replaced=replaced)

    def bind_guard_to_pattern(self, pattern: str, name: str) -> None:
        with self._lock:
            if (pattern, name) in self._bindings:
                return
            self._bindings.append((pattern, name))
        logger.debug("dispatcher.guard_bound", guard=name, pattern=pattern)

    @property
    def names(self) -> list[str]:
        with self._lock:
            return list(self._guards)

    @property
    def bindings(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._bindings)

    def get(self, name: str) -> DecisionFn | None:
        with self._lock:
            return self._guards.get(name)

    @staticmethod
    def matches(pattern: str, path: str) -> bool:
        return _pattern_regex(pattern).fullmatch(_strip(path)) is not None

    def guards_for(self, path: str) -> list[tuple[str, DecisionFn]]:
        """Return ``(name, decision_fn)`` for every guard bound to *path*, in binding order."""
        with self._lock:
            bindings = list(self._bindings)
            guards = dict(self._guards)

        matched: list[tuple[str, DecisionFn]] = []
        for pattern, name in bindings:
            if not self.matches(pattern, path):
                continue
            fn = guards.get(name)
            if fn is None:
                logger.warning("dispatcher.unregistered_guard", guard=name, pattern=pattern)
                continue
            matched.append((name, fn))
        return matched

    def dispatch(self, path: str) -> Outcome:
        """Fire the guards bound to *path*; the first denial wins."""
        for name, fn in self.guards_for(path):
            outcome = fn()
            if outcome.is_denied:
                logger.info("dispatcher.denied", guard=name, path=path, outcome=outcome.kind.value)
                return outcome
        return Outcome.allow()

    def clear(self) -> None:
        with self._lock:
            self._guards.clear()
            self._bindings.clear()


__all__ = ["DecisionFn", "Dispatcher", "InMemoryDispatcher"]
