"""Shared fixtures for the mp_access test-suite."""
from __future__ import annotations

import pytest

from mp_access.kernel.security import SecurityContext
from mp_access.testing.fixtures import (  # noqa: F401
    fake_principal,
    guard_compiler,
    in_memory_dispatcher,
    security_context,
)


@pytest.fixture(autouse=True)
def _anonymous_by_default():
    """Every test starts and ends without a subject in context."""
    SecurityContext.clear()
    yield
    SecurityContext.clear()
