"""Testing fixtures – pytest fixtures for subjects, context and dispatchers."""
try:
    import pytest  # noqa: F401

    from mp_access.testing.fixtures.principal import fake_principal, security_context
    from mp_access.testing.fixtures.dispatcher import guard_compiler, in_memory_dispatcher

except ImportError:
    pass

__all__ = [
    "fake_principal",
    "guard_compiler",
    "in_memory_dispatcher",
    "security_context",
]
