"""
mp_access – Role and permission checks, policy evaluation and route guards.

Import path convention::

    from mp_access.kernel.security import Principal, SecurityContext
    from mp_access.application.authorization import AccessControl, ability
    from mp_access.application.guards import GuardCompiler, InMemoryDispatcher
    from mp_access.adapters.fastapi import FastAPIGuardMiddleware
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
