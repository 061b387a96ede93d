"""FastAPI adapter – guard middleware, subject middleware, exception mapper."""
from mp_access.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from mp_access.adapters.fastapi.middleware import (
    FastAPIGuardMiddleware,
    FastAPISubjectMiddleware,
)

__all__ = [
    "FastAPIExceptionMapper",
    "FastAPIGuardMiddleware",
    "FastAPISubjectMiddleware",
]
