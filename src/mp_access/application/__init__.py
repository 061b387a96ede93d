"""Application – policy evaluation and route guards (framework-agnostic)."""

from mp_access.application.authorization import (
    AbilityDetail,
    AccessControl,
    EvaluationOptions,
    ResultShape,
    ability,
    can,
    has_role,
    requires,
)
from mp_access.application.guards import (
    Dispatcher,
    Guard,
    GuardCompiler,
    GuardKind,
    GuardState,
    InMemoryDispatcher,
    Outcome,
    OutcomeKind,
    guard_name,
)

__all__ = [
    "AbilityDetail",
    "AccessControl",
    "Dispatcher",
    "EvaluationOptions",
    "Guard",
    "GuardCompiler",
    "GuardKind",
    "GuardState",
    "InMemoryDispatcher",
    "Outcome",
    "OutcomeKind",
    "ResultShape",
    "ability",
    "can",
    "guard_name",
    "has_role",
    "requires",
]
