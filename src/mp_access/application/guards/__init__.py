"""Guards – compile role/permission policies into dispatcher-registered guards."""
from mp_access.application.guards.compiler import GuardCompiler
from mp_access.application.guards.dispatcher import DecisionFn, Dispatcher, InMemoryDispatcher
from mp_access.application.guards.guard import Guard, GuardKind, GuardState, denies, guard_name
from mp_access.application.guards.outcome import FORBIDDEN_STATUS, Outcome, OutcomeKind

__all__ = [
    "DecisionFn",
    "Dispatcher",
    "FORBIDDEN_STATUS",
    "Guard",
    "GuardCompiler",
    "GuardKind",
    "GuardState",
    "InMemoryDispatcher",
    "Outcome",
    "OutcomeKind",
    "denies",
    "guard_name",
]
