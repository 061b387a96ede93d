"""Authorization – role/permission predicates, ``ability`` and the AccessControl facade."""
from mp_access.application.authorization.ability import (
    AbilityDetail,
    AbilityResult,
    EvaluationOptions,
    ResultShape,
    ability,
)
from mp_access.application.authorization.access import AccessControl, requires
from mp_access.application.authorization.predicates import can, has_role

__all__ = [
    "AbilityDetail",
    "AbilityResult",
    "AccessControl",
    "EvaluationOptions",
    "ResultShape",
    "ability",
    "can",
    "has_role",
    "requires",
]
