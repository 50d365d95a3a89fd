"""
Resolution strategies — turn one mapper spec into one Outcome.

Each resolver enumerates the spec's scope against the entity model, filters
by the spec's predicate and selects (identity or order) the target entity.
"""

from .base import AbstractResolver
from .factory import get_resolver
from .identity import IdentityResolver
from .models import (
    Failure,
    FailureKind,
    MapperStatus,
    Outcome,
    describe_entity,
    entity_ref,
)
from .order import OrderResolver
from .scope import scope_candidates

__all__ = [
    "AbstractResolver",
    "get_resolver",
    "IdentityResolver",
    "OrderResolver",
    "Failure",
    "FailureKind",
    "MapperStatus",
    "Outcome",
    "describe_entity",
    "entity_ref",
    "scope_candidates",
]
