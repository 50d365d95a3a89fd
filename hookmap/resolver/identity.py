"""
IdentityResolver — exactly one candidate in scope may satisfy the predicate.

Zero matches and several matches are both failures; the ambiguous case
lists every matching candidate so the predicate can be tightened.
"""

from __future__ import annotations

from typing import Union

from hookmap.mapper import MapperKind, MapperSpec
from hookmap.model import Entity

from .base import AbstractResolver
from .models import Failure, describe_entity

__all__ = ["IdentityResolver"]


class IdentityResolver(AbstractResolver):
    """Resolver for mappers whose predicate uniquely identifies the target."""

    @property
    def strategy(self) -> MapperKind:
        return MapperKind.IDENTITY

    def select(
        self,
        spec: MapperSpec,
        matches: list[Entity],
    ) -> Union[Entity, Failure]:
        if len(matches) == 1:
            return matches[0]
        scope = spec.scope.describe()
        predicate = spec.predicate.description
        if not matches:
            return Failure.no_match(spec.name, scope, predicate)
        return Failure.ambiguous(
            spec.name, scope, predicate, [describe_entity(m) for m in matches],
        )
