"""
OrderResolver — pick the N-th candidate satisfying the predicate.

Used where several members share the same observable shape and only their
declaration or write order tells them apart, e.g. three boolean fields
assigned one after another in a constructor.

Grouped order
─────────────
When the key carries a group_size, the filtered sequence is a series of
runs of that length and ``index`` is absolute (run * group_size + offset).
A sequence whose length is not a whole number of runs means the predicate
no longer describes the artifact; that is reported as GROUP_MISMATCH rather
than selecting from a misaligned sequence.
"""

from __future__ import annotations

from typing import Union

from hookmap.exceptions import ConfigurationError
from hookmap.mapper import MapperKind, MapperSpec
from hookmap.model import Entity

from .base import AbstractResolver
from .models import Failure

__all__ = ["OrderResolver"]


class OrderResolver(AbstractResolver):
    """Resolver for positional (order-based) mappers."""

    @property
    def strategy(self) -> MapperKind:
        return MapperKind.ORDER

    def select(
        self,
        spec: MapperSpec,
        matches: list[Entity],
    ) -> Union[Entity, Failure]:
        key = spec.order_key
        if key is None:
            raise ConfigurationError(f"Order mapper '{spec.name}' has no order key")

        length = len(matches)
        scope = spec.scope.describe()
        predicate = spec.predicate.description

        if key.group_size and length % key.group_size:
            return Failure.group_mismatch(
                spec.name, scope, predicate, length, key.index, key.group_size,
            )
        if not 0 <= key.index < length:
            return Failure.out_of_range(
                spec.name, scope, predicate, length, key.index, key.group_size,
            )
        return matches[key.index]
