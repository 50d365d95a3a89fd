"""
Predicate core — composable boolean tests over one entity.

A Predicate wraps ``test(entity, table) -> bool`` plus a human-readable
description used in failure diagnostics.  ``table`` is the run's
MappingTable; leaves that compare against another mapper's result call
``table.resolve(name)``.  The scheduler guarantees that every mapper named
there has already resolved before the predicate is evaluated.

Composition is logical AND only::

    predicate_of("super is DualNode", lambda c: ...)
        .and_("4 short[] fields", lambda c: ...)

    extends(mapped_type("DualNode")) & instance_field_count(SHORT_ARRAY, 4)

Sub-predicates run in declaration order and stop at the first False.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from hookmap.exceptions import ConfigurationError
from hookmap.model import ClassEntity
from hookmap.model import descriptors as d

if TYPE_CHECKING:
    from hookmap.table.mapping import MappingTable

__all__ = [
    "Predicate",
    "Conjunction",
    "MappedType",
    "TypeRef",
    "predicate_of",
    "all_of",
    "mapped_type",
    "resolve_type",
    "describe_type",
]

TestFn = Callable[[Any, "MappingTable"], bool]


class Predicate:
    """A single named test.  Instances are immutable and stateless."""

    __slots__ = ("_test", "_description")

    def __init__(self, description: str, test: TestFn) -> None:
        self._description = description
        self._test = test

    @property
    def description(self) -> str:
        return self._description

    @property
    def leaves(self) -> tuple["Predicate", ...]:
        return (self,)

    def __call__(self, entity: Any, table: "MappingTable") -> bool:
        return bool(self._test(entity, table))

    # ── Composition ───────────────────────────────────────────────────────

    def __and__(self, other: "Predicate") -> "Conjunction":
        if not isinstance(other, Predicate):
            return NotImplemented
        return Conjunction(self.leaves + other.leaves)

    def and_(self, description: str, fn: Callable[[Any], bool]) -> "Conjunction":
        """Append a table-independent leaf, mirroring ``predicate_of``."""
        return self & predicate_of(description, fn)

    def __repr__(self) -> str:
        return f"Predicate({self._description!r})"

    def __str__(self) -> str:
        return self._description


class Conjunction(Predicate):
    """Ordered, short-circuiting AND over leaf predicates."""

    __slots__ = ("_leaves",)

    def __init__(self, leaves: tuple[Predicate, ...]) -> None:
        if not leaves:
            raise ValueError("Conjunction needs at least one predicate")
        self._leaves = tuple(leaves)
        super().__init__(
            " and ".join(p.description for p in self._leaves),
            self._evaluate,
        )

    @property
    def leaves(self) -> tuple[Predicate, ...]:
        return self._leaves

    def _evaluate(self, entity: Any, table: "MappingTable") -> bool:
        for leaf in self._leaves:
            if not leaf(entity, table):
                return False
        return True

    def __repr__(self) -> str:
        return f"Conjunction({len(self._leaves)} leaves: {self.description!r})"


def predicate_of(description: str, fn: Callable[[Any], bool]) -> Predicate:
    """Leaf predicate over the entity alone (no mapping-table access)."""
    return Predicate(description, lambda entity, _table: fn(entity))


def all_of(*predicates: Predicate) -> Predicate:
    if len(predicates) == 1:
        return predicates[0]
    leaves: tuple[Predicate, ...] = ()
    for p in predicates:
        leaves += p.leaves
    return Conjunction(leaves)


# ── Type references ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MappedType:
    """
    Descriptor of the class another mapper resolved to, e.g. the
    obfuscated class bound to "Buffer".  ``dims`` adds array dimensions.
    """
    mapper: str
    dims:   int = 0

    def array(self, dims: int = 1) -> "MappedType":
        return MappedType(self.mapper, self.dims + dims)

    def __str__(self) -> str:
        return self.mapper + "[]" * self.dims


TypeRef = Union[str, MappedType]


def mapped_type(mapper: str, dims: int = 0) -> MappedType:
    return MappedType(mapper, dims)


def resolve_type(ref: TypeRef, table: "MappingTable") -> str:
    """Turn a TypeRef into a concrete descriptor using the mapping table."""
    if isinstance(ref, MappedType):
        cls = table.resolve(ref.mapper)
        if not isinstance(cls, ClassEntity):
            raise ConfigurationError(
                f"Type reference <{ref.mapper}> must name a class mapper, "
                f"got {type(cls).__name__}"
            )
        return d.array_of(d.object_type(cls.name), ref.dims)
    return ref


def describe_type(ref: TypeRef) -> str:
    return f"<{ref}>" if isinstance(ref, MappedType) else ref
