"""
Data models for mapper specifications.

Key concepts
────────────
MapperKind  — which resolution strategy a mapper uses (Identity / Order)
Scope       — the candidate pool a predicate is evaluated against
Target      — what the selected candidate is bound as in the mapping table
OrderKey    — (index, group_size) for Order mappers
MapperSpec  — one declarative mapper: name + predicate + strategy + scope
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from hookmap.exceptions import ConfigurationError
from hookmap.predicates import Predicate

__all__ = [
    "MapperKind",
    "ScopeKind",
    "Target",
    "Scope",
    "OrderKey",
    "MapperSpec",
]


class MapperKind(str, Enum):
    """
    Resolution strategy of a mapper.

    IDENTITY
        The predicate must match exactly one candidate in scope.
        Used when the element is structurally unique among its siblings.

    ORDER
        Select the index-th candidate of the predicate-filtered,
        deterministically ordered scope sequence.  Used when several
        candidates are structurally identical and only their position
        (e.g. write order in a constructor) tells them apart.
    """
    IDENTITY = "identity"
    ORDER    = "order"


class ScopeKind(str, Enum):
    ALL_CLASSES              = "all_classes"
    INSTANCE_FIELDS          = "instance_fields"
    STATIC_FIELDS            = "static_fields"
    INSTANCE_METHODS         = "instance_methods"
    STATIC_METHODS           = "static_methods"
    CONSTRUCTOR_INSTRUCTIONS = "constructor_instructions"
    METHOD_INSTRUCTIONS      = "method_instructions"


class Target(str, Enum):
    """
    What a resolved candidate is published as.

    For instruction scopes the instruction itself is rarely interesting:
    FIELD binds the field the instruction reads/writes, METHOD binds the
    method it invokes.
    """
    CLASS       = "class"
    FIELD       = "field"
    METHOD      = "method"
    INSTRUCTION = "instruction"


_CLASS_SCOPED = {
    ScopeKind.INSTANCE_FIELDS,
    ScopeKind.STATIC_FIELDS,
    ScopeKind.INSTANCE_METHODS,
    ScopeKind.STATIC_METHODS,
    ScopeKind.CONSTRUCTOR_INSTRUCTIONS,
}

_DEFAULT_TARGET = {
    ScopeKind.ALL_CLASSES:              Target.CLASS,
    ScopeKind.INSTANCE_FIELDS:          Target.FIELD,
    ScopeKind.STATIC_FIELDS:            Target.FIELD,
    ScopeKind.INSTANCE_METHODS:         Target.METHOD,
    ScopeKind.STATIC_METHODS:           Target.METHOD,
    ScopeKind.CONSTRUCTOR_INSTRUCTIONS: Target.FIELD,
    ScopeKind.METHOD_INSTRUCTIONS:      Target.FIELD,
}

# Targets a scope kind can legally bind
_ALLOWED_TARGETS = {
    ScopeKind.ALL_CLASSES:              {Target.CLASS},
    ScopeKind.INSTANCE_FIELDS:          {Target.FIELD},
    ScopeKind.STATIC_FIELDS:            {Target.FIELD},
    ScopeKind.INSTANCE_METHODS:         {Target.METHOD},
    ScopeKind.STATIC_METHODS:           {Target.METHOD},
    ScopeKind.CONSTRUCTOR_INSTRUCTIONS: {Target.FIELD, Target.METHOD, Target.INSTRUCTION},
    ScopeKind.METHOD_INSTRUCTIONS:      {Target.FIELD, Target.METHOD, Target.INSTRUCTION},
}


@dataclass(frozen=True)
class Scope:
    """
    Candidate pool selector.

    owner — for class-scoped kinds, the name of the CLASS mapper whose
            resolved class is searched; for METHOD_INSTRUCTIONS, the name
            of the METHOD mapper whose body is searched; unused for
            ALL_CLASSES.
    """
    kind:  ScopeKind
    owner: str = ""

    def __post_init__(self) -> None:
        if self.kind == ScopeKind.ALL_CLASSES:
            if self.owner:
                raise ConfigurationError("ALL_CLASSES scope takes no owner")
        elif not self.owner:
            raise ConfigurationError(f"{self.kind.value} scope needs an owner mapper")

    @property
    def requires(self) -> tuple[str, ...]:
        return (self.owner,) if self.owner else ()

    @property
    def owner_target(self) -> Optional[Target]:
        """Target the owner mapper must bind, or None without an owner."""
        if self.kind in _CLASS_SCOPED:
            return Target.CLASS
        if self.kind == ScopeKind.METHOD_INSTRUCTIONS:
            return Target.METHOD
        return None

    def describe(self) -> str:
        if self.kind == ScopeKind.ALL_CLASSES:
            return "all classes"
        if self.kind == ScopeKind.METHOD_INSTRUCTIONS:
            return f"instructions of method <{self.owner}>"
        if self.kind == ScopeKind.CONSTRUCTOR_INSTRUCTIONS:
            return f"constructor instructions of <{self.owner}>"
        noun = self.kind.value.replace("_", " ")
        return f"{noun} of <{self.owner}>"

    # ── Constructors ──────────────────────────────────────────────────────

    @classmethod
    def all_classes(cls) -> "Scope":
        return cls(ScopeKind.ALL_CLASSES)

    @classmethod
    def instance_fields(cls, owner: str) -> "Scope":
        return cls(ScopeKind.INSTANCE_FIELDS, owner)

    @classmethod
    def static_fields(cls, owner: str) -> "Scope":
        return cls(ScopeKind.STATIC_FIELDS, owner)

    @classmethod
    def instance_methods(cls, owner: str) -> "Scope":
        return cls(ScopeKind.INSTANCE_METHODS, owner)

    @classmethod
    def static_methods(cls, owner: str) -> "Scope":
        return cls(ScopeKind.STATIC_METHODS, owner)

    @classmethod
    def in_constructor(cls, owner: str) -> "Scope":
        return cls(ScopeKind.CONSTRUCTOR_INSTRUCTIONS, owner)

    @classmethod
    def in_method(cls, method: str) -> "Scope":
        return cls(ScopeKind.METHOD_INSTRUCTIONS, method)


@dataclass(frozen=True)
class OrderKey:
    """
    Position of an Order mapper's candidate.

    ``index`` is ALWAYS the absolute position in the filtered sequence.
    With ``group_size`` the sequence is additionally required to split
    into whole runs of that size, and ``index = run * group_size + offset``.
    Mappers that share a run share group_size and differ only in offset::

        OrderKey.in_group(run=0, offset=0, group_size=2)   # index 0
        OrderKey.in_group(run=0, offset=1, group_size=2)   # index 1
        OrderKey.in_group(run=1, offset=0, group_size=2)   # index 2
    """
    index:      int
    group_size: Optional[int] = None

    def __post_init__(self) -> None:
        if self.group_size is not None and self.group_size < 1:
            raise ConfigurationError(f"group_size must be >= 1, got {self.group_size}")

    @classmethod
    def in_group(cls, run: int, offset: int, group_size: int) -> "OrderKey":
        if not 0 <= offset < group_size:
            raise ConfigurationError(
                f"offset {offset} outside group of size {group_size}"
            )
        return cls(index=run * group_size + offset, group_size=group_size)

    @property
    def run(self) -> int:
        return self.index // self.group_size if self.group_size else 0

    @property
    def offset(self) -> int:
        return self.index % self.group_size if self.group_size else self.index

    def describe(self) -> str:
        if self.group_size is None:
            return f"index {self.index}"
        return (
            f"index {self.index} (run {self.run}, offset {self.offset}, "
            f"group size {self.group_size})"
        )


@dataclass(frozen=True)
class MapperSpec:
    """
    One declarative mapper.

    name          — semantic name, e.g. "ItemDefinition" or "ItemDefinition.name"
    kind          — IDENTITY or ORDER
    predicate     — structural test applied to every candidate in scope
    scope         — candidate pool
    dependencies  — mappers that must be terminal first; the scope owner is
                    always folded in
    order_key     — required for ORDER, forbidden for IDENTITY
    target        — what the selected candidate is bound as (defaults per scope)
    parameters    — parameter names for method mappers, exported with hooks
    """
    name:         str
    kind:         MapperKind
    predicate:    Predicate
    scope:        Scope
    dependencies: frozenset[str] = field(default_factory=frozenset)
    order_key:    Optional[OrderKey] = None
    target:       Optional[Target] = None
    parameters:   Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Mapper name must not be empty")
        if self.kind == MapperKind.ORDER and self.order_key is None:
            raise ConfigurationError(f"{self.name}: ORDER mapper needs an order_key")
        if self.kind == MapperKind.IDENTITY and self.order_key is not None:
            raise ConfigurationError(f"{self.name}: IDENTITY mapper takes no order_key")

        target = self.target or _DEFAULT_TARGET[self.scope.kind]
        if target not in _ALLOWED_TARGETS[self.scope.kind]:
            raise ConfigurationError(
                f"{self.name}: target {target.value} impossible for "
                f"{self.scope.kind.value} scope"
            )
        if self.parameters is not None and target != Target.METHOD:
            raise ConfigurationError(f"{self.name}: parameters only apply to methods")

        object.__setattr__(self, "target", target)
        object.__setattr__(
            self, "dependencies",
            frozenset(_as_names(self.dependencies)) | frozenset(self.scope.requires),
        )
        if self.parameters is not None:
            object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def owner_class(self) -> Optional[str]:
        """Class mapper this member belongs to, for class-scoped mappers."""
        return self.scope.owner if self.scope.kind in _CLASS_SCOPED else None

    def describe(self) -> str:
        order = f" {self.order_key.describe()}" if self.order_key else ""
        return (
            f"{self.name} [{self.kind.value}{order}] in {self.scope.describe()}: "
            f"{self.predicate.description}"
        )

    def __str__(self) -> str:
        return f"MapperSpec({self.name} via {self.kind.value})"


def _as_names(names: Iterable[str]) -> Iterable[str]:
    if isinstance(names, str):
        # a bare string is a single name, not a sequence of characters
        return (names,)
    return names
