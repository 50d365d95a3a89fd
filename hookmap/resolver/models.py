"""
Data models for the resolver module.

Key concepts
────────────
MapperStatus  — terminal state of one mapper after the pass
FailureKind   — why a mapper did not resolve
Failure       — typed failure with the diagnostic detail a human needs
Outcome       — one mapping table entry: resolved entity OR failure
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hookmap.model import (
    ClassEntity,
    Entity,
    FieldEntity,
    InstructionEntity,
    MethodEntity,
)

__all__ = [
    "MapperStatus",
    "FailureKind",
    "Failure",
    "Outcome",
    "entity_ref",
    "describe_entity",
]

# Ambiguity diagnostics list at most this many candidates in the message
_MAX_LISTED_CANDIDATES = 10


class MapperStatus(str, Enum):
    RESOLVED = "resolved"
    FAILED   = "failed"
    SKIPPED  = "skipped"


class FailureKind(str, Enum):
    """
    NO_MATCH               Identity predicate matched nothing in scope.
    AMBIGUOUS_MATCH        Identity predicate matched more than one candidate.
    ORDER_OUT_OF_RANGE     Order index outside the filtered sequence.
    GROUP_MISMATCH         Filtered sequence does not split into whole
                           groups of group_size (configuration error).
    UNBOUND_TARGET         The selected instruction references a field or
                           method the entity model does not contain.
    UNRESOLVED_DEPENDENCY  A prerequisite mapper failed or was skipped;
                           the predicate was never evaluated.
    """
    NO_MATCH              = "no_match"
    AMBIGUOUS_MATCH       = "ambiguous_match"
    ORDER_OUT_OF_RANGE    = "order_out_of_range"
    GROUP_MISMATCH        = "group_mismatch"
    UNBOUND_TARGET        = "unbound_target"
    UNRESOLVED_DEPENDENCY = "unresolved_dependency"


@dataclass(frozen=True)
class Failure:
    """
    Why one mapper did not resolve.

    Only the slots relevant to ``kind`` are populated; ``detail`` is always
    a complete human-readable sentence.
    """
    kind:            FailureKind
    detail:          str
    scope:           str = ""
    predicate:       str = ""
    match_count:     Optional[int] = None
    candidates:      tuple[str, ...] = ()
    sequence_length: Optional[int] = None
    index:           Optional[int] = None
    group_size:      Optional[int] = None
    dependencies:    tuple[str, ...] = ()

    # ── Constructors ──────────────────────────────────────────────────────

    @classmethod
    def no_match(cls, name: str, scope: str, predicate: str) -> "Failure":
        return cls(
            kind=FailureKind.NO_MATCH,
            detail=f"{name}: nothing in {scope} satisfies: {predicate}",
            scope=scope,
            predicate=predicate,
            match_count=0,
        )

    @classmethod
    def ambiguous(cls, name: str, scope: str, predicate: str,
                  candidates: list[str]) -> "Failure":
        shown = ", ".join(candidates[:_MAX_LISTED_CANDIDATES])
        more = len(candidates) - _MAX_LISTED_CANDIDATES
        if more > 0:
            shown += f", … (+{more})"
        return cls(
            kind=FailureKind.AMBIGUOUS_MATCH,
            detail=f"{name}: {len(candidates)} candidates in {scope} match: {shown}",
            scope=scope,
            predicate=predicate,
            match_count=len(candidates),
            candidates=tuple(candidates),
        )

    @classmethod
    def out_of_range(cls, name: str, scope: str, predicate: str, length: int,
                     index: int, group_size: Optional[int]) -> "Failure":
        group = f", group size {group_size}" if group_size else ""
        return cls(
            kind=FailureKind.ORDER_OUT_OF_RANGE,
            detail=(
                f"{name}: index {index} out of range for {length} matching "
                f"candidates in {scope}{group}"
            ),
            scope=scope,
            predicate=predicate,
            match_count=length,
            sequence_length=length,
            index=index,
            group_size=group_size,
        )

    @classmethod
    def group_mismatch(cls, name: str, scope: str, predicate: str, length: int,
                       index: int, group_size: int) -> "Failure":
        return cls(
            kind=FailureKind.GROUP_MISMATCH,
            detail=(
                f"{name}: {length} matching candidates in {scope} do not split "
                f"into groups of {group_size} (remainder {length % group_size}); "
                f"requested index {index}"
            ),
            scope=scope,
            predicate=predicate,
            match_count=length,
            sequence_length=length,
            index=index,
            group_size=group_size,
        )

    @classmethod
    def unbound(cls, name: str, selected: str, target: str) -> "Failure":
        return cls(
            kind=FailureKind.UNBOUND_TARGET,
            detail=f"{name}: selected {selected} references no {target} in the model",
            candidates=(selected,),
        )

    @classmethod
    def unresolved_dependency(cls, name: str, dependencies: list[str]) -> "Failure":
        return cls(
            kind=FailureKind.UNRESOLVED_DEPENDENCY,
            detail=f"{name}: skipped, unresolved dependencies: {', '.join(dependencies)}",
            dependencies=tuple(dependencies),
        )

    def to_dict(self) -> dict:
        d: dict = {"kind": self.kind.value, "detail": self.detail}
        for key in ("scope", "predicate"):
            if getattr(self, key):
                d[key] = getattr(self, key)
        for key in ("match_count", "sequence_length", "index", "group_size"):
            if getattr(self, key) is not None:
                d[key] = getattr(self, key)
        if self.candidates:
            d["candidates"] = list(self.candidates)
        if self.dependencies:
            d["dependencies"] = list(self.dependencies)
        return d

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"


@dataclass(frozen=True)
class Outcome:
    """One mapping table entry.  Exactly one of entity / failure is set."""
    name:    str
    status:  MapperStatus
    entity:  Optional[Entity] = None
    failure: Optional[Failure] = None

    @classmethod
    def resolved(cls, name: str, entity: Entity) -> "Outcome":
        return cls(name=name, status=MapperStatus.RESOLVED, entity=entity)

    @classmethod
    def failed(cls, name: str, failure: Failure) -> "Outcome":
        return cls(name=name, status=MapperStatus.FAILED, failure=failure)

    @classmethod
    def skipped(cls, name: str, dependencies: list[str]) -> "Outcome":
        return cls(
            name=name,
            status=MapperStatus.SKIPPED,
            failure=Failure.unresolved_dependency(name, dependencies),
        )

    @property
    def is_resolved(self) -> bool:
        return self.status == MapperStatus.RESOLVED

    def to_dict(self) -> dict:
        d: dict = {"name": self.name, "status": self.status.value}
        if self.entity is not None:
            d["entity"] = entity_ref(self.entity)
        if self.failure is not None:
            d["failure"] = self.failure.to_dict()
        return d

    def __str__(self) -> str:
        if self.entity is not None:
            return f"{self.name} → {describe_entity(self.entity)}"
        return f"{self.name} [{self.status.value}] {self.failure}"


# ── Entity references ─────────────────────────────────────────────────────────

def entity_ref(entity: Entity) -> dict:
    """Compact JSON-safe reference identifying one entity in the model."""
    if isinstance(entity, ClassEntity):
        return {"kind": "class", "name": entity.name}
    if isinstance(entity, FieldEntity):
        return {"kind": "field", "owner": entity.owner, "name": entity.name,
                "descriptor": entity.descriptor}
    if isinstance(entity, MethodEntity):
        return {"kind": "method", "owner": entity.owner, "name": entity.name,
                "descriptor": entity.descriptor}
    if isinstance(entity, InstructionEntity):
        return {"kind": "instruction", "owner": entity.owner, "method": entity.method,
                "descriptor": entity.method_descriptor, "index": entity.index,
                "opcode": entity.opcode}
    raise TypeError(f"Not an entity: {entity!r}")


def describe_entity(entity: Entity) -> str:
    if isinstance(entity, ClassEntity):
        return entity.name
    return entity.describe()
