"""Abstract base class for all resolvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from hookmap.mapper import MapperKind, MapperSpec, Target
from hookmap.model import Entity, EntityModel, InstructionEntity

from .models import Failure, Outcome, describe_entity
from .scope import scope_candidates

if TYPE_CHECKING:
    from hookmap.table.mapping import MappingTable

__all__ = ["AbstractResolver"]


class AbstractResolver(ABC):
    """
    Runs one mapper against the entity model and produces its Outcome.

    The shared pipeline is fixed here:
      1. enumerate the scope's candidates (deterministic order)
      2. keep those satisfying the predicate, preserving order
      3. ``select`` — strategy-specific, implemented by subclasses
      4. bind the selection as the mapper's target (instruction → field/method)

    Each concrete subclass implements one MapperKind.
    """

    def resolve(
        self,
        spec: MapperSpec,
        model: EntityModel,
        table: "MappingTable",
    ) -> Outcome:
        pool = scope_candidates(spec.scope, model, table)
        matches = [c for c in pool if spec.predicate(c, table)]
        picked = self.select(spec, matches)
        if isinstance(picked, Failure):
            return Outcome.failed(spec.name, picked)
        return self._bind(spec, picked, model)

    @abstractmethod
    def select(
        self,
        spec: MapperSpec,
        matches: list[Entity],
    ) -> Union[Entity, Failure]:
        """
        Choose one entity from the predicate-filtered candidates, or
        explain why none can be chosen.
        """

    @property
    @abstractmethod
    def strategy(self) -> MapperKind:
        """The MapperKind this resolver implements."""

    # ── Internal helpers ──────────────────────────────────────────────────

    @staticmethod
    def _bind(spec: MapperSpec, picked: Entity, model: EntityModel) -> Outcome:
        if not isinstance(picked, InstructionEntity) or spec.target == Target.INSTRUCTION:
            return Outcome.resolved(spec.name, picked)

        if spec.target == Target.FIELD:
            bound = model.field_of(picked)
        else:
            bound = model.method_of(picked)
        if bound is None:
            return Outcome.failed(
                spec.name,
                Failure.unbound(spec.name, describe_entity(picked), spec.target.value),
            )
        return Outcome.resolved(spec.name, bound)
