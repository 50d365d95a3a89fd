"""
MappingTable — the single result of a resolution pass.

Maps every semantic mapper name to its terminal Outcome.  Entries are
write-once: the scheduler records each mapper exactly once, and predicates
read earlier entries through ``resolve``.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from hookmap.exceptions import MappingTableError, UnresolvedMapperError
from hookmap.model import Entity
from hookmap.resolver.models import Outcome

from .report import ResolutionReport

__all__ = ["MappingTable"]


class MappingTable:
    """
    Write-once table of mapper outcomes.

    Args:
        names:    registration order of the run's mappers; ``report()``
                  lists outcomes in this order.
        revision: artifact revision the table was built from.
    """

    def __init__(self, names: Iterable[str] = (), revision: str = "") -> None:
        self._order: list[str] = list(names)
        self._outcomes: dict[str, Outcome] = {}
        self.revision = revision

    # ── Writing ───────────────────────────────────────────────────────────

    def record(self, outcome: Outcome) -> None:
        """
        Raises:
            MappingTableError: ``outcome.name`` already has an entry.
        """
        if outcome.name in self._outcomes:
            raise MappingTableError(
                f"Mapping table entry for '{outcome.name}' is already recorded"
            )
        self._outcomes[outcome.name] = outcome
        if outcome.name not in self._order:
            self._order.append(outcome.name)

    # ── Reading ───────────────────────────────────────────────────────────

    def resolve(self, name: str) -> Entity:
        """
        Return the entity bound to ``name``.

        Raises:
            UnresolvedMapperError: ``name`` has no entry yet, or failed / was skipped.
        """
        outcome = self._outcomes.get(name)
        if outcome is None:
            raise UnresolvedMapperError(f"Mapper '{name}' has not been evaluated")
        if not outcome.is_resolved:
            raise UnresolvedMapperError(f"Mapper '{name}' is {outcome.status.value}")
        return outcome.entity  # type: ignore[return-value]

    def outcome(self, name: str) -> Optional[Outcome]:
        return self._outcomes.get(name)

    def is_terminal(self, name: str) -> bool:
        return name in self._outcomes

    def is_resolved(self, name: str) -> bool:
        outcome = self._outcomes.get(name)
        return outcome is not None and outcome.is_resolved

    def entities(self) -> dict[str, Entity]:
        """Resolved entries only, in registration order."""
        return {
            o.name: o.entity for o in self
            if o.is_resolved and o.entity is not None
        }

    def report(self) -> ResolutionReport:
        return ResolutionReport(outcomes=tuple(self), revision=self.revision)

    # ── Dunder ────────────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Outcome]:
        for name in self._order:
            outcome = self._outcomes.get(name)
            if outcome is not None:
                yield outcome

    def __contains__(self, name: object) -> bool:
        return name in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingTable):
            return NotImplemented
        return self._outcomes == other._outcomes

    def __repr__(self) -> str:
        return f"MappingTable(entries={len(self)}, revision={self.revision!r})"
