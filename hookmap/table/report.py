"""
ResolutionReport — human- and machine-readable summary of one pass.

Key concepts
────────────
ResolutionReport  — every mapper's outcome, registration order
ReportChange      — one mapper whose status or bound entity differs
                    between two reports (e.g. two artifact revisions)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from hookmap.resolver.models import MapperStatus, Outcome

__all__ = ["ResolutionReport", "ReportChange", "ChangeKind", "compare_reports"]


@dataclass(frozen=True)
class ResolutionReport:
    outcomes: tuple[Outcome, ...]
    revision: str = ""

    @property
    def resolved(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == MapperStatus.RESOLVED]

    @property
    def failures(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == MapperStatus.FAILED]

    @property
    def skipped(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == MapperStatus.SKIPPED]

    @property
    def complete(self) -> bool:
        """True when every mapper resolved."""
        return len(self.resolved) == len(self.outcomes)

    def summary(self) -> dict[str, int]:
        return {
            "total":    len(self.outcomes),
            "resolved": len(self.resolved),
            "failed":   len(self.failures),
            "skipped":  len(self.skipped),
        }

    def to_dict(self) -> dict:
        return {
            "revision": self.revision,
            "summary":  self.summary(),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def format_text(self) -> str:
        """Multi-line report: summary line, then one line per non-resolved mapper."""
        s = self.summary()
        head = f"revision {self.revision}: " if self.revision else ""
        lines = [
            f"{head}{s['resolved']}/{s['total']} resolved, "
            f"{s['failed']} failed, {s['skipped']} skipped"
        ]
        for outcome in self.failures + self.skipped:
            lines.append(f"  {outcome.status.value.upper():8} {outcome.failure.detail}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format_text()


# ── Comparison ────────────────────────────────────────────────────────────────

class ChangeKind(str, Enum):
    ADDED   = "added"      # mapper only present in the new report
    REMOVED = "removed"    # mapper only present in the old report
    STATUS  = "status"     # resolved ↔ failed ↔ skipped
    ENTITY  = "entity"     # still resolved, bound to a different entity


@dataclass(frozen=True)
class ReportChange:
    name:       str
    kind:       ChangeKind
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    old_entity: Optional[dict] = None
    new_entity: Optional[dict] = None

    def __str__(self) -> str:
        if self.kind == ChangeKind.ENTITY:
            return f"{self.name}: {self.old_entity} → {self.new_entity}"
        return f"{self.name}: {self.old_status or '-'} → {self.new_status or '-'}"


def compare_reports(
    old: Union[ResolutionReport, dict],
    new: Union[ResolutionReport, dict],
) -> list[ReportChange]:
    """
    List mappers whose status or bound entity changed between two reports.

    Accepts reports or their ``to_dict()`` form, so stored runs can be
    compared against a fresh pass.  Changes are returned in the new
    report's order, followed by removed mappers.
    """
    before = _by_name(old)
    after = _by_name(new)
    changes: list[ReportChange] = []

    for name, entry in after.items():
        prev = before.get(name)
        if prev is None:
            changes.append(ReportChange(
                name, ChangeKind.ADDED,
                new_status=entry["status"], new_entity=entry.get("entity"),
            ))
        elif prev["status"] != entry["status"]:
            changes.append(ReportChange(
                name, ChangeKind.STATUS,
                old_status=prev["status"], new_status=entry["status"],
                old_entity=prev.get("entity"), new_entity=entry.get("entity"),
            ))
        elif prev.get("entity") != entry.get("entity"):
            changes.append(ReportChange(
                name, ChangeKind.ENTITY,
                old_status=prev["status"], new_status=entry["status"],
                old_entity=prev.get("entity"), new_entity=entry.get("entity"),
            ))

    for name, prev in before.items():
        if name not in after:
            changes.append(ReportChange(
                name, ChangeKind.REMOVED,
                old_status=prev["status"], old_entity=prev.get("entity"),
            ))
    return changes


def _by_name(report: Union[ResolutionReport, dict]) -> dict[str, dict]:
    raw = report.to_dict() if isinstance(report, ResolutionReport) else report
    return {entry["name"]: entry for entry in raw.get("outcomes", [])}
