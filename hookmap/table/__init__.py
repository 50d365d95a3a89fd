"""
Mapping table — write-once results of a pass, its report and hooks export.
"""

from .hooks import build_hooks, hooks_to_json
from .mapping import MappingTable
from .report import ChangeKind, ReportChange, ResolutionReport, compare_reports

__all__ = [
    "MappingTable",
    "ResolutionReport",
    "ReportChange",
    "ChangeKind",
    "compare_reports",
    "build_hooks",
    "hooks_to_json",
]
