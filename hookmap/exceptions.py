"""
Project-wide custom exception hierarchy.
All modules raise subclasses of HookmapError — never bare Exception.

Local mapper failures (no match, ambiguous match, …) are NOT exceptions:
they are recorded as Outcome objects in the MappingTable.  Exceptions are
reserved for conditions that abort the whole run or indicate misuse.
"""

__all__ = [
    "HookmapError",
    "ModelError",
    "ConfigurationError",
    "RegistryError",
    "CyclicDependencyError",
    "ResolutionError",
    "MappingTableError",
    "UnresolvedMapperError",
    "StoreError",
]


class HookmapError(Exception):
    """Root exception for all hookmap errors."""


# ── Entity model ──────────────────────────────────────────────────────────────

class ModelError(HookmapError):
    """Raised when the entity model input is malformed or inconsistent."""


# ── Mapper configuration ──────────────────────────────────────────────────────

class ConfigurationError(HookmapError):
    """Raised when mapper specifications are invalid."""


class RegistryError(ConfigurationError):
    """Raised on duplicate mapper names or references to unknown mappers."""


class CyclicDependencyError(ConfigurationError):
    """
    Raised when the mapper dependency graph contains a cycle.

    `members` holds every mapper name that participates in a cycle,
    sorted, so the whole cycle can be fixed in one pass.
    """

    def __init__(self, members: list[str]) -> None:
        self.members = sorted(members)
        super().__init__(
            "Cyclic mapper dependency between: " + ", ".join(self.members)
        )


# ── Resolution ────────────────────────────────────────────────────────────────

class ResolutionError(HookmapError):
    """Base class for misuse of the mapping table during a run."""


class MappingTableError(ResolutionError):
    """Raised when a mapping table entry is written twice."""


class UnresolvedMapperError(ResolutionError):
    """Raised when a predicate asks for a mapper that has not resolved."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(HookmapError):
    """Raised on SQLite / store I/O errors."""
