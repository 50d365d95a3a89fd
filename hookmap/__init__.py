"""
hookmap — re-identify obfuscated program elements across releases.

Mappers describe what to find (predicate + strategy + scope); the
ResolutionEngine evaluates them against one entity model in dependency
order and produces a MappingTable.
"""

from hookmap.config import EngineConfig
from hookmap.engine import ResolutionEngine, resolve
from hookmap.exceptions import HookmapError

__all__ = ["EngineConfig", "ResolutionEngine", "resolve", "HookmapError"]

__version__ = "0.1.0"
