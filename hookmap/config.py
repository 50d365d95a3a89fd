"""Runtime configuration for the resolution engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from hookmap.exceptions import ConfigurationError

__all__ = ["EngineConfig"]

_TRUE  = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """
    Fields
    ──────
    max_workers — upper bound on mappers evaluated at once within a wave
    parallel    — False forces sequential evaluation regardless of max_workers
    """
    max_workers: int  = 4
    parallel:    bool = True

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def concurrent(self) -> bool:
        return self.parallel and self.max_workers > 1

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a config from HOOKMAP_MAX_WORKERS / HOOKMAP_PARALLEL;
        unset variables keep their defaults.

        Raises:
            ConfigurationError: a variable is set to an unparseable value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        raw_workers = env.get("HOOKMAP_MAX_WORKERS", "").strip()
        try:
            max_workers = int(raw_workers) if raw_workers else defaults.max_workers
        except ValueError as exc:
            raise ConfigurationError(
                f"HOOKMAP_MAX_WORKERS must be an integer, got {raw_workers!r}"
            ) from exc

        raw_parallel = env.get("HOOKMAP_PARALLEL", "").strip().lower()
        if not raw_parallel:
            parallel = defaults.parallel
        elif raw_parallel in _TRUE:
            parallel = True
        elif raw_parallel in _FALSE:
            parallel = False
        else:
            raise ConfigurationError(
                f"HOOKMAP_PARALLEL must be a boolean, got {raw_parallel!r}"
            )

        return cls(max_workers=max_workers, parallel=parallel)
