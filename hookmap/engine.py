"""
ResolutionEngine — runs every registered mapper once against one model.

Pipeline
────────
  registry ──► DependencyGraph (cycle check, waves)
           ──► for each wave:
                 skip mappers with an unresolved prerequisite
                 evaluate the rest (thread pool when configured)
                 record outcomes in sorted-name order
           ──► MappingTable

Usage::

    table = ResolutionEngine(model, registry).run()
    print(table.report().format_text())
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

from hookmap.config import EngineConfig
from hookmap.graph import DependencyGraph
from hookmap.mapper import MapperRegistry, MapperSpec
from hookmap.model import EntityModel
from hookmap.resolver import Outcome, get_resolver
from hookmap.table import MappingTable

__all__ = ["ResolutionEngine", "resolve"]

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """
    One resolution pass over ``model`` for the mappers in ``registry``.

    Local failures (no match, ambiguity, bad order index, ...) are recorded
    in the table and never abort the pass.  A dependency cycle raises
    CyclicDependencyError before any predicate runs; an exception raised by
    a predicate propagates to the caller.
    """

    def __init__(
        self,
        model: EntityModel,
        registry: MapperRegistry,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self._model = model
        self._registry = registry
        self._config = config or EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ── Public API ────────────────────────────────────────────────────────

    def run(self) -> MappingTable:
        graph = DependencyGraph(self._registry)
        waves = graph.generations()

        table = MappingTable(self._registry.names(), revision=self._model.revision)
        logger.info(
            "Resolving %d mappers against %d classes (revision %s) in %d waves",
            len(self._registry), len(self._model), self._model.revision or "-",
            len(waves),
        )

        if self._config.concurrent:
            with ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix="hookmap",
            ) as pool:
                for wave in waves:
                    self._run_wave(wave, table, pool)
        else:
            for wave in waves:
                self._run_wave(wave, table, None)

        summary = table.report().summary()
        logger.info(
            "Resolution finished: %d/%d resolved, %d failed, %d skipped",
            summary["resolved"], summary["total"], summary["failed"], summary["skipped"],
        )
        return table

    def evaluate(self, spec: MapperSpec, table: MappingTable) -> Outcome:
        """Evaluate a single mapper whose dependencies are all resolved."""
        outcome = get_resolver(spec.kind).resolve(spec, self._model, table)
        if outcome.is_resolved:
            logger.debug("%s", outcome)
        else:
            logger.warning("%s", outcome.failure)
        return outcome

    # ── Internal helpers ──────────────────────────────────────────────────

    def _run_wave(
        self,
        wave: list[str],
        table: MappingTable,
        pool: Optional[Executor],
    ) -> None:
        runnable: list[MapperSpec] = []
        for name in wave:
            spec = self._registry.get(name)
            blocked = sorted(d for d in spec.dependencies if not table.is_resolved(d))
            if blocked:
                outcome = Outcome.skipped(name, blocked)
                logger.warning("%s", outcome.failure)
                table.record(outcome)
            else:
                runnable.append(spec)

        if pool is not None and len(runnable) > 1:
            futures = {spec.name: pool.submit(self.evaluate, spec, table)
                       for spec in runnable}
            results = {name: future.result() for name, future in futures.items()}
        else:
            results = {spec.name: self.evaluate(spec, table) for spec in runnable}

        for name in sorted(results):
            table.record(results[name])


def resolve(
    model: EntityModel,
    registry: MapperRegistry,
    config: Optional[EngineConfig] = None,
) -> MappingTable:
    """Convenience wrapper: ``ResolutionEngine(model, registry, config).run()``."""
    return ResolutionEngine(model, registry, config).run()
