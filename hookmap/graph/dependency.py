"""Mapper dependency graph and evaluation schedule."""

from __future__ import annotations

import logging

import rustworkx as rx

from hookmap.exceptions import CyclicDependencyError
from hookmap.mapper import MapperRegistry

__all__ = ["DependencyGraph"]

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Directed graph over mapper names.

    Edges are stored dependency → dependent, so a topological generation
    of the stored graph is a wave of mappers whose prerequisites all sit in
    earlier waves.  Mappers inside one wave have no ordering constraint
    between each other.
    """

    def __init__(self, registry: MapperRegistry) -> None:
        registry.validate()
        self._graph = rx.PyDiGraph(multigraph=False)
        self._idx: dict[str, int] = {}
        for spec in registry:
            self._idx[spec.name] = self._graph.add_node(spec.name)
        edges = [
            (self._idx[dep], self._idx[spec.name])
            for spec in registry
            for dep in sorted(spec.dependencies)
        ]
        self._graph.add_edges_from_no_data(edges)
        logger.debug("Dependency graph: %d mappers, %d edges",
                     self._graph.num_nodes(), self._graph.num_edges())

    # ── Validation ────────────────────────────────────────────────────────

    def cycle_members(self) -> list[str]:
        """Every mapper that sits on a dependency cycle, sorted."""
        members: set[str] = set()
        for component in rx.strongly_connected_components(self._graph):
            if len(component) > 1:
                members.update(self._graph[i] for i in component)
        for name, idx in self._idx.items():
            if self._graph.has_edge(idx, idx):
                members.add(name)
        return sorted(members)

    def check_acyclic(self) -> None:
        """
        Raises:
            CyclicDependencyError: naming all cycle members.
        """
        if rx.is_directed_acyclic_graph(self._graph):
            return
        raise CyclicDependencyError(self.cycle_members())

    # ── Schedule ──────────────────────────────────────────────────────────

    def generations(self) -> list[list[str]]:
        """
        Evaluation waves, earliest first; names sorted inside a wave.

        Raises:
            CyclicDependencyError: the graph is not acyclic.
        """
        self.check_acyclic()
        return [
            sorted(self._graph[i] for i in generation)
            for generation in rx.topological_generations(self._graph)
        ]

    def order(self) -> list[str]:
        """Flat evaluation order (generation by generation)."""
        return [name for wave in self.generations() for name in wave]

    # ── Queries ───────────────────────────────────────────────────────────

    def dependencies_of(self, name: str) -> set[str]:
        """Direct prerequisites of ``name``."""
        return {self._graph[i] for i in self._graph.predecessor_indices(self._idx[name])}

    def dependents_of(self, name: str) -> set[str]:
        """Every mapper that transitively depends on ``name``."""
        return {self._graph[i] for i in rx.descendants(self._graph, self._idx[name])}

    def __contains__(self, name: object) -> bool:
        return name in self._idx

    def __len__(self) -> int:
        return self._graph.num_nodes()
