"""Dependency graph & scheduler for mapper evaluation."""

from .dependency import DependencyGraph

__all__ = ["DependencyGraph"]
