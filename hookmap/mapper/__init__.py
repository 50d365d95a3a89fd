"""
Mapper specifications — declarative descriptions of what to find.

Each MapperSpec pairs a predicate with a resolution strategy, a scope and
its dependencies; MapperRegistry holds the full set for one run.
"""

from .models import MapperKind, MapperSpec, OrderKey, Scope, ScopeKind, Target
from .registry import (
    MapperRegistry,
    class_mapper,
    constructor_field,
    instance_field,
    instance_method,
    member_name,
    method_field,
    method_invocation,
    static_field,
    static_method,
)

__all__ = [
    "MapperKind",
    "MapperSpec",
    "OrderKey",
    "Scope",
    "ScopeKind",
    "Target",
    "MapperRegistry",
    "class_mapper",
    "constructor_field",
    "instance_field",
    "instance_method",
    "member_name",
    "method_field",
    "method_invocation",
    "static_field",
    "static_method",
]
