"""
Scope evaluation — turns a Scope into its ordered candidate list.

Ordering is deterministic and follows the artifact: classes in model
order, members in declaration order, instructions in body order with
constructors visited in declaration order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookmap.exceptions import ConfigurationError
from hookmap.mapper import Scope, ScopeKind
from hookmap.model import ClassEntity, Entity, EntityModel, MethodEntity

if TYPE_CHECKING:
    from hookmap.table.mapping import MappingTable

__all__ = ["scope_candidates"]


def scope_candidates(scope: Scope, model: EntityModel,
                     table: "MappingTable") -> list[Entity]:
    kind = scope.kind
    if kind == ScopeKind.ALL_CLASSES:
        return list(model.classes)

    if kind == ScopeKind.METHOD_INSTRUCTIONS:
        return list(_owner_method(scope, table).instructions)

    cls = _owner_class(scope, table)
    if kind == ScopeKind.INSTANCE_FIELDS:
        return list(cls.instance_fields)
    if kind == ScopeKind.STATIC_FIELDS:
        return list(cls.static_fields)
    if kind == ScopeKind.INSTANCE_METHODS:
        return list(cls.instance_methods)
    if kind == ScopeKind.STATIC_METHODS:
        return list(cls.static_methods)
    if kind == ScopeKind.CONSTRUCTOR_INSTRUCTIONS:
        return [insn for ctor in cls.constructors for insn in ctor.instructions]
    raise ConfigurationError(f"Unsupported scope kind: {kind}")


def _owner_class(scope: Scope, table: "MappingTable") -> ClassEntity:
    owner = table.resolve(scope.owner)
    if not isinstance(owner, ClassEntity):
        raise ConfigurationError(
            f"Scope '{scope.describe()}' needs <{scope.owner}> to bind a class, "
            f"got {type(owner).__name__}"
        )
    return owner


def _owner_method(scope: Scope, table: "MappingTable") -> MethodEntity:
    owner = table.resolve(scope.owner)
    if not isinstance(owner, MethodEntity):
        raise ConfigurationError(
            f"Scope '{scope.describe()}' needs <{scope.owner}> to bind a method, "
            f"got {type(owner).__name__}"
        )
    return owner
