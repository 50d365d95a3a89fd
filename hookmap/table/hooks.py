"""
Hooks export — the mapping table reshaped for the accessor code generator.

One hook per resolved class mapper, carrying the resolved fields and
methods whose semantic owner is that class.  Member mappers are named
``Owner.member`` (see ``hookmap.mapper.member_name``); a member whose
semantic owner is not a resolved class is attached to the hook of the
class that declares it, or dropped when there is none.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from hookmap.exceptions import ResolutionError
from hookmap.mapper import MapperRegistry, Target
from hookmap.model import ClassEntity, FieldEntity, MethodEntity

from .mapping import MappingTable

__all__ = ["build_hooks", "hooks_to_json"]

logger = logging.getLogger(__name__)


def build_hooks(table: MappingTable, registry: MapperRegistry) -> list[dict]:
    hooks: list[dict] = []
    by_semantic: dict[str, dict] = {}
    by_obfuscated: dict[str, dict] = {}

    for spec in registry:
        if spec.target != Target.CLASS or not table.is_resolved(spec.name):
            continue
        cls = table.resolve(spec.name)
        if not isinstance(cls, ClassEntity):
            raise ResolutionError(f"{spec.name} targets a class but bound {cls!r}")
        hook = {
            "class":      spec.name,
            "name":       cls.name,
            "super":      cls.super_name,
            "interfaces": list(cls.interfaces),
            "access":     cls.access,
            "fields":     [],
            "methods":    [],
        }
        hooks.append(hook)
        by_semantic[spec.name] = hook
        by_obfuscated.setdefault(cls.name, hook)

    for spec in registry:
        if spec.target not in (Target.FIELD, Target.METHOD):
            continue
        if not table.is_resolved(spec.name):
            continue
        entity = table.resolve(spec.name)
        semantic_owner, _, member = spec.name.rpartition(".")
        hook = _owner_hook(semantic_owner, entity.owner, by_semantic, by_obfuscated)
        if hook is None:
            logger.debug("No class hook for %s; left out of export", spec.name)
            continue

        if isinstance(entity, FieldEntity):
            hook["fields"].append({
                "field":      member or spec.name,
                "owner":      entity.owner,
                "name":       entity.name,
                "descriptor": entity.descriptor,
                "access":     entity.access,
            })
        elif isinstance(entity, MethodEntity):
            hook["methods"].append({
                "method":     member or spec.name,
                "owner":      entity.owner,
                "name":       entity.name,
                "descriptor": entity.descriptor,
                "access":     entity.access,
                "parameters": list(spec.parameters) if spec.parameters is not None else None,
            })

    logger.debug("Built %d class hooks", len(hooks))
    return hooks


def hooks_to_json(hooks: list[dict], indent: Optional[int] = 2) -> str:
    return json.dumps(hooks, indent=indent)


def _owner_hook(
    semantic_owner: str,
    declaring_class: str,
    by_semantic: dict[str, dict],
    by_obfuscated: dict[str, dict],
) -> Optional[dict]:
    if semantic_owner in by_semantic:
        return by_semantic[semantic_owner]
    return by_obfuscated.get(declaring_class)
