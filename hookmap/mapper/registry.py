"""
MapperRegistry — the explicit set of mapper specifications for one run.

Mappers are registered by plain construction calls rather than discovered
by reflection.  The builder functions below cover the usual mapper
families and take care of naming members ``"<Class>.<member>"``::

    reg = MapperRegistry()
    reg.add(
        class_mapper("ItemDefinition", extends(mapped_type("DualNode")),
                     depends_on=["DualNode"]),
        instance_field("ItemDefinition", "name", of_type(STRING_TYPE)),
        constructor_field("ItemDefinition", "isMembersOnly",
                          field_write(BOOLEAN_TYPE), index=0, group_size=2),
    )
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from hookmap.exceptions import RegistryError
from hookmap.predicates import Predicate

from .models import MapperKind, MapperSpec, OrderKey, Scope, Target

__all__ = [
    "MapperRegistry",
    "member_name",
    "class_mapper",
    "instance_field",
    "static_field",
    "instance_method",
    "static_method",
    "constructor_field",
    "method_field",
    "method_invocation",
]

logger = logging.getLogger(__name__)


class MapperRegistry:
    """
    Ordered mapping of semantic name → MapperSpec.

    Registration order is preserved and is the order used by reports.
    """

    def __init__(self, specs: Iterable[MapperSpec] = ()) -> None:
        self._specs: dict[str, MapperSpec] = {}
        self.add(*specs)

    def register(self, spec: MapperSpec) -> MapperSpec:
        if spec.name in self._specs:
            raise RegistryError(f"Duplicate mapper name: {spec.name}")
        self._specs[spec.name] = spec
        return spec

    def add(self, *specs: MapperSpec) -> "MapperRegistry":
        for spec in specs:
            self.register(spec)
        return self

    def get(self, name: str) -> MapperSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise RegistryError(f"Unknown mapper: {name}") from None

    def names(self) -> list[str]:
        return list(self._specs)

    def validate(self) -> None:
        """
        Check every dependency names a registered mapper and every scope
        owner binds the kind of entity its scope searches.

        Raises:
            RegistryError: listing every dangling reference or mismatched
                           owner at once.
        """
        dangling = [
            f"{spec.name} → {dep}"
            for spec in self._specs.values()
            for dep in sorted(spec.dependencies)
            if dep not in self._specs
        ]
        if dangling:
            raise RegistryError("Unknown mapper dependencies: " + "; ".join(dangling))

        mismatched = []
        for spec in self._specs.values():
            expected = spec.scope.owner_target
            if expected is None:
                continue
            bound = self._specs[spec.scope.owner].target
            if bound != expected:
                mismatched.append(
                    f"{spec.name} → {spec.scope.owner} "
                    f"(needs {expected.value}, binds {bound.value})"
                )
        if mismatched:
            raise RegistryError("Scope owners of the wrong kind: " + "; ".join(mismatched))

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[MapperSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def __str__(self) -> str:
        return f"MapperRegistry({len(self._specs)} mappers)"


# ── Builders ──────────────────────────────────────────────────────────────────

def member_name(owner: str, member: str) -> str:
    return f"{owner}.{member}"


def class_mapper(
    name: str,
    predicate: Predicate,
    depends_on: Iterable[str] = (),
) -> MapperSpec:
    """Identity mapper over all classes."""
    return MapperSpec(
        name=name,
        kind=MapperKind.IDENTITY,
        predicate=predicate,
        scope=Scope.all_classes(),
        dependencies=depends_on,
    )


def instance_field(owner: str, name: str, predicate: Predicate,
                   depends_on: Iterable[str] = ()) -> MapperSpec:
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.IDENTITY,
        predicate=predicate,
        scope=Scope.instance_fields(owner),
        dependencies=depends_on,
    )


def static_field(owner: str, name: str, predicate: Predicate,
                 depends_on: Iterable[str] = ()) -> MapperSpec:
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.IDENTITY,
        predicate=predicate,
        scope=Scope.static_fields(owner),
        dependencies=depends_on,
    )


def instance_method(owner: str, name: str, predicate: Predicate,
                    depends_on: Iterable[str] = (),
                    parameters: Optional[Iterable[str]] = None) -> MapperSpec:
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.IDENTITY,
        predicate=predicate,
        scope=Scope.instance_methods(owner),
        dependencies=depends_on,
        parameters=tuple(parameters) if parameters is not None else None,
    )


def static_method(owner: str, name: str, predicate: Predicate,
                  depends_on: Iterable[str] = (),
                  parameters: Optional[Iterable[str]] = None) -> MapperSpec:
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.IDENTITY,
        predicate=predicate,
        scope=Scope.static_methods(owner),
        dependencies=depends_on,
        parameters=tuple(parameters) if parameters is not None else None,
    )


def constructor_field(owner: str, name: str, predicate: Predicate, index: int,
                      group_size: Optional[int] = None,
                      depends_on: Iterable[str] = ()) -> MapperSpec:
    """
    Order mapper: the field written by the index-th matching instruction
    across the owner's constructors.
    """
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.ORDER,
        predicate=predicate,
        scope=Scope.in_constructor(owner),
        dependencies=depends_on,
        order_key=OrderKey(index, group_size),
        target=Target.FIELD,
    )


def method_field(method: str, owner: str, name: str, predicate: Predicate,
                 index: int, group_size: Optional[int] = None,
                 depends_on: Iterable[str] = ()) -> MapperSpec:
    """
    Order mapper: the field touched by the index-th matching instruction
    inside the already-resolved method mapper ``method``.  The result is
    named as a member of ``owner``.
    """
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.ORDER,
        predicate=predicate,
        scope=Scope.in_method(method),
        dependencies=depends_on,
        order_key=OrderKey(index, group_size),
        target=Target.FIELD,
    )


def method_invocation(method: str, owner: str, name: str, predicate: Predicate,
                      index: int, group_size: Optional[int] = None,
                      depends_on: Iterable[str] = (),
                      parameters: Optional[Iterable[str]] = None) -> MapperSpec:
    """Order mapper: the method invoked by the index-th matching instruction."""
    return MapperSpec(
        name=member_name(owner, name),
        kind=MapperKind.ORDER,
        predicate=predicate,
        scope=Scope.in_method(method),
        dependencies=depends_on,
        order_key=OrderKey(index, group_size),
        target=Target.METHOD,
        parameters=tuple(parameters) if parameters is not None else None,
    )
