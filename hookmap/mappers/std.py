"""
Standard mapper set — the node hierarchy, Buffer, Model and ItemDefinition.

Classes
───────
Node            base of every linked/cached object: two self-links, a long key
DualNode        Node with a second pair of self-links
Entity          abstract renderable, extends DualNode
Model           Entity with int[] vertex data
Buffer          Node wrapping a byte[]
ItemDefinition  DualNode with 4 short[] and 2 String[] fields

ItemDefinition members are mostly positional: the constructor assigns its
int fields in a fixed order, so each is an Order mapper over "field access
of I" in the constructors.  ``read`` and ``readNext`` share their shape and
differ only by a ``bipush 16`` in the body.
"""

from __future__ import annotations

from hookmap.mapper import (
    MapperRegistry,
    class_mapper,
    constructor_field,
    instance_field,
    instance_method,
)
from hookmap.model import descriptors as d
from hookmap.predicates import (
    arguments_start_with,
    contains_instruction,
    extends,
    field_access,
    has_instance_field,
    instance_field_count,
    lacks_instruction,
    mapped_type,
    of_type,
    predicate_of,
    pushes_int,
    returns,
)

__all__ = ["build_registry", "ITEM_DEFINITION_INT_FIELDS"]

_STRING_ARRAY = d.array_of(d.STRING_TYPE)

# Constructor assignment order of ItemDefinition's int fields
ITEM_DEFINITION_INT_FIELDS = (
    "zoom2d", "xan2d", "yan2d", "zan2d", "offsetX2d", "offsetY2d",
    "isStackable", "price", "team",
    "maleModel", "maleModel1", "maleOffset",
    "femaleModel", "femaleModel1", "femaleOffset",
    "maleModel2", "femaleModel2",
    "maleHeadModel", "maleHeadModel2", "femaleHeadModel", "femaleHeadModel2",
    "note", "notedTemplate",
    "resizeX", "resizeY", "resizeZ",
    "ambient", "contrast",
    "int1", "unnotedId", "notedId", "int2", "int3",
)


def _self_links(count: int):
    return predicate_of(
        f"{count} instance fields of its own type",
        lambda cls: sum(1 for f in cls.instance_fields if f.type == cls.type) == count,
    )


def build_registry() -> MapperRegistry:
    registry = MapperRegistry()

    # ── Node hierarchy ────────────────────────────────────────────────────
    registry.add(
        class_mapper(
            "Node",
            extends(d.OBJECT_TYPE) & _self_links(2) & has_instance_field(d.LONG_TYPE),
        ),
        class_mapper(
            "DualNode",
            extends(mapped_type("Node")) & _self_links(2),
            depends_on=["Node"],
        ),
        class_mapper(
            "Buffer",
            extends(mapped_type("Node")) & has_instance_field(d.array_of(d.BYTE_TYPE)),
            depends_on=["Node"],
        ),
        class_mapper(
            "Entity",
            extends(mapped_type("DualNode")) & predicate_of("is abstract", lambda c: c.is_abstract),
            depends_on=["DualNode"],
        ),
        class_mapper(
            "Model",
            extends(mapped_type("Entity")) & has_instance_field(d.array_of(d.INT_TYPE)),
            depends_on=["Entity"],
        ),
    )

    # ── ItemDefinition ────────────────────────────────────────────────────
    owner = "ItemDefinition"
    registry.add(
        class_mapper(
            owner,
            extends(mapped_type("DualNode"))
            & instance_field_count(d.array_of(d.SHORT_TYPE), 4)
            & instance_field_count(_STRING_ARRAY, 2),
            depends_on=["DualNode"],
        ),
        instance_method(
            owner, "getModel",
            returns(mapped_type("Model")),
            depends_on=["Model"],
            parameters=("quantity",),
        ),
        instance_field(owner, "name", of_type(d.STRING_TYPE)),
        constructor_field(owner, "groundActions", field_access(_STRING_ARRAY), 0),
        constructor_field(owner, "inventoryActions", field_access(_STRING_ARRAY), 1),
        constructor_field(owner, "isMembersOnly", field_access(d.BOOLEAN_TYPE), 0, group_size=2),
        constructor_field(owner, "isTradable", field_access(d.BOOLEAN_TYPE), 1, group_size=2),
        instance_method(
            owner, "read",
            returns(d.VOID_TYPE)
            & arguments_start_with(mapped_type("Buffer"))
            & lacks_instruction(pushes_int(16)),
            depends_on=["Buffer"],
        ),
        instance_method(
            owner, "readNext",
            returns(d.VOID_TYPE)
            & arguments_start_with(mapped_type("Buffer"))
            & contains_instruction(pushes_int(16)),
            depends_on=["Buffer"],
        ),
    )
    registry.add(*(
        constructor_field(owner, field, field_access(d.INT_TYPE), index)
        for index, field in enumerate(ITEM_DEFINITION_INT_FIELDS)
    ))
    return registry
