"""
Predicate engine — composable, described boolean tests over entities.
"""

from .base import (
    Conjunction,
    MappedType,
    Predicate,
    TypeRef,
    all_of,
    describe_type,
    mapped_type,
    predicate_of,
    resolve_type,
)
from .library import (
    argument_count,
    arguments_start_with,
    contains_instruction,
    extends,
    field_access,
    field_owner_is,
    field_write,
    has_instance_field,
    implements,
    instance_field_count,
    lacks_instruction,
    of_type,
    opcode_is,
    pushes_int,
    returns,
)

__all__ = [
    "Conjunction",
    "MappedType",
    "Predicate",
    "TypeRef",
    "all_of",
    "describe_type",
    "mapped_type",
    "predicate_of",
    "resolve_type",
    "argument_count",
    "arguments_start_with",
    "contains_instruction",
    "extends",
    "field_access",
    "field_owner_is",
    "field_write",
    "has_instance_field",
    "implements",
    "instance_field_count",
    "lacks_instruction",
    "of_type",
    "opcode_is",
    "pushes_int",
    "returns",
]
