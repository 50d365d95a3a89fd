"""
Reusable leaf predicates.

Each factory returns a Predicate whose description names the structural
fact it checks, e.g. ``returns <Model>`` or ``4 instance fields of [S``.
Type arguments accept either a literal descriptor or a MappedType, which
is resolved through the mapping table at evaluation time.

Grouped by the entity kind they apply to:
  class        — extends, implements, instance_field_count, has_instance_field
  field        — of_type
  method       — returns, arguments_start_with, argument_count,
                 contains_instruction, lacks_instruction
  instruction  — opcode_is, pushes_int, field_access, field_write,
                 field_owner_is
"""

from __future__ import annotations

from typing import Optional

from hookmap.model import descriptors as d

from .base import Predicate, TypeRef, describe_type, resolve_type

__all__ = [
    "extends",
    "implements",
    "instance_field_count",
    "has_instance_field",
    "of_type",
    "returns",
    "arguments_start_with",
    "argument_count",
    "contains_instruction",
    "lacks_instruction",
    "opcode_is",
    "pushes_int",
    "field_access",
    "field_write",
    "field_owner_is",
]

_INT_PUSH_OPCODES = frozenset({d.Opcode.BIPUSH, d.Opcode.SIPUSH})


# ── Class predicates ──────────────────────────────────────────────────────────

def extends(super_type: TypeRef) -> Predicate:
    return Predicate(
        f"extends {describe_type(super_type)}",
        lambda cls, table: cls.super_type == resolve_type(super_type, table),
    )


def implements(interface: TypeRef) -> Predicate:
    return Predicate(
        f"implements {describe_type(interface)}",
        lambda cls, table: resolve_type(interface, table) in cls.interface_types,
    )


def instance_field_count(field_type: TypeRef, count: int) -> Predicate:
    def test(cls, table) -> bool:
        wanted = resolve_type(field_type, table)
        return sum(1 for f in cls.instance_fields if f.type == wanted) == count

    return Predicate(f"{count} instance fields of {describe_type(field_type)}", test)


def has_instance_field(field_type: TypeRef) -> Predicate:
    def test(cls, table) -> bool:
        wanted = resolve_type(field_type, table)
        return any(f.type == wanted for f in cls.instance_fields)

    return Predicate(f"has instance field of {describe_type(field_type)}", test)


# ── Field predicates ──────────────────────────────────────────────────────────

def of_type(field_type: TypeRef) -> Predicate:
    return Predicate(
        f"type is {describe_type(field_type)}",
        lambda fld, table: fld.type == resolve_type(field_type, table),
    )


# ── Method predicates ─────────────────────────────────────────────────────────

def returns(return_type: TypeRef) -> Predicate:
    return Predicate(
        f"returns {describe_type(return_type)}",
        lambda m, table: m.return_type == resolve_type(return_type, table),
    )


def arguments_start_with(*arg_types: TypeRef) -> Predicate:
    shown = ", ".join(describe_type(t) for t in arg_types)

    def test(m, table) -> bool:
        wanted = tuple(resolve_type(t, table) for t in arg_types)
        return m.arguments[:len(wanted)] == wanted

    return Predicate(f"arguments start with ({shown})", test)


def argument_count(count: int) -> Predicate:
    return Predicate(
        f"{count} arguments",
        lambda m, _table: len(m.arguments) == count,
    )


def contains_instruction(insn: Predicate) -> Predicate:
    return Predicate(
        f"contains instruction ({insn.description})",
        lambda m, table: any(insn(i, table) for i in m.instructions),
    )


def lacks_instruction(insn: Predicate) -> Predicate:
    return Predicate(
        f"contains no instruction ({insn.description})",
        lambda m, table: not any(insn(i, table) for i in m.instructions),
    )


# ── Instruction predicates ────────────────────────────────────────────────────

def opcode_is(opcode: int) -> Predicate:
    return Predicate(
        f"opcode {opcode}",
        lambda i, _table: i.opcode == opcode,
    )


def pushes_int(value: int) -> Predicate:
    """BIPUSH / SIPUSH pushing exactly ``value``."""
    return Predicate(
        f"pushes int {value}",
        lambda i, _table: i.opcode in _INT_PUSH_OPCODES and i.int_operand == value,
    )


def field_access(field_type: Optional[TypeRef] = None) -> Predicate:
    """Any field instruction, optionally restricted to one field type."""
    if field_type is None:
        return Predicate("field access", lambda i, _table: i.is_field)
    return Predicate(
        f"field access of {describe_type(field_type)}",
        lambda i, table: i.is_field and i.field_type == resolve_type(field_type, table),
    )


def field_write(field_type: Optional[TypeRef] = None) -> Predicate:
    """PUTFIELD / PUTSTATIC, optionally restricted to one field type."""
    if field_type is None:
        return Predicate("field write", lambda i, _table: i.is_field_write)
    return Predicate(
        f"field write of {describe_type(field_type)}",
        lambda i, table: i.is_field_write and i.field_type == resolve_type(field_type, table),
    )


def field_owner_is(owner: TypeRef) -> Predicate:
    return Predicate(
        f"field owner is {describe_type(owner)}",
        lambda i, table: i.is_field
        and d.object_type(i.field_owner) == resolve_type(owner, table),
    )
