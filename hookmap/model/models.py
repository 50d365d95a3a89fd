"""
Data models for the entity model — the read-only view of one artifact.

Key concepts
────────────
ClassEntity        — one class with its fields and methods (declaration order)
FieldEntity        — one field, referencing its owner by class name
MethodEntity       — one method with its instruction stream
InstructionEntity  — one instruction inside a method body
EntityModel        — every class of one artifact, with lookups

Entities reference their owners by NAME, never by object, so they are
plain frozen values: they compare by value, hash, and never form cycles.
Two runs over the same input therefore produce equal mapping tables.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from . import descriptors as d

__all__ = [
    "ClassEntity",
    "FieldEntity",
    "MethodEntity",
    "InstructionEntity",
    "Entity",
    "EntityModel",
]


@dataclass(frozen=True)
class InstructionEntity:
    """
    One bytecode instruction.

    owner / method / method_descriptor identify the containing method;
    index is the position inside that method's instruction stream.
    Operand slots are None when the opcode does not carry them.
    """
    owner:             str
    method:            str
    method_descriptor: str
    index:             int
    opcode:            int

    int_operand:       Optional[int] = None    # BIPUSH / SIPUSH / ICONST_*
    constant:          Union[int, float, str, None] = None   # LDC

    # ── field instructions (GETFIELD / PUTFIELD / GETSTATIC / PUTSTATIC) ──
    field_owner:       Optional[str] = None
    field_name:        Optional[str] = None
    field_descriptor:  Optional[str] = None

    # ── invoke instructions ───────────────────────────────────────────────
    method_owner:       Optional[str] = None
    method_name:        Optional[str] = None
    invoked_descriptor: Optional[str] = None

    # NEW / ANEWARRAY / CHECKCAST / INSTANCEOF
    type_operand:      Optional[str] = None

    @property
    def is_field(self) -> bool:
        return self.opcode in d.FIELD_OPCODES

    @property
    def is_field_write(self) -> bool:
        return self.opcode in d.FIELD_WRITE_OPCODES

    @property
    def is_method_call(self) -> bool:
        return self.opcode in d.INVOKE_OPCODES

    @property
    def field_type(self) -> Optional[str]:
        return self.field_descriptor

    def describe(self) -> str:
        base = f"{self.owner}.{self.method}{self.method_descriptor}@{self.index} op={self.opcode}"
        if self.is_field:
            return f"{base} {self.field_owner}.{self.field_name}:{self.field_descriptor}"
        if self.is_method_call:
            return f"{base} {self.method_owner}.{self.method_name}{self.invoked_descriptor}"
        if self.int_operand is not None:
            return f"{base} {self.int_operand}"
        return base


@dataclass(frozen=True)
class FieldEntity:
    owner:      str
    name:       str
    descriptor: str
    access:     int = 0

    @property
    def type(self) -> str:
        return self.descriptor

    @property
    def is_static(self) -> bool:
        return bool(self.access & d.ACC_STATIC)

    @property
    def is_final(self) -> bool:
        return bool(self.access & d.ACC_FINAL)

    def describe(self) -> str:
        static_tag = " [static]" if self.is_static else ""
        return f"{self.owner}.{self.name}:{self.descriptor}{static_tag}"


@dataclass(frozen=True)
class MethodEntity:
    owner:        str
    name:         str
    descriptor:   str
    access:       int = 0
    instructions: tuple[InstructionEntity, ...] = ()

    @property
    def return_type(self) -> str:
        return d.method_return_type(self.descriptor)

    @property
    def arguments(self) -> tuple[str, ...]:
        return d.method_arguments(self.descriptor)

    @property
    def is_constructor(self) -> bool:
        return self.name == d.CONSTRUCTOR_NAME

    @property
    def is_class_initializer(self) -> bool:
        return self.name == d.CLASS_INITIALIZER_NAME

    @property
    def is_static(self) -> bool:
        return bool(self.access & d.ACC_STATIC)

    @property
    def is_abstract(self) -> bool:
        return bool(self.access & d.ACC_ABSTRACT)

    def describe(self) -> str:
        static_tag = " [static]" if self.is_static else ""
        return f"{self.owner}.{self.name}{self.descriptor}{static_tag}"


@dataclass(frozen=True)
class ClassEntity:
    name:       str
    super_name: str = "java/lang/Object"
    interfaces: tuple[str, ...] = ()
    access:     int = d.ACC_PUBLIC
    fields:     tuple[FieldEntity, ...] = ()
    methods:    tuple[MethodEntity, ...] = ()

    @property
    def type(self) -> str:
        return d.object_type(self.name)

    @property
    def super_type(self) -> str:
        return d.object_type(self.super_name)

    @property
    def interface_types(self) -> tuple[str, ...]:
        return tuple(d.object_type(i) for i in self.interfaces)

    @property
    def is_interface(self) -> bool:
        return bool(self.access & d.ACC_INTERFACE)

    @property
    def is_abstract(self) -> bool:
        return bool(self.access & d.ACC_ABSTRACT)

    @property
    def instance_fields(self) -> tuple[FieldEntity, ...]:
        return tuple(f for f in self.fields if not f.is_static)

    @property
    def static_fields(self) -> tuple[FieldEntity, ...]:
        return tuple(f for f in self.fields if f.is_static)

    @property
    def constructors(self) -> tuple[MethodEntity, ...]:
        return tuple(m for m in self.methods if m.is_constructor)

    @property
    def instance_methods(self) -> tuple[MethodEntity, ...]:
        """Non-static methods, excluding constructors."""
        return tuple(
            m for m in self.methods
            if not m.is_static and not m.is_constructor and not m.is_class_initializer
        )

    @property
    def static_methods(self) -> tuple[MethodEntity, ...]:
        """Static methods, excluding the class initializer."""
        return tuple(
            m for m in self.methods if m.is_static and not m.is_class_initializer
        )

    def describe(self) -> str:
        return f"{self.name} extends {self.super_name}"

    def __str__(self) -> str:
        return (
            f"ClassEntity({self.name} : {self.super_name}, "
            f"{len(self.fields)} fields, {len(self.methods)} methods)"
        )


Entity = Union[ClassEntity, FieldEntity, MethodEntity, InstructionEntity]


@dataclass(frozen=True)
class EntityModel:
    """
    Canonical, read-only output of the external artifact parser.

    Built once per run (normally via hookmap.model.loader.load_model) and
    shared by every mapper evaluation.  Nothing in the resolution pass
    mutates it.
    """
    classes:  tuple[ClassEntity, ...] = ()
    revision: str = ""
    _by_name: dict[str, ClassEntity] = field(default_factory=dict, init=False,
                                             repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "classes", tuple(self.classes))
        object.__setattr__(self, "_by_name", {c.name: c for c in self.classes})

    def __iter__(self) -> Iterator[ClassEntity]:
        return iter(self.classes)

    def __len__(self) -> int:
        return len(self.classes)

    # ── Lookups ───────────────────────────────────────────────────────────────

    def find_class(self, name: str) -> Optional[ClassEntity]:
        return self._by_name.get(name)

    def find_field(self, owner: str, name: str,
                   descriptor: Optional[str] = None) -> Optional[FieldEntity]:
        cls = self._by_name.get(owner)
        if cls is None:
            return None
        for f in cls.fields:
            if f.name == name and (descriptor is None or f.descriptor == descriptor):
                return f
        return None

    def find_method(self, owner: str, name: str, descriptor: str) -> Optional[MethodEntity]:
        cls = self._by_name.get(owner)
        if cls is None:
            return None
        for m in cls.methods:
            if m.name == name and m.descriptor == descriptor:
                return m
        return None

    def field_of(self, insn: InstructionEntity) -> Optional[FieldEntity]:
        """
        The field an instruction reads or writes.

        Walks up the super-class chain, since a PUTFIELD may name a
        subclass as owner for a field declared in a parent.
        """
        if not insn.is_field:
            return None
        owner = insn.field_owner
        seen: set[str] = set()
        while owner and owner not in seen:
            seen.add(owner)
            found = self.find_field(owner, insn.field_name, insn.field_descriptor)
            if found is not None:
                return found
            cls = self._by_name.get(owner)
            owner = cls.super_name if cls else None
        return None

    def method_of(self, insn: InstructionEntity) -> Optional[MethodEntity]:
        """The method an invoke instruction calls, searching super classes."""
        if not insn.is_method_call:
            return None
        owner = insn.method_owner
        seen: set[str] = set()
        while owner and owner not in seen:
            seen.add(owner)
            found = self.find_method(owner, insn.method_name, insn.invoked_descriptor)
            if found is not None:
                return found
            cls = self._by_name.get(owner)
            owner = cls.super_name if cls else None
        return None

    # ── Serialisation ─────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "revision": self.revision,
            "classes":  [_class_to_dict(c) for c in self.classes],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def __str__(self) -> str:
        rev = f" rev {self.revision}" if self.revision else ""
        return f"EntityModel({len(self.classes)} classes{rev})"


# ── to_dict helpers (inverse of loader._parse_*) ──────────────────────────────

def _insn_to_dict(insn: InstructionEntity) -> dict:
    out: dict = {"opcode": insn.opcode}
    if insn.int_operand is not None:
        out["int"] = insn.int_operand
    if insn.constant is not None:
        out["constant"] = insn.constant
    if insn.field_name is not None:
        out["field"] = {
            "owner":      insn.field_owner,
            "name":       insn.field_name,
            "descriptor": insn.field_descriptor,
        }
    if insn.method_name is not None:
        out["method"] = {
            "owner":      insn.method_owner,
            "name":       insn.method_name,
            "descriptor": insn.invoked_descriptor,
        }
    if insn.type_operand is not None:
        out["type"] = insn.type_operand
    return out


def _class_to_dict(cls: ClassEntity) -> dict:
    return {
        "name":       cls.name,
        "super":      cls.super_name,
        "interfaces": list(cls.interfaces),
        "access":     cls.access,
        "fields": [
            {"name": f.name, "descriptor": f.descriptor, "access": f.access}
            for f in cls.fields
        ],
        "methods": [
            {
                "name":         m.name,
                "descriptor":   m.descriptor,
                "access":       m.access,
                "instructions": [_insn_to_dict(i) for i in m.instructions],
            }
            for m in cls.methods
        ],
    }
