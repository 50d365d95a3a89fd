"""
JVM type descriptors, opcodes and access flags.

Predicates compare types by descriptor string, e.g.::

    "I"                   int
    "Z"                   boolean
    "[Ljava/lang/String;" String[]
    "Lxk;"                obfuscated class xk

Only the opcodes predicates actually need are named here; any other opcode
is still carried through the model as its plain integer value.
"""

import re

__all__ = [
    "VOID_TYPE", "BOOLEAN_TYPE", "BYTE_TYPE", "CHAR_TYPE", "SHORT_TYPE",
    "INT_TYPE", "LONG_TYPE", "FLOAT_TYPE", "DOUBLE_TYPE",
    "OBJECT_TYPE", "STRING_TYPE",
    "object_type", "array_of", "element_type", "array_dimensions",
    "method_arguments", "method_return_type",
    "is_method_descriptor", "is_field_descriptor",
    "Opcode", "FIELD_OPCODES", "FIELD_WRITE_OPCODES", "INVOKE_OPCODES",
    "ACC_PUBLIC", "ACC_PRIVATE", "ACC_PROTECTED", "ACC_STATIC", "ACC_FINAL",
    "ACC_INTERFACE", "ACC_ABSTRACT",
    "CONSTRUCTOR_NAME", "CLASS_INITIALIZER_NAME",
]

# ── Descriptors ───────────────────────────────────────────────────────────────

VOID_TYPE    = "V"
BOOLEAN_TYPE = "Z"
BYTE_TYPE    = "B"
CHAR_TYPE    = "C"
SHORT_TYPE   = "S"
INT_TYPE     = "I"
LONG_TYPE    = "J"
FLOAT_TYPE   = "F"
DOUBLE_TYPE  = "D"

OBJECT_TYPE  = "Ljava/lang/Object;"
STRING_TYPE  = "Ljava/lang/String;"

CONSTRUCTOR_NAME       = "<init>"
CLASS_INITIALIZER_NAME = "<clinit>"

# One field descriptor: any number of '[' then a primitive or L...;
_FIELD_DESC_RE = re.compile(r"\[*(?:[ZBCSIJFD]|L[^;]+;)")
_METHOD_DESC_RE = re.compile(r"^\(((?:\[*(?:[ZBCSIJFD]|L[^;]+;))*)\)(\[*(?:[ZBCSIJFDV]|L[^;]+;))$")


def object_type(class_name: str) -> str:
    """Descriptor for an internal class name: ``"xk"`` → ``"Lxk;"``."""
    return f"L{class_name};"


def array_of(descriptor: str, dims: int = 1) -> str:
    return "[" * dims + descriptor


def array_dimensions(descriptor: str) -> int:
    return len(descriptor) - len(descriptor.lstrip("["))


def element_type(descriptor: str) -> str:
    """Strip all array dimensions: ``"[[I"`` → ``"I"``."""
    return descriptor.lstrip("[")


def method_arguments(descriptor: str) -> tuple[str, ...]:
    """
    Split a method descriptor into its argument descriptors.

    ``"(Lxk;I)V"`` → ``("Lxk;", "I")``

    Raises:
        ValueError: descriptor is not a well-formed method descriptor.
    """
    match = _METHOD_DESC_RE.match(descriptor)
    if not match:
        raise ValueError(f"Malformed method descriptor: {descriptor!r}")
    return tuple(_FIELD_DESC_RE.findall(match.group(1)))


def method_return_type(descriptor: str) -> str:
    match = _METHOD_DESC_RE.match(descriptor)
    if not match:
        raise ValueError(f"Malformed method descriptor: {descriptor!r}")
    return match.group(2)


def is_method_descriptor(descriptor: str) -> bool:
    return bool(_METHOD_DESC_RE.match(descriptor))


def is_field_descriptor(descriptor: str) -> bool:
    return bool(_FIELD_DESC_RE.fullmatch(descriptor))


# ── Opcodes ───────────────────────────────────────────────────────────────────

class Opcode:
    """Subset of JVM opcodes referenced by mapper predicates."""
    ACONST_NULL     = 1
    ICONST_M1       = 2
    ICONST_0        = 3
    ICONST_1        = 4
    ICONST_5        = 8
    BIPUSH          = 16
    SIPUSH          = 17
    LDC             = 18
    ILOAD           = 21
    ALOAD           = 25
    ISTORE          = 54
    ASTORE          = 58
    IADD            = 96
    IRETURN         = 172
    ARETURN         = 176
    RETURN          = 177
    GETSTATIC       = 178
    PUTSTATIC       = 179
    GETFIELD        = 180
    PUTFIELD        = 181
    INVOKEVIRTUAL   = 182
    INVOKESPECIAL   = 183
    INVOKESTATIC    = 184
    INVOKEINTERFACE = 185
    NEW             = 187
    NEWARRAY        = 188
    ANEWARRAY       = 189
    CHECKCAST       = 192
    INSTANCEOF      = 193


FIELD_OPCODES = frozenset({
    Opcode.GETSTATIC, Opcode.PUTSTATIC, Opcode.GETFIELD, Opcode.PUTFIELD,
})
FIELD_WRITE_OPCODES = frozenset({Opcode.PUTSTATIC, Opcode.PUTFIELD})
INVOKE_OPCODES = frozenset({
    Opcode.INVOKEVIRTUAL, Opcode.INVOKESPECIAL,
    Opcode.INVOKESTATIC, Opcode.INVOKEINTERFACE,
})

# ── Access flags ──────────────────────────────────────────────────────────────

ACC_PUBLIC    = 0x0001
ACC_PRIVATE   = 0x0002
ACC_PROTECTED = 0x0004
ACC_STATIC    = 0x0008
ACC_FINAL     = 0x0010
ACC_INTERFACE = 0x0200
ACC_ABSTRACT  = 0x0400
