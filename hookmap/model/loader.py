"""
Entity model loader — reads the external parser's JSON output.

Workflow:
  1. Read the JSON document (file path or already-decoded dict)
  2. Validate every class / field / method / instruction record
  3. Build the frozen entity tree and wrap it in an EntityModel

A malformed record is an unrecoverable structural input error: the loader
raises ModelError naming the offending class/member rather than skipping
it, so a broken parser output can never produce a silently partial model.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Union

from hookmap.exceptions import ModelError
from . import descriptors as d
from .models import (
    ClassEntity,
    EntityModel,
    FieldEntity,
    InstructionEntity,
    MethodEntity,
)

__all__ = ["load_model", "model_from_dict", "artifact_hash"]

logger = logging.getLogger(__name__)


def load_model(path: Union[str, Path]) -> EntityModel:
    """
    Load an EntityModel from a JSON file.

    Raises:
        ModelError: file missing, not JSON, or structurally invalid.
    """
    path = Path(path).expanduser()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ModelError(f"Entity model not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ModelError(f"Entity model is not valid JSON ({path}): {exc}") from exc

    model = model_from_dict(raw)
    logger.info("Loaded %s from %s", model, path)
    return model


def model_from_dict(raw: dict) -> EntityModel:
    """Build an EntityModel from its decoded JSON form."""
    if not isinstance(raw, dict):
        raise ModelError("Entity model root must be a JSON object")
    classes_raw = raw.get("classes")
    if not isinstance(classes_raw, list):
        raise ModelError("Entity model must contain a 'classes' list")

    classes: list[ClassEntity] = []
    seen: set[str] = set()
    for idx, cls_raw in enumerate(classes_raw):
        cls = _parse_class(cls_raw, idx)
        if cls.name in seen:
            raise ModelError(f"Duplicate class in entity model: {cls.name}")
        seen.add(cls.name)
        classes.append(cls)

    return EntityModel(classes=tuple(classes), revision=str(raw.get("revision", "")))


def artifact_hash(path: Union[str, Path]) -> str:
    """Stable cache key for a model file: SHA-256 of its bytes, 16 hex chars."""
    data = Path(path).expanduser().read_bytes()
    return hashlib.sha256(data).hexdigest()[:16]


# ── Record parsers ────────────────────────────────────────────────────────────

def _require(record: dict, key: str, kind: type, where: str):
    value = record.get(key)
    if not isinstance(value, kind):
        raise ModelError(f"{where}: '{key}' must be {kind.__name__}, got {value!r}")
    return value


def _optional_list(record: dict, key: str, where: str) -> list:
    value = record.get(key, [])
    if not isinstance(value, list):
        raise ModelError(f"{where}: '{key}' must be a list, got {value!r}")
    return value


def _parse_class(raw: dict, idx: int) -> ClassEntity:
    if not isinstance(raw, dict):
        raise ModelError(f"classes[{idx}] must be an object")
    name = _require(raw, "name", str, f"classes[{idx}]")
    super_name = raw.get("super") or "java/lang/Object"
    interfaces = _optional_list(raw, "interfaces", name)
    if not all(isinstance(i, str) for i in interfaces):
        raise ModelError(f"{name}: 'interfaces' must be a list of class names")

    fields = tuple(_parse_field(f, name) for f in _optional_list(raw, "fields", name))
    methods = tuple(_parse_method(m, name) for m in _optional_list(raw, "methods", name))
    return ClassEntity(
        name=name,
        super_name=super_name,
        interfaces=tuple(interfaces),
        access=int(raw.get("access", d.ACC_PUBLIC)),
        fields=fields,
        methods=methods,
    )


def _parse_field(raw: dict, owner: str) -> FieldEntity:
    if not isinstance(raw, dict):
        raise ModelError(f"{owner}: field records must be objects")
    name = _require(raw, "name", str, f"{owner} field")
    desc = _require(raw, "descriptor", str, f"{owner}.{name}")
    if not d.is_field_descriptor(desc):
        raise ModelError(f"{owner}.{name}: malformed field descriptor {desc!r}")
    return FieldEntity(owner=owner, name=name, descriptor=desc,
                       access=int(raw.get("access", 0)))


def _parse_method(raw: dict, owner: str) -> MethodEntity:
    if not isinstance(raw, dict):
        raise ModelError(f"{owner}: method records must be objects")
    name = _require(raw, "name", str, f"{owner} method")
    desc = _require(raw, "descriptor", str, f"{owner}.{name}")
    if not d.is_method_descriptor(desc):
        raise ModelError(f"{owner}.{name}: malformed method descriptor {desc!r}")
    where = f"{owner}.{name}{desc}"
    insns = tuple(
        _parse_instruction(i_raw, owner, name, desc, index, where)
        for index, i_raw in enumerate(_optional_list(raw, "instructions", where))
    )
    return MethodEntity(owner=owner, name=name, descriptor=desc,
                        access=int(raw.get("access", 0)), instructions=insns)


def _parse_instruction(raw: dict, owner: str, method: str, method_desc: str,
                       index: int, where: str) -> InstructionEntity:
    if not isinstance(raw, dict):
        raise ModelError(f"{where}: instruction {index} must be an object")
    opcode = raw.get("opcode")
    if not isinstance(opcode, int) or not 0 <= opcode <= 255:
        raise ModelError(f"{where}: instruction {index} has invalid opcode {opcode!r}")

    field_ref = raw.get("field")
    method_ref = raw.get("method")
    if opcode in d.FIELD_OPCODES and not isinstance(field_ref, dict):
        raise ModelError(f"{where}: field instruction {index} lacks a 'field' reference")
    if opcode in d.INVOKE_OPCODES and not isinstance(method_ref, dict):
        raise ModelError(f"{where}: invoke instruction {index} lacks a 'method' reference")

    field_ref = field_ref or {}
    method_ref = method_ref or {}
    return InstructionEntity(
        owner=owner,
        method=method,
        method_descriptor=method_desc,
        index=index,
        opcode=opcode,
        int_operand=raw.get("int"),
        constant=raw.get("constant"),
        field_owner=field_ref.get("owner"),
        field_name=field_ref.get("name"),
        field_descriptor=field_ref.get("descriptor"),
        method_owner=method_ref.get("owner"),
        method_name=method_ref.get("name"),
        invoked_descriptor=method_ref.get("descriptor"),
        type_operand=raw.get("type"),
    )
