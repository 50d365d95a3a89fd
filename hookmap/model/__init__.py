"""
Entity model — read-only classes / fields / methods / instructions of one
artifact, as produced by the external parser.
"""

from .loader import artifact_hash, load_model, model_from_dict
from .models import (
    ClassEntity,
    Entity,
    EntityModel,
    FieldEntity,
    InstructionEntity,
    MethodEntity,
)

__all__ = [
    "ClassEntity",
    "Entity",
    "EntityModel",
    "FieldEntity",
    "InstructionEntity",
    "MethodEntity",
    "artifact_hash",
    "load_model",
    "model_from_dict",
]
