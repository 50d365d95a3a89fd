"""
Shared fixtures: a small synthetic obfuscated artifact.

Obfuscated name → semantic class
────────────────────────────────
gm → Node        fa → DualNode     hx → Entity
du → Model       kb → Buffer       jv → ItemDefinition
client           unrelated class with static members only
"""

import json

import pytest

ACC_PUBLIC   = 0x0001
ACC_STATIC   = 0x0008
ACC_ABSTRACT = 0x0400

ALOAD    = 25
ICONST_0 = 3
BIPUSH   = 16
RETURN   = 177
GETFIELD = 180
PUTFIELD = 181

# Obfuscated int field names of jv, in constructor assignment order
ITEM_INT_FIELDS = [f"i{n:02d}" for n in range(33)]


def _putfield(owner: str, name: str, desc: str) -> dict:
    return {"opcode": PUTFIELD, "field": {"owner": owner, "name": name, "descriptor": desc}}


def _item_constructor() -> list[dict]:
    insns = [{"opcode": ALOAD}]
    insns.append(_putfield("jv", "ak", "[Ljava/lang/String;"))
    insns.append(_putfield("jv", "au", "[Ljava/lang/String;"))
    insns.append({"opcode": ICONST_0})
    insns.append(_putfield("jv", "ao", "Z"))
    insns.append(_putfield("jv", "ap", "Z"))
    for name in ITEM_INT_FIELDS:
        insns.append({"opcode": ICONST_0})
        insns.append(_putfield("jv", name, "I"))
    insns.append({"opcode": RETURN})
    return insns


def gamepack_dict() -> dict:
    """Fresh copy of the synthetic artifact in entity model JSON form."""
    return {
        "revision": "181",
        "classes": [
            {
                "name": "client",
                "fields": [{"name": "qa", "descriptor": "I", "access": ACC_STATIC}],
                "methods": [
                    {"name": "<init>", "descriptor": "()V",
                     "instructions": [{"opcode": RETURN}]},
                ],
            },
            {
                "name": "gm",
                "fields": [
                    {"name": "cl", "descriptor": "Lgm;"},
                    {"name": "cv", "descriptor": "Lgm;"},
                    {"name": "dk", "descriptor": "J"},
                ],
            },
            {
                "name": "fa",
                "super": "gm",
                "fields": [
                    {"name": "cq", "descriptor": "Lfa;"},
                    {"name": "cs", "descriptor": "Lfa;"},
                ],
            },
            {
                "name": "hx",
                "super": "fa",
                "access": ACC_PUBLIC | ACC_ABSTRACT,
                "fields": [{"name": "cf", "descriptor": "I"}],
            },
            {
                "name": "du",
                "super": "hx",
                "fields": [
                    {"name": "a", "descriptor": "[I"},
                    {"name": "b", "descriptor": "[I"},
                ],
            },
            {
                "name": "kb",
                "super": "gm",
                "fields": [
                    {"name": "ae", "descriptor": "[B"},
                    {"name": "ad", "descriptor": "I"},
                ],
            },
            {
                "name": "jv",
                "super": "fa",
                "fields": (
                    [{"name": n, "descriptor": "[S"} for n in ("ah", "aq", "ar", "ay")]
                    + [{"name": "ak", "descriptor": "[Ljava/lang/String;"},
                       {"name": "au", "descriptor": "[Ljava/lang/String;"},
                       {"name": "an", "descriptor": "Ljava/lang/String;"},
                       {"name": "ao", "descriptor": "Z"},
                       {"name": "ap", "descriptor": "Z"}]
                    + [{"name": n, "descriptor": "I"} for n in ITEM_INT_FIELDS]
                ),
                "methods": [
                    {"name": "<init>", "descriptor": "()V",
                     "instructions": _item_constructor()},
                    {"name": "by", "descriptor": "(I)Ldu;",
                     "instructions": [{"opcode": ALOAD}, {"opcode": 176}]},
                    {"name": "c", "descriptor": "(Lkb;)V",
                     "instructions": [
                         {"opcode": ALOAD},
                         {"opcode": BIPUSH, "int": 12},
                         {"opcode": RETURN},
                     ]},
                    {"name": "d", "descriptor": "(Lkb;I)V",
                     "instructions": [
                         {"opcode": ALOAD},
                         {"opcode": BIPUSH, "int": 16},
                         {"opcode": GETFIELD,
                          "field": {"owner": "jv", "name": "an",
                                    "descriptor": "Ljava/lang/String;"}},
                         {"opcode": RETURN},
                     ]},
                ],
            },
        ],
    }


@pytest.fixture
def gamepack() -> dict:
    return gamepack_dict()


@pytest.fixture
def model(gamepack):
    from hookmap.model import model_from_dict
    return model_from_dict(gamepack)


@pytest.fixture
def model_file(tmp_path, gamepack):
    path = tmp_path / "gamepack.json"
    path.write_text(json.dumps(gamepack), encoding="utf-8")
    return path
