"""
Unit tests for hookmap/model/

Coverage plan
─────────────
descriptors.py → object/array descriptors, method descriptor parsing
models.py      → entity properties, member partitions, super-chain lookups
loader.py      → JSON loading, validation errors, artifact hash
"""

import json

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# 1. Descriptors
# ─────────────────────────────────────────────────────────────────────────────

class TestDescriptors:

    def test_object_type_wraps_internal_name(self):
        from hookmap.model.descriptors import object_type
        assert object_type("xk") == "Lxk;"

    def test_array_of_adds_dimensions(self):
        from hookmap.model.descriptors import array_dimensions, array_of, element_type
        desc = array_of("I", 2)
        assert desc == "[[I"
        assert array_dimensions(desc) == 2
        assert element_type(desc) == "I"

    def test_method_arguments_split(self):
        from hookmap.model.descriptors import method_arguments, method_return_type
        assert method_arguments("(Lxk;I[[JLjava/lang/String;)V") == (
            "Lxk;", "I", "[[J", "Ljava/lang/String;",
        )
        assert method_return_type("(Lxk;I)[B") == "[B"

    def test_no_argument_method(self):
        from hookmap.model.descriptors import method_arguments
        assert method_arguments("()V") == ()

    def test_malformed_method_descriptor_raises(self):
        from hookmap.model.descriptors import method_arguments
        with pytest.raises(ValueError):
            method_arguments("(Lxk)V")

    @pytest.mark.parametrize("desc,ok", [
        ("I", True), ("[Lxk;", True), ("V", False), ("Lxk", False), ("II", False),
    ])
    def test_field_descriptor_validation(self, desc, ok):
        from hookmap.model.descriptors import is_field_descriptor
        assert is_field_descriptor(desc) is ok


# ─────────────────────────────────────────────────────────────────────────────
# 2. Entities
# ─────────────────────────────────────────────────────────────────────────────

class TestEntities:

    def test_class_partitions_members(self, model):
        jv = model.find_class("jv")
        assert [m.name for m in jv.constructors] == ["<init>"]
        assert [m.name for m in jv.instance_methods] == ["by", "c", "d"]
        assert jv.static_methods == ()

    def test_static_fields_are_separated(self, model):
        client = model.find_class("client")
        assert [f.name for f in client.static_fields] == ["qa"]
        assert client.instance_fields == ()

    def test_class_types(self, model):
        fa = model.find_class("fa")
        assert fa.type == "Lfa;"
        assert fa.super_type == "Lgm;"

    def test_abstract_flag(self, model):
        assert model.find_class("hx").is_abstract
        assert not model.find_class("du").is_abstract

    def test_method_signature_properties(self, model):
        by = model.find_method("jv", "by", "(I)Ldu;")
        assert by.return_type == "Ldu;"
        assert by.arguments == ("I",)
        assert not by.is_constructor

    def test_instruction_field_properties(self, model):
        ctor = model.find_method("jv", "<init>", "()V")
        put = ctor.instructions[1]
        assert put.is_field and put.is_field_write
        assert put.field_type == "[Ljava/lang/String;"
        assert put.index == 1

    def test_entities_compare_by_value(self, gamepack):
        from hookmap.model import model_from_dict
        a = model_from_dict(gamepack).find_field("jv", "an")
        b = model_from_dict(gamepack).find_field("jv", "an")
        assert a == b
        assert hash(a) == hash(b)


# ─────────────────────────────────────────────────────────────────────────────
# 3. EntityModel lookups
# ─────────────────────────────────────────────────────────────────────────────

class TestEntityModelLookups:

    def test_model_is_read_only(self, model):
        import dataclasses
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.revision = "182"
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.classes = ()

    def test_find_unknown_class_returns_none(self, model):
        assert model.find_class("zz") is None
        assert model.find_field("zz", "a") is None

    def test_field_of_resolves_put_instruction(self, model):
        ctor = model.find_method("jv", "<init>", "()V")
        field = model.field_of(ctor.instructions[1])
        assert (field.owner, field.name) == ("jv", "ak")

    def test_field_of_walks_super_chain(self):
        from hookmap.model import model_from_dict
        m = model_from_dict({"classes": [
            {"name": "a", "fields": [{"name": "f", "descriptor": "I"}]},
            {"name": "b", "super": "a", "methods": [
                {"name": "<init>", "descriptor": "()V", "instructions": [
                    {"opcode": 181, "field": {"owner": "b", "name": "f", "descriptor": "I"}},
                ]},
            ]},
        ]})
        insn = m.find_method("b", "<init>", "()V").instructions[0]
        assert m.field_of(insn).owner == "a"

    def test_field_of_non_field_instruction_is_none(self, model):
        ctor = model.find_method("jv", "<init>", "()V")
        assert model.field_of(ctor.instructions[0]) is None

    def test_method_of_library_call_is_none(self):
        from hookmap.model import model_from_dict
        m = model_from_dict({"classes": [
            {"name": "a", "methods": [
                {"name": "x", "descriptor": "()V", "instructions": [
                    {"opcode": 182, "method": {"owner": "java/lang/Object",
                                               "name": "hashCode", "descriptor": "()I"}},
                ]},
            ]},
        ]})
        insn = m.find_method("a", "x", "()V").instructions[0]
        assert insn.is_method_call
        assert m.method_of(insn) is None

    def test_to_dict_round_trips_through_loader(self, model):
        from hookmap.model import model_from_dict
        assert model_from_dict(json.loads(model.to_json())) == model


# ─────────────────────────────────────────────────────────────────────────────
# 4. Loader
# ─────────────────────────────────────────────────────────────────────────────

class TestLoader:

    def test_load_model_from_file(self, model_file):
        from hookmap.model import load_model
        m = load_model(model_file)
        assert m.revision == "181"
        assert len(m) == 7

    def test_missing_file_raises_model_error(self, tmp_path):
        from hookmap.exceptions import ModelError
        from hookmap.model import load_model
        with pytest.raises(ModelError, match="not found"):
            load_model(tmp_path / "nope.json")

    def test_invalid_json_raises_model_error(self, tmp_path):
        from hookmap.exceptions import ModelError
        from hookmap.model import load_model
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(ModelError, match="not valid JSON"):
            load_model(bad)

    def test_missing_classes_list(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="classes"):
            model_from_dict({"revision": "1"})

    def test_duplicate_class_rejected(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="Duplicate class"):
            model_from_dict({"classes": [{"name": "a"}, {"name": "a"}]})

    def test_malformed_field_descriptor_rejected(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="a.f"):
            model_from_dict({"classes": [
                {"name": "a", "fields": [{"name": "f", "descriptor": "Q"}]},
            ]})

    def test_field_instruction_without_reference_rejected(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="lacks a 'field' reference"):
            model_from_dict({"classes": [
                {"name": "a", "methods": [
                    {"name": "m", "descriptor": "()V", "instructions": [{"opcode": 181}]},
                ]},
            ]})

    def test_invalid_opcode_rejected(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="invalid opcode"):
            model_from_dict({"classes": [
                {"name": "a", "methods": [
                    {"name": "m", "descriptor": "()V", "instructions": [{"opcode": 300}]},
                ]},
            ]})

    @pytest.mark.parametrize("key", ["fields", "methods", "interfaces"])
    def test_non_list_member_collection_rejected(self, key):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match=f"'{key}' must be a list"):
            model_from_dict({"classes": [{"name": "a", key: None}]})

    def test_non_list_instructions_rejected(self):
        from hookmap.exceptions import ModelError
        from hookmap.model import model_from_dict
        with pytest.raises(ModelError, match="'instructions' must be a list"):
            model_from_dict({"classes": [
                {"name": "a", "methods": [
                    {"name": "m", "descriptor": "()V", "instructions": {"opcode": 177}},
                ]},
            ]})

    def test_absent_member_collections_default_to_empty(self):
        from hookmap.model import model_from_dict
        m = model_from_dict({"classes": [{"name": "a"}]})
        cls = m.find_class("a")
        assert cls.fields == ()
        assert cls.methods == ()

    def test_artifact_hash_is_stable(self, model_file):
        from hookmap.model import artifact_hash
        h = artifact_hash(model_file)
        assert len(h) == 16
        assert h == artifact_hash(model_file)
