"""
Unit tests for hookmap/resolver/

Coverage plan
─────────────
factory.py   → kind → resolver mapping
identity.py  → unique / no match / ambiguous
order.py     → positional selection, grouped order, range and group errors
scope.py     → candidate order across constructors, method bodies
base.py      → instruction → field / method binding, unbound targets
"""

import pytest

PUTFIELD  = 181
PUTSTATIC = 179
ICONST_1  = 4
RETURN    = 177
INVOKEVIRTUAL = 182


def _put(owner, name, desc, opcode=PUTFIELD):
    return {"opcode": opcode, "field": {"owner": owner, "name": name, "descriptor": desc}}


@pytest.fixture
def flags_model():
    """
    Class ``k`` with three boolean fields written in its constructor, a
    static boolean written on ``cfg`` in between, and a second constructor
    writing one int.
    """
    from hookmap.model import model_from_dict
    return model_from_dict({"classes": [
        {"name": "cfg", "fields": [{"name": "on", "descriptor": "Z", "access": 0x0008}]},
        {
            "name": "k",
            "fields": [
                {"name": "b0", "descriptor": "Z"},
                {"name": "b1", "descriptor": "Z"},
                {"name": "b2", "descriptor": "Z"},
                {"name": "n", "descriptor": "I"},
                {"name": "s", "descriptor": "Ljava/lang/String;"},
            ],
            "methods": [
                {"name": "<init>", "descriptor": "()V", "instructions": [
                    {"opcode": ICONST_1},
                    _put("k", "b0", "Z"),
                    _put("k", "b1", "Z"),
                    _put("cfg", "on", "Z", PUTSTATIC),
                    _put("k", "b2", "Z"),
                    _put("java/lang/Thread", "daemon", "Z"),
                    {"opcode": RETURN},
                ]},
                {"name": "<init>", "descriptor": "(I)V", "instructions": [
                    _put("k", "n", "I"),
                    {"opcode": RETURN},
                ]},
                {"name": "run", "descriptor": "()V", "instructions": [
                    {"opcode": INVOKEVIRTUAL,
                     "method": {"owner": "k", "name": "tick", "descriptor": "()V"}},
                    {"opcode": INVOKEVIRTUAL,
                     "method": {"owner": "java/lang/Object", "name": "notify",
                                "descriptor": "()V"}},
                ]},
                {"name": "tick", "descriptor": "()V"},
            ],
        },
    ]})


@pytest.fixture
def table(flags_model):
    """Mapping table with class K and method K.run resolved."""
    from hookmap.resolver import Outcome
    from hookmap.table import MappingTable
    t = MappingTable()
    t.record(Outcome.resolved("K", flags_model.find_class("k")))
    t.record(Outcome.resolved("K.run", flags_model.find_method("k", "run", "()V")))
    return t


def _run(spec, model, table):
    from hookmap.resolver import get_resolver
    return get_resolver(spec.kind).resolve(spec, model, table)


def _own_bool_writes():
    from hookmap.predicates import field_owner_is, field_write
    return field_write("Z") & field_owner_is("Lk;")


# ─────────────────────────────────────────────────────────────────────────────
# 1. Factory
# ─────────────────────────────────────────────────────────────────────────────

class TestFactory:

    def test_identity_kind(self):
        from hookmap.mapper import MapperKind
        from hookmap.resolver import IdentityResolver, get_resolver
        resolver = get_resolver(MapperKind.IDENTITY)
        assert isinstance(resolver, IdentityResolver)
        assert resolver.strategy == MapperKind.IDENTITY

    def test_order_kind_by_value(self):
        from hookmap.resolver import OrderResolver, get_resolver
        assert isinstance(get_resolver("order"), OrderResolver)

    def test_unknown_kind_raises(self):
        from hookmap.exceptions import ConfigurationError
        from hookmap.resolver import get_resolver
        with pytest.raises(ConfigurationError):
            get_resolver("fuzzy")


# ─────────────────────────────────────────────────────────────────────────────
# 2. Identity
# ─────────────────────────────────────────────────────────────────────────────

class TestIdentityResolver:

    def test_unique_match_resolves(self, flags_model, table):
        from hookmap.mapper import instance_field
        from hookmap.predicates import of_type
        outcome = _run(instance_field("K", "name", of_type("Ljava/lang/String;")),
                       flags_model, table)
        assert outcome.is_resolved
        assert outcome.entity == flags_model.find_field("k", "s")

    def test_no_match_fails(self, flags_model, table):
        from hookmap.mapper import instance_field
        from hookmap.predicates import of_type
        from hookmap.resolver import FailureKind, MapperStatus
        outcome = _run(instance_field("K", "cost", of_type("J")), flags_model, table)
        assert outcome.status == MapperStatus.FAILED
        assert outcome.failure.kind == FailureKind.NO_MATCH
        assert outcome.failure.predicate == "type is J"
        assert outcome.failure.scope == "instance fields of <K>"

    def test_ambiguous_match_lists_candidates(self, flags_model, table):
        from hookmap.mapper import instance_field
        from hookmap.predicates import of_type
        from hookmap.resolver import FailureKind
        outcome = _run(instance_field("K", "flag", of_type("Z")), flags_model, table)
        assert outcome.failure.kind == FailureKind.AMBIGUOUS_MATCH
        assert outcome.failure.match_count == 3
        assert outcome.failure.candidates == ("k.b0:Z", "k.b1:Z", "k.b2:Z")

    def test_class_mapper_over_all_classes(self, flags_model, table):
        from hookmap.mapper import class_mapper
        from hookmap.predicates import has_instance_field
        outcome = _run(class_mapper("Flags", has_instance_field("Z")), flags_model, table)
        assert outcome.entity.name == "k"


# ─────────────────────────────────────────────────────────────────────────────
# 3. Order
# ─────────────────────────────────────────────────────────────────────────────

class TestOrderResolver:

    def test_ungrouped_index_selects_nth_write(self, flags_model, table):
        from hookmap.mapper import constructor_field
        outcome = _run(constructor_field("K", "x", _own_bool_writes(), 1), flags_model, table)
        assert outcome.entity.name == "b1"

    def test_three_boolean_writes_grouped_and_ungrouped(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.predicates import field_write, predicate_of
        first_pair = _own_bool_writes() & predicate_of(
            "before the static write", lambda i: i.index < 3,
        )
        a = _run(constructor_field("K", "a", first_pair, 0, group_size=2), flags_model, table)
        b = _run(constructor_field("K", "b", first_pair, 1, group_size=2), flags_model, table)
        third = _run(constructor_field("K", "c", field_write("Z"), 2), flags_model, table)
        assert a.entity.name == "b0"
        assert b.entity.name == "b1"
        # third boolean write overall is the static cfg.on
        assert (third.entity.owner, third.entity.name) == ("cfg", "on")

    def test_group_mismatch_is_a_configuration_failure(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.resolver import FailureKind
        outcome = _run(constructor_field("K", "x", _own_bool_writes(), 0, group_size=2),
                       flags_model, table)
        failure = outcome.failure
        assert failure.kind == FailureKind.GROUP_MISMATCH
        assert (failure.sequence_length, failure.index, failure.group_size) == (3, 0, 2)

    def test_group_of_three_divides(self, flags_model, table):
        from hookmap.mapper import constructor_field
        outcome = _run(constructor_field("K", "x", _own_bool_writes(), 2, group_size=3),
                       flags_model, table)
        assert outcome.entity.name == "b2"

    def test_index_out_of_range(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.resolver import FailureKind
        outcome = _run(constructor_field("K", "x", _own_bool_writes(), 3), flags_model, table)
        assert outcome.failure.kind == FailureKind.ORDER_OUT_OF_RANGE
        assert outcome.failure.sequence_length == 3
        assert "index 3" in outcome.failure.detail

    def test_negative_index_out_of_range(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.resolver import FailureKind
        outcome = _run(constructor_field("K", "x", _own_bool_writes(), -1), flags_model, table)
        assert outcome.failure.kind == FailureKind.ORDER_OUT_OF_RANGE

    def test_empty_sequence_out_of_range(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.predicates import field_write
        from hookmap.resolver import FailureKind
        outcome = _run(constructor_field("K", "x", field_write("J"), 0), flags_model, table)
        assert outcome.failure.kind == FailureKind.ORDER_OUT_OF_RANGE
        assert outcome.failure.sequence_length == 0


# ─────────────────────────────────────────────────────────────────────────────
# 4. Scope enumeration & binding
# ─────────────────────────────────────────────────────────────────────────────

class TestScopeAndBinding:

    def test_constructors_concatenated_in_declaration_order(self, flags_model, table):
        from hookmap.mapper import Scope
        from hookmap.resolver import scope_candidates
        pool = scope_candidates(Scope.in_constructor("K"), flags_model, table)
        assert [(i.method_descriptor, i.index) for i in pool][-2:] == [("(I)V", 0), ("(I)V", 1)]
        assert len(pool) == 9

    def test_scope_owner_must_be_a_class(self, flags_model, table):
        from hookmap.exceptions import ConfigurationError
        from hookmap.mapper import Scope
        from hookmap.resolver import scope_candidates
        with pytest.raises(ConfigurationError, match="bind a class"):
            scope_candidates(Scope.instance_fields("K.run"), flags_model, table)

    def test_unbound_field_target(self, flags_model, table):
        from hookmap.mapper import constructor_field
        from hookmap.predicates import field_write
        from hookmap.resolver import FailureKind
        # 5th boolean write targets java/lang/Thread, absent from the model
        outcome = _run(constructor_field("K", "x", field_write("Z"), 4), flags_model, table)
        assert outcome.failure.kind == FailureKind.UNBOUND_TARGET

    def test_method_invocation_binds_called_method(self, flags_model, table):
        from hookmap.mapper import method_invocation
        from hookmap.predicates import opcode_is
        outcome = _run(method_invocation("K.run", "K", "tick", opcode_is(INVOKEVIRTUAL), 0),
                       flags_model, table)
        assert outcome.entity == flags_model.find_method("k", "tick", "()V")

    def test_invocation_of_library_method_is_unbound(self, flags_model, table):
        from hookmap.mapper import method_invocation
        from hookmap.predicates import opcode_is
        from hookmap.resolver import FailureKind
        outcome = _run(method_invocation("K.run", "K", "notify", opcode_is(INVOKEVIRTUAL), 1),
                       flags_model, table)
        assert outcome.failure.kind == FailureKind.UNBOUND_TARGET

    def test_instruction_target_keeps_instruction(self, flags_model, table):
        from hookmap.mapper import MapperKind, MapperSpec, OrderKey, Scope, Target
        from hookmap.model import InstructionEntity
        from hookmap.predicates import opcode_is
        spec = MapperSpec("K.runTick", MapperKind.ORDER, opcode_is(INVOKEVIRTUAL),
                          Scope.in_method("K.run"), order_key=OrderKey(0),
                          target=Target.INSTRUCTION)
        outcome = _run(spec, flags_model, table)
        assert isinstance(outcome.entity, InstructionEntity)
        assert outcome.entity.index == 0


# ─────────────────────────────────────────────────────────────────────────────
# 5. Outcome serialisation
# ─────────────────────────────────────────────────────────────────────────────

class TestOutcome:

    def test_resolved_to_dict(self, flags_model):
        from hookmap.resolver import Outcome
        d = Outcome.resolved("K", flags_model.find_class("k")).to_dict()
        assert d == {"name": "K", "status": "resolved",
                     "entity": {"kind": "class", "name": "k"}}

    def test_skipped_names_dependencies(self):
        from hookmap.resolver import FailureKind, MapperStatus, Outcome
        outcome = Outcome.skipped("K.a", ["K"])
        assert outcome.status == MapperStatus.SKIPPED
        assert outcome.failure.kind == FailureKind.UNRESOLVED_DEPENDENCY
        assert outcome.failure.dependencies == ("K",)
        assert outcome.to_dict()["failure"]["dependencies"] == ["K"]
