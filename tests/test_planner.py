"""Tests for serialization planning against a mocked serializer."""

from unittest.mock import MagicMock

import pytest

pytestmark = pytest.mark.unit

from encodable.planning import (
    DetailedInclude,
    ManyInclude,
    Planner,
    SingleInclude,
    apply_renames,
    parse_include,
)
from tests.models import Admin, Authorization, Person, Widget


@pytest.fixture
def raw_serializer():
    """Serializer stub returning a fixed mapping."""
    return MagicMock(return_value={"id": 1, "login": "flipsasser"})


@pytest.fixture
def planner(encoder, raw_serializer):
    return Planner(encoder.store, encoder.adapter, raw_serializer)


def planned_options(raw_serializer):
    args, _ = raw_serializer.call_args
    return args[1]


class TestPassthrough:
    """Tests for calls that leave options untouched."""

    def test_only_bypasses_declarations(self, encoder, planner, raw_serializer):
        """Test that only is handed over exactly as given."""
        encoder.declare_encodable(Person, "login", {"id": "identifier"})
        encoder.declare_unencodable(Person, "email")
        person = Person()
        options = {"only": ["login"]}

        result = planner.serialize(person, options)

        raw_serializer.assert_called_once_with(person, options)
        assert result == {"id": 1, "login": "flipsasser"}

    def test_plan_is_none_for_only(self, planner):
        assert planner.plan(Person(), {"only": "login"}) is None

    def test_no_declarations(self, planner, raw_serializer):
        """Test that an undeclared model gets empty options."""
        planner.serialize(Person(), {})
        assert planned_options(raw_serializer) == {"except": set(), "include": {}, "methods": []}

    def test_other_options_pass_through(self, planner, raw_serializer):
        planner.serialize(Person(), {"root": True})
        assert planned_options(raw_serializer)["root"] is True

    def test_caller_options_not_mutated(self, encoder, planner):
        encoder.declare_unencodable(Person, "email")
        options = {"except": ["login"], "include": "authorizations"}
        planner.plan(Person(), options)
        assert options == {"except": ["login"], "include": "authorizations"}


class TestExcept:
    """Tests for exclusion handling."""

    def test_blacklist_added_to_except(self, encoder, planner):
        encoder.declare_unencodable(Person, "email", "encrypted_password")
        plan = planner.plan(Person(), {"except": "login"})
        assert plan.except_ == {"email", "encrypted_password", "login"}

    def test_whitelist_seeds_except(self, encoder, planner):
        encoder.declare_encodable(Widget, "a")
        plan = planner.plan(Widget(), None)
        assert plan.except_ == {"b", "c"}

    def test_propagated_except_drops_default_attributes(self, encoder, planner):
        """Test that the caller's exclusions reach includes minus default names."""
        encoder.declare_encodable(Person, "authorizations", "login")

        plan = planner.plan(Person(), {"except": ["login", "secret"]})

        assert plan.include == {"authorizations": {"except": {"secret"}}}
        assert {"login", "secret"} <= plan.except_

    def test_seeded_blacklist_not_propagated(self, encoder, planner):
        """Test that declared exclusions never reach included associations."""
        encoder.declare_encodable(Person, "login")
        plan = planner.plan(Person(), {"include": "authorizations"})
        assert plan.include == {"authorizations": {"except": set()}}
        assert "id" in plan.except_


class TestInclude:
    """Tests for include normalization and declared associations."""

    def test_single_name(self, planner):
        plan = planner.plan(Person(), {"include": "authorizations", "except": "email"})
        assert plan.include == {"authorizations": {"except": {"email"}}}

    def test_list_of_names(self, planner):
        plan = planner.plan(Person(), {"include": ["authorizations"]})
        assert plan.include == {"authorizations": {"except": set()}}

    def test_mapping_left_untouched(self, planner):
        nested = {"methods": "hello", "except": "id"}
        plan = planner.plan(Person(), {"include": {"authorizations": nested}, "except": "email"})
        assert plan.include == {"authorizations": {"methods": "hello", "except": "id"}}

    def test_declared_association(self, encoder, planner):
        encoder.declare_encodable(Person, "login", "authorizations")
        plan = planner.plan(Person(), {})
        assert plan.include == {"authorizations": {"except": set()}}
        assert plan.methods == []

    def test_caller_detailed_include_wins(self, encoder, planner):
        """Test that caller-authored include entries are never overwritten."""
        encoder.declare_encodable(Person, "authorizations")
        plan = planner.plan(
            Person(), {"include": {"authorizations": {"only": ["name"]}}, "except": "x"}
        )
        assert plan.include == {"authorizations": {"only": ["name"]}}

    def test_declared_association_on_child_model(self, encoder, planner):
        encoder.declare_encodable(Authorization, "person")
        plan = planner.plan(Authorization(), {})
        assert plan.include == {"person": {"except": set()}}


class TestMethods:
    """Tests for declared methods."""

    def test_declared_method(self, encoder, planner):
        encoder.declare_encodable(Person, "login", "foobar", "full_name")
        plan = planner.plan(Person(), {})
        assert plan.methods == ["foobar", "full_name"]

    def test_caller_methods_kept_without_duplicates(self, encoder, planner):
        encoder.declare_encodable(Person, "foobar")
        plan = planner.plan(Person(), {"methods": "foobar"})
        assert plan.methods == ["foobar"]

    def test_native_field_is_not_a_method(self, encoder, planner):
        encoder.declare_encodable(Person, "login")
        assert planner.plan(Person(), {}).methods == []

    def test_unknown_name_has_no_effect(self, encoder, planner):
        encoder.declare_encodable(Person, "login", "does_not_exist")
        plan = planner.plan(Person(), {})
        assert plan.methods == []
        assert plan.include == {}

    def test_inherited_and_own_methods(self, encoder, planner):
        encoder.declare_encodable(Person, "foobar")
        encoder.declare_encodable(Admin, "clearance")
        assert planner.plan(Admin(), {}).methods == ["foobar", "clearance"]


class TestRenames:
    """Tests for renaming of the serialized mapping."""

    def test_renames_applied_to_result(self, encoder, planner):
        encoder.declare_encodable(Person, {"id": "identifier"}, "login")
        assert planner.serialize(Person(), {}) == {"identifier": 1, "login": "flipsasser"}

    def test_apply_renames_missing_key(self):
        raw = {"login": "a"}
        assert apply_renames(raw, {"id": "identifier"}) == {"login": "a"}

    def test_apply_renames_moves_value(self):
        raw = {"id": 5, "login": "a"}
        result = apply_renames(raw, {"id": "identifier", "login": "login"})
        assert result is raw
        assert result == {"identifier": 5, "login": "a"}


class TestParseInclude:
    """Tests for the include variants."""

    def test_variants(self):
        assert parse_include(None) is None
        assert parse_include("a") == SingleInclude("a")
        assert parse_include(["a", "b"]) == ManyInclude(("a", "b"))
        assert parse_include({"a": None}) == DetailedInclude({"a": {}})
