"""Tests for composite constraints."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

import pytest

from validknobs_core import (
    ConstraintDefinitionError,
    ConstraintFunc,
    Constraints,
    Elements,
    Fields,
    FieldNotFoundError,
    Keys,
    KindMismatchError,
    Lazy,
    LazyDynamic,
    Map,
    Node,
    PathKind,
    ValidationSettings,
    When,
    WhenFn,
    as_constraint,
    constraint,
    new_context,
)

PERMISSIVE = ValidationSettings(strict_types=False)


@dataclass
class Inner:
    Value: str = ""


@dataclass
class Subject:
    Name: str = field(default="", metadata={"validation": "name"})
    Count: int = 0
    Child: Optional[Inner] = None
    Tags: list[str] = field(default_factory=list)
    Labels: dict[str, int] = field(default_factory=dict)


@dataclass
class Other:
    Value: str = ""


class TestConstraintAbstraction:
    """Test Constraint helpers."""

    def test_function_constraints(self):
        """Test wrapping plain functions."""
        def fails(ctx):
            return [ctx.violation("nope")]

        wrapped = as_constraint(fails)
        assert isinstance(wrapped, ConstraintFunc)
        assert [v.message for v in wrapped(new_context(1))] == ["nope"]

    def test_function_returning_none(self):
        """Test that a None result means no violations."""
        @constraint
        def quiet(ctx):
            return None

        assert quiet.violations(new_context(1)) == []

    def test_as_constraint_rejects_non_callables(self):
        """Test that values that can't be constraints are rejected."""
        with pytest.raises(ConstraintDefinitionError):
            as_constraint(42)

    def test_and_operator_flattens(self, make_counter):
        """Test that & builds one flat Constraints."""
        a, b, c = make_counter(), make_counter(), make_counter()
        combined = (a & b) & c

        assert isinstance(combined, Constraints)
        assert combined.constraints == [a, b, c]
        assert (a & (b & c)).constraints == [a, b, c]


class TestConstraints:
    """Test running several constraints against one value."""

    def test_runs_all_in_order(self, make_counter):
        """Test that every constraint runs and violations are joined."""
        first, second = make_counter("first"), make_counter("second")
        violations = Constraints(first, second).violations(new_context(1))

        assert [v.message for v in violations] == ["first", "second"]
        assert first.calls == 1
        assert second.calls == 1

    def test_flattens_lists(self, make_counter):
        """Test that lists of constraints are accepted."""
        a, b = make_counter(), make_counter()
        assert len(Constraints([a, b], a)) == 3

    def test_empty(self):
        """Test that no constraints means no violations."""
        assert Constraints().violations(new_context(1)) == []


class TestElements:
    """Test Elements."""

    @pytest.mark.parametrize("value", [
        [1, 2, 3, 4, 5, 6],
        (1, 2, 3, 4, 5, 6),
        {"a": 1, "b": 2, "c": 3, "d": 4, "e": 5, "f": 6},
    ])
    def test_visits_every_element(self, counter, value):
        """Test that the child runs once per element."""
        Elements(counter).violations(new_context(value))
        assert counter.calls == 6

    def test_sequence_paths(self, counter):
        """Test that sequence elements are named by index."""
        Elements(counter).violations(new_context(["a", "b"]))
        assert counter.paths == [".[0]", ".[1]"]
        assert [ctx.current().node.value for ctx in counter.contexts] == ["a", "b"]

    def test_mapping_paths(self, counter):
        """Test that mapping values are named by key."""
        Elements(counter).violations(new_context(OrderedDict([(1, "x"), ("b", "y")])))
        assert counter.paths == [".1", ".b"]
        assert all(ctx.path_kind is PathKind.VALUE for ctx in counter.contexts)

    def test_element_types(self, counter):
        """Test that elements carry their declared type."""
        ctx = new_context([None], declared_type=list[Optional[int]])
        Elements(counter).violations(ctx)
        assert counter.contexts[0].current().node.declared_type == Optional[int]

    @pytest.mark.parametrize("value,declared", [
        ([], None),
        ({}, None),
        (None, Optional[list[int]]),
    ])
    def test_skips_empty(self, counter, value, declared):
        """Test that empty or None collections run no children."""
        assert Elements(counter).violations(new_context(value, declared_type=declared)) == []
        assert counter.calls == 0

    def test_nested_descents(self, counter):
        """Test paths through nested collections."""
        Elements(Elements(counter)).violations(new_context([["a"], ["b", "c"]]))
        assert counter.paths == [".[0].[0]", ".[1].[0]", ".[1].[1]"]

    def test_wrong_kind_strict(self, counter):
        """Test that non-collections raise in strict mode."""
        with pytest.raises(KindMismatchError):
            Elements(counter).violations(new_context(5))

    def test_wrong_kind_permissive(self, counter):
        """Test that non-collections are reported in permissive mode."""
        violations = Elements(counter).violations(new_context(5, settings=PERMISSIVE))

        assert len(violations) == 1
        assert violations[0].details == {"allowed": ["list", "tuple", "set", "map"], "actual": "int"}
        assert counter.calls == 0

    def test_collects_child_violations(self, failing_counter):
        """Test that child violations carry element paths."""
        violations = Elements(failing_counter).violations(new_context(["a", "b"]))
        assert [v.path for v in violations] == [".[0]", ".[1]"]

    def test_set_paths(self, counter):
        """Test that set items are visited in sorted order."""
        Elements(counter).violations(new_context({"b", "c", "a"}, declared_type=set[str]))
        assert counter.paths == [".[0]", ".[1]", ".[2]"]
        assert [ctx.current().node.value for ctx in counter.contexts] == ["a", "b", "c"]
        assert counter.contexts[0].current().node.declared_type is str

    def test_unorderable_set(self, counter):
        """Test that sets of mixed types are still visited once per item."""
        Elements(counter).violations(new_context(frozenset({1, "a", None})))
        assert counter.calls == 3

    @pytest.mark.parametrize("value,declared", [
        ("", None),
        (0, None),
        (None, Optional[int]),
        (None, Optional[str]),
    ])
    def test_empty_value_of_wrong_kind(self, counter, value, declared):
        """Test that the kind check does not depend on the value being present."""
        with pytest.raises(KindMismatchError):
            Elements(counter).violations(new_context(value, declared_type=declared))

    def test_empty_value_of_wrong_kind_permissive(self, counter):
        """Test that an empty value of the wrong kind is reported."""
        violations = Elements(counter).violations(new_context("", settings=PERMISSIVE))
        assert violations[0].details["actual"] == "string"
        assert counter.calls == 0

    def test_untyped_none_has_no_shape(self, counter):
        """Test that a None of unknown type is skipped."""
        ctx = new_context([None]).with_value("[0]", Node(None))
        assert Elements(counter).violations(ctx) == []


class TestFields:
    """Test Fields."""

    def test_visits_named_fields(self, make_counter):
        """Test that each field's constraint sees the field value."""
        name, count = make_counter(), make_counter()
        Fields({"Name": name}, Count=count).violations(new_context(Subject(Name="x", Count=3)))

        assert name.paths == [".name"]
        assert name.contexts[0].current().node.value == "x"
        assert count.paths == [".Count"]
        assert count.contexts[0].current().node.declared_type is int

    def test_field_of_none_record_is_typed(self, counter):
        """Test that nested None records keep their field types."""
        Fields(Child=counter).violations(new_context(Subject()))
        node = counter.contexts[0].current().node
        assert node.value is None
        assert node.declared_type == Optional[Inner]

    def test_nested_fields(self, counter):
        """Test two levels of descent."""
        Fields(Child=Fields(Value=counter)).violations(new_context(Subject(Child=Inner("v"))))
        assert counter.paths == [".Child.Value"]

    def test_skips_none(self, counter):
        """Test that a None record runs no children."""
        ctx = new_context(None, declared_type=Optional[Subject])
        assert Fields(Name=counter).violations(ctx) == []
        assert counter.calls == 0

    def test_none_of_wrong_kind(self, counter):
        """Test that a None declared as a non-record raises."""
        with pytest.raises(KindMismatchError):
            Fields(Name=counter).violations(new_context(None, declared_type=Optional[int]))

    def test_unknown_field(self, counter):
        """Test that naming a missing field raises."""
        with pytest.raises(FieldNotFoundError):
            Fields(Missing=counter).violations(new_context(Subject()))

    def test_wrong_kind(self, counter):
        """Test non-records under both policies."""
        with pytest.raises(KindMismatchError):
            Fields(Name=counter).violations(new_context("text"))

        violations = Fields(Name=counter).violations(new_context("text", settings=PERMISSIVE))
        assert violations[0].details["allowed"] == ["struct"]


class TestKeys:
    """Test Keys."""

    def test_visits_keys(self, counter):
        """Test that children see keys with the key path kind."""
        Keys(counter).violations(new_context({"a": 1, "b": 2}))

        assert counter.paths == [".a", ".b"]
        assert [ctx.current().node.value for ctx in counter.contexts] == ["a", "b"]
        assert all(ctx.path_kind is PathKind.KEY for ctx in counter.contexts)

    def test_key_types(self, counter):
        """Test that keys carry the declared key type."""
        Keys(counter).violations(new_context({1: "x"}, declared_type=dict[int, str]))
        assert counter.contexts[0].current().node.declared_type is int

    def test_violations_are_key_violations(self, failing_counter):
        """Test that violations from keys are marked as such."""
        violations = Keys(failing_counter).violations(new_context({"a": 1}))
        assert violations[0].path == ".a"
        assert violations[0].path_kind is PathKind.KEY

    def test_skips_empty(self, counter):
        """Test that empty mappings run no children."""
        assert Keys(counter).violations(new_context({})) == []
        assert counter.calls == 0

    @pytest.mark.parametrize("value", ["", [], set()])
    def test_empty_value_of_wrong_kind(self, counter, value):
        """Test that empty non-mappings raise like non-empty ones."""
        with pytest.raises(KindMismatchError):
            Keys(counter).violations(new_context(value))

    def test_wrong_kind(self, counter):
        """Test that sequences are not mappings."""
        with pytest.raises(KindMismatchError):
            Keys(counter).violations(new_context([1]))


class TestMap:
    """Test Map."""

    def test_visits_named_keys(self, make_counter):
        """Test that each key's constraint sees the stored value."""
        present, missing = make_counter(), make_counter()
        ctx = new_context({"a": 1}, declared_type=dict[str, int])
        Map({"a": present, "b": missing}).violations(ctx)

        assert present.paths == [".a"]
        assert present.contexts[0].current().node.value == 1
        assert missing.paths == [".b"]
        assert missing.contexts[0].current().node.value is None
        assert missing.contexts[0].current().node.declared_type is int

    def test_skips_none(self, counter):
        """Test that a None mapping runs no children."""
        ctx = new_context(None, declared_type=Optional[dict[str, int]])
        assert Map({"a": counter}).violations(ctx) == []
        assert counter.calls == 0

    def test_none_of_wrong_kind(self, counter):
        """Test that a None declared as a non-mapping raises."""
        with pytest.raises(KindMismatchError):
            Map({"a": counter}).violations(new_context(None, declared_type=Optional[list[int]]))

    def test_empty_mapping_still_checked(self, counter):
        """Test that an empty mapping still runs per-key constraints."""
        Map({"a": counter}).violations(new_context({}))
        assert counter.calls == 1

    def test_wrong_kind(self, counter):
        """Test that non-mappings raise in strict mode."""
        with pytest.raises(KindMismatchError):
            Map({"a": counter}).violations(new_context([1]))


class TestLazy:
    """Test Lazy."""

    def test_factory_called_per_run(self, counter):
        """Test that the factory runs on validation, not construction."""
        calls = []

        def factory():
            calls.append(1)
            return counter

        lazy = Lazy(factory)
        assert calls == []

        lazy.violations(new_context(1))
        assert len(calls) == 1
        assert counter.calls == 1

        lazy.violations(new_context(1))
        assert len(calls) == 2

    def test_invalid_result(self):
        """Test that factories must return constraints."""
        with pytest.raises(ConstraintDefinitionError):
            Lazy(lambda: 42).violations(new_context(1))


class TestLazyDynamic:
    """Test LazyDynamic."""

    def test_factory_receives_record(self, counter):
        """Test that the factory sees the unwrapped record."""
        seen = []

        def factory(subject):
            seen.append(subject)
            return counter

        subject = Subject(Name="x")
        LazyDynamic(factory, Subject).violations(new_context(subject, declared_type=Optional[Subject]))

        assert seen == [subject]
        assert counter.calls == 1

    def test_accepts_declared_type(self, counter):
        """Test that the declared, wrapped type is an accepted expectation."""
        ctx = new_context(Subject(), declared_type=Optional[Subject])
        LazyDynamic(lambda s: counter, Optional[Subject]).violations(ctx)
        assert counter.calls == 1

    def test_rules_from_record_contents(self):
        """Test building rules from the record's own values."""
        def factory(subject):
            def check(ctx):
                if len(subject.Tags) > subject.Count:
                    return [ctx.violation("too many tags")]
                return []
            return check

        violations = LazyDynamic(factory).violations(new_context(Subject(Count=1, Tags=["a", "b"])))
        assert [v.message for v in violations] == ["too many tags"]

    def test_skips_none(self):
        """Test that a None record never calls the factory."""
        calls = []
        ctx = new_context(None, declared_type=Optional[Subject])

        assert LazyDynamic(lambda s: calls.append(s)).violations(ctx) == []
        assert calls == []

    def test_unexpected_type(self, counter):
        """Test that a record of another type raises."""
        with pytest.raises(ConstraintDefinitionError):
            LazyDynamic(lambda s: counter, Subject).violations(new_context(Other()))

    @pytest.mark.parametrize("result", [None, 42])
    def test_invalid_result(self, result):
        """Test that factories must return constraints."""
        with pytest.raises(ConstraintDefinitionError):
            LazyDynamic(lambda s: result).violations(new_context(Subject()))

    def test_none_of_wrong_kind(self):
        """Test that a None declared as a non-record raises before any skip."""
        with pytest.raises(KindMismatchError):
            LazyDynamic(lambda s: s).violations(new_context(None, declared_type=Optional[str]))

    def test_wrong_kind(self, counter):
        """Test that non-records raise in strict mode."""
        with pytest.raises(KindMismatchError):
            LazyDynamic(lambda s: counter).violations(new_context("text"))


class TestConditions:
    """Test When and WhenFn."""

    def test_when_false(self, counter):
        """Test that a false predicate runs nothing."""
        assert When(False, counter).violations(new_context(1)) == []
        assert counter.calls == 0

    def test_when_true(self, make_counter):
        """Test that a true predicate runs each child once."""
        a, b = make_counter("a"), make_counter("b")
        violations = When(True, a, b).violations(new_context(1))

        assert [v.message for v in violations] == ["a", "b"]
        assert a.calls == 1
        assert b.calls == 1

    def test_when_fn(self, counter):
        """Test predicates evaluated against the context."""
        only_positive = WhenFn(lambda ctx: ctx.current().node.value > 0, counter)

        only_positive.violations(new_context(-1))
        assert counter.calls == 0

        only_positive.violations(new_context(1))
        assert counter.calls == 1

    @pytest.mark.parametrize("result,calls", [(False, 0), (True, 1)])
    def test_when_fn_without_arguments(self, counter, result, calls):
        """Test predicates that take no arguments."""
        WhenFn(lambda: result, counter).violations(new_context(1))
        assert counter.calls == calls

    def test_when_fn_called_once_per_run(self, counter):
        """Test that the predicate runs once for every validation."""
        seen = []

        def predicate():
            seen.append(True)
            return True

        gated = WhenFn(predicate, counter)
        gated.violations(new_context(1))
        gated.violations(new_context(2))

        assert len(seen) == 2
        assert counter.calls == 2

    def test_when_fn_bound_method(self, counter):
        """Test that bound methods without parameters are called with none."""
        class Flag:
            enabled = False

            def is_enabled(self):
                return self.enabled

        flag = Flag()
        gated = WhenFn(flag.is_enabled, counter)

        gated.violations(new_context(1))
        flag.enabled = True
        gated.violations(new_context(1))

        assert counter.calls == 1
