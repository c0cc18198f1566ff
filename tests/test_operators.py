import pytest

import kimari
from kimari import (
    NONE,
    AllOperator,
    AnyOperator,
    Context,
    Decision,
    EqualsOperator,
    Integer,
    NotEqualsOperator,
    String,
    UnexpectedContextError,
    UnexpectedIndexError,
    UnexpectedPathError,
    Value,
    get_default_registry,
)

CTX = {"foo": 123, "bar": {"baz": "abc", "array": [456, 789]}}


class CountingContext(Context):
    """Counts every path resolved through it."""

    def __init__(self, data):
        self.data = data
        self.reads = []

    def resolve(self, path):
        segments = list(path)
        self.reads.append(".".join(segments))
        return kimari.resolve(self.data, segments)


def eq(where, to):
    return EqualsOperator(where=where, to=Value.from_host(to))


def test_equals():
    assert eq("foo", 123).evaluate(CTX) is Decision.ACCEPT
    assert eq("foo", 124).evaluate(CTX) is Decision.REJECT
    assert eq("bar.baz", "abc").evaluate(CTX) is Decision.ACCEPT
    assert eq("bar.array", [456, 789]).evaluate(CTX) is Decision.ACCEPT


def test_equals_missing_index_compares_to_null():
    assert EqualsOperator(where="bar.array.5", to=NONE).evaluate(CTX) is Decision.ACCEPT
    assert eq("bar.array.5", 456).evaluate(CTX) is Decision.REJECT


def test_not_equals():
    assert NotEqualsOperator(where="foo", to=Integer(123)).evaluate(CTX) is Decision.REJECT
    assert NotEqualsOperator(where="bar.baz", to=String("def")).evaluate(CTX) is Decision.ACCEPT
    assert NotEqualsOperator(where="bar.array.5", to=Integer(1)).evaluate(CTX) is Decision.ACCEPT


def test_context_errors_are_wrapped():
    with pytest.raises(UnexpectedContextError, match="Unexpected context: Unexpected path: qux") as exc_info:
        eq("qux", 1).evaluate(CTX)
    assert isinstance(exc_info.value.context_error, UnexpectedPathError)
    assert exc_info.value.__cause__ is exc_info.value.context_error

    with pytest.raises(UnexpectedContextError) as exc_info:
        NotEqualsOperator(where="bar.array.x", to=Integer(1)).evaluate(CTX)
    assert isinstance(exc_info.value.context_error, UnexpectedIndexError)


def test_empty_branches():
    assert AllOperator(operators=()).evaluate(CTX) is Decision.ACCEPT
    assert AnyOperator(operators=()).evaluate(CTX) is Decision.REJECT


def test_all_short_circuits_on_reject():
    ctx = CountingContext(CTX)
    op = AllOperator(operators=(eq("foo", 123), eq("foo", 0), eq("bar.baz", "abc")))

    assert op.evaluate(ctx) is Decision.REJECT
    assert ctx.reads == ["foo", "foo"]


def test_any_short_circuits_on_accept():
    ctx = CountingContext(CTX)
    op = AnyOperator(operators=(eq("foo", 0), eq("foo", 123), eq("bar.baz", "abc")))

    assert op.evaluate(ctx) is Decision.ACCEPT
    assert ctx.reads == ["foo", "foo"]


def test_branch_stops_at_first_error():
    ctx = CountingContext(CTX)
    op = AnyOperator(operators=(eq("foo", 0), eq("nope", 1), eq("foo", 123)))

    with pytest.raises(UnexpectedContextError):
        op.evaluate(ctx)
    assert ctx.reads == ["foo", "nope"]


def test_nested_branches():
    op = AnyOperator(
        operators=(
            AllOperator(operators=(eq("foo", 123), eq("bar.baz", "def"))),
            AllOperator(operators=(eq("bar.array.0", 456), eq("bar.array.1", 789))),
        )
    )
    assert op.evaluate(CTX) is Decision.ACCEPT


def test_to_document_round_trips_through_registry():
    op = AllOperator(
        operators=(
            eq("foo.bar", 123),
            NotEqualsOperator(where="foo.bar", to=String("abc")),
            AnyOperator(operators=(EqualsOperator(where="x", to=NONE),)),
        )
    )
    doc = op.to_document()

    assert doc == {
        "type": "all",
        "operators": [
            {"type": "equals", "where": "foo.bar", "to": 123},
            {"type": "notEquals", "where": "foo.bar", "to": "abc"},
            {"type": "any", "operators": [{"type": "equals", "where": "x", "to": None}]},
        ],
    }
    assert get_default_registry().create(doc) == op


def test_explain_lists_only_evaluated_children():
    op = AllOperator(operators=(eq("foo", 123), eq("bar.baz", "def"), eq("qux", 1)))

    assert op.explain(CTX) == {
        "type": "all",
        "result": "reject",
        "operators": [
            {"type": "equals", "where": "foo", "to": 123, "actual": 123, "result": "accept"},
            {"type": "equals", "where": "bar.baz", "to": "def", "actual": "abc", "result": "reject"},
        ],
    }


def test_explain_propagates_context_errors():
    with pytest.raises(UnexpectedContextError):
        AnyOperator(operators=(eq("qux", 1),)).explain(CTX)


@pytest.mark.parametrize(
    "operator",
    [
        AllOperator(),
        AnyOperator(operators=(eq("foo", 1),)),
        EqualsOperator(where="foo", to=Integer(1)),
        NotEqualsOperator(where="foo", to=String("x")),
    ],
)
def test_operators_compare_by_value_but_are_not_hashable(operator):
    assert operator == get_default_registry().create(operator.to_document())
    with pytest.raises(TypeError):
        hash(operator)
