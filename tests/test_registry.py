from dataclasses import dataclass

import pytest

from kimari import (
    AllOperator,
    Decision,
    EqualsOperator,
    Integer,
    Operator,
    OperatorRegistry,
    OperatorSyntaxError,
    UnknownOperatorError,
    Value,
    get_default_registry,
)
from kimari.registry import register_builtin_operators


def _registry(**kwargs):
    registry = OperatorRegistry(**kwargs)
    register_builtin_operators(registry)
    return registry


def test_default_registry_is_shared_and_has_builtins():
    registry = get_default_registry()
    assert registry is get_default_registry()
    for type_name in ("all", "any", "equals", "notEquals"):
        assert type_name in registry


def test_create_equals():
    op = get_default_registry().create({"type": "equals", "where": "foo.bar", "to": 123})
    assert op == EqualsOperator(where="foo.bar", to=Integer(123))


@pytest.mark.parametrize(
    "spec",
    [
        [],
        {},
        {"type": ""},
        {"type": 1},
        {"type": "all"},
        {"type": "any", "operators": {"type": "equals"}},
        {"type": "equals", "to": 1},
        {"type": "equals", "where": 1, "to": 1},
        {"type": "notEquals", "where": "foo"},
        {"type": "equals", "where": "foo", "to": 1.5},
        {"type": "all", "operators": [{"type": "equals", "where": "foo"}]},
    ],
)
def test_invalid_specs_raise_syntax_error(spec):
    with pytest.raises(OperatorSyntaxError):
        get_default_registry().create(spec)


def test_unknown_type_raises():
    with pytest.raises(UnknownOperatorError, match="not"):
        get_default_registry().create({"type": "not", "operator": {}})


def test_max_depth_caps_nesting():
    registry = _registry(max_depth=2)
    shallow = {"type": "all", "operators": [{"type": "equals", "where": "a", "to": 1}]}
    deep = {"type": "all", "operators": [shallow]}

    assert registry.create(shallow) == AllOperator(operators=(EqualsOperator(where="a", to=Integer(1)),))
    with pytest.raises(OperatorSyntaxError, match="max_depth=2"):
        registry.create(deep)


def test_max_depth_must_be_positive():
    with pytest.raises(ValueError):
        OperatorRegistry(max_depth=0)


@dataclass(frozen=True)
class AlwaysOperator(Operator):
    decision: Decision
    type_name = "always"

    def evaluate(self, context):
        return self.decision

    def to_document(self):
        return {"type": self.type_name, "accept": bool(self.decision)}


def test_register_and_unregister_custom_operator():
    registry = _registry()
    registry.register("always", lambda spec, r, depth: AlwaysOperator(Decision.from_bool(bool(spec.get("accept")))))

    op = registry.create({"type": "all", "operators": [{"type": "always", "accept": True}]})
    assert op.evaluate({}) is Decision.ACCEPT
    assert op.explain({}) == {"type": "all", "result": "accept", "operators": [{"type": "always", "result": "accept"}]}

    registry.unregister("always")
    registry.unregister("always")
    with pytest.raises(UnknownOperatorError):
        registry.create({"type": "always"})


def test_with_max_depth_copies_factories():
    registry = _registry()
    shallow = registry.with_max_depth(1)

    assert shallow.max_depth == 1
    assert registry.max_depth != 1
    assert "equals" in shallow
    with pytest.raises(OperatorSyntaxError, match="max_depth=1"):
        shallow.create({"type": "all", "operators": [{"type": "all", "operators": []}]})

    shallow.unregister("equals")
    assert "equals" in registry


def test_literal_nesting_follows_registry_limit():
    registry = _registry(max_depth=2)
    spec = {"type": "equals", "where": "a", "to": [[1]]}

    assert registry.create(spec) == EqualsOperator(where="a", to=Value.from_document([[1]]))
    with pytest.raises(OperatorSyntaxError, match="literal nesting exceeds max_depth=1"):
        registry.with_max_depth(1).create(spec)
