"""kimari - A declarative decision engine.

kimari loads named rules from JSON or YAML documents and determines which of
them are satisfied by a context: any mapping, dataclass, sequence or custom
``Context`` implementation holding application data.

Quick Start:
    >>> from kimari import load_rules
    >>> rules = load_rules('''
    ... foo_is_123:
    ...   type: equals
    ...   where: foo
    ...   to: 123
    ... bar_baz_is_def:
    ...   type: equals
    ...   where: bar.baz
    ...   to: def
    ... ''')
    >>> [m.name for m in rules.find_all({"foo": 123, "bar": {"baz": "abc"}})]
    ['foo_is_123']

Main Components:
    - load_rules(): Load and validate rules from a mapping, document or file
    - Rules / Rule: Named operators, evaluated in rule-name order
    - Operator: Predicate tree node (all, any, equals, notEquals)
    - Decision: ACCEPT or REJECT, with short-circuiting all/any folds
    - Value: Dynamic leaf value (Integer, String, Array, Optional)
    - Context / resolve_at(): Path resolution over host data
    - OperatorRegistry: Registry for custom operator types

Built-in Operator Types:
    - all: Logical AND of nested operators
    - any: Logical OR of nested operators
    - equals: Value at a path equals a literal
    - notEquals: Value at a path does not equal a literal

Exceptions:
    - ContextError: Path resolution failed (UnexpectedPathError,
      UnexpectedIndexError, OtherContextError)
    - OperatorError: Operator evaluation failed (UnexpectedContextError)
    - RulesLoadError: Rules loading or parsing failed
    - OperatorSyntaxError: Invalid operator document
    - UnknownOperatorError: Operator type not registered
"""

from .context import Context, derive_context, resolve, resolve_at
from .decision import Decision
from .errors import (
    ContextError,
    KimariError,
    OperatorError,
    OperatorSyntaxError,
    OtherContextError,
    RulesLoadError,
    UnexpectedContextError,
    UnexpectedIndexError,
    UnexpectedPathError,
    UnknownOperatorError,
)
from .loader import dump_rules, load_rules
from .operators import AllOperator, AnyOperator, EqualsOperator, NotEqualsOperator, Operator
from .registry import DEFAULT_MAX_DEPTH, OperatorRegistry, get_default_registry
from .rules import Match, Rule, Rules
from .value import NONE, Array, Integer, Optional, String, Value

__all__ = [
    "AllOperator",
    "AnyOperator",
    "Array",
    "Context",
    "ContextError",
    "DEFAULT_MAX_DEPTH",
    "Decision",
    "EqualsOperator",
    "Integer",
    "KimariError",
    "Match",
    "NONE",
    "NotEqualsOperator",
    "Operator",
    "OperatorError",
    "OperatorRegistry",
    "OperatorSyntaxError",
    "Optional",
    "OtherContextError",
    "Rule",
    "Rules",
    "RulesLoadError",
    "String",
    "UnexpectedContextError",
    "UnexpectedIndexError",
    "UnexpectedPathError",
    "UnknownOperatorError",
    "Value",
    "derive_context",
    "dump_rules",
    "get_default_registry",
    "load_rules",
    "resolve",
    "resolve_at",
]
