from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .decision import Decision
from .errors import OperatorError, OperatorSyntaxError, UnknownOperatorError
from .operators import Operator
from .registry import OperatorRegistry, get_default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A named predicate: exactly one operator.

    In documents a rule body IS its operator body; there is no extra
    nesting key.

    Attributes:
        operator: The root of the rule's operator tree.
    """

    operator: Operator
    __hash__ = None  # type: ignore[assignment]

    def is_satisfied_by(self, context: Any) -> Decision:
        """Determine whether the context satisfies the rule.

        Raises:
            OperatorError: If the operator fails against the context.
        """
        return self.operator.evaluate(context)

    def explain(self, context: Any) -> dict[str, Any]:
        return self.operator.explain(context)

    def to_document(self) -> dict[str, Any]:
        return self.operator.to_document()


@dataclass(frozen=True)
class Match:
    """One item produced by ``Rules.find_all()``.

    Either a rule that accepted the context (``error`` is ``None``) or a
    rule whose evaluation failed (``error`` is set).

    Attributes:
        name: The rule name.
        rule: The rule that was evaluated.
        error: The evaluation error, if any.
    """

    name: str
    rule: Rule
    error: OperatorError | None = None
    __hash__ = None  # type: ignore[assignment]

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[str, Rule]:
        """Return ``(name, rule)``, raising the error of a failed match."""
        if self.error is not None:
            raise self.error
        return self.name, self.rule


class Rules(Mapping[str, Rule]):
    """Read-only mapping of rule names to rules, ordered by name.

    Iteration, ``find()`` and ``find_all()`` visit rules in ascending name
    order, independent of the order of the source document.

    Example:
        >>> from kimari import load_rules
        >>> rules = load_rules({"is_admin": {"type": "equals", "where": "role", "to": "admin"}})
        >>> rules.find({"role": "admin"})
        ('is_admin', Rule(operator=EqualsOperator(where='role', to=String(value='admin'))))
    """

    def __init__(self, rules: Mapping[str, Rule] | None = None) -> None:
        items = dict(rules or {})
        self._rules: dict[str, Rule] = {name: items[name] for name in sorted(items)}

    def __getitem__(self, name: str) -> Rule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Rules({self._rules!r})"

    def find(self, context: Any) -> tuple[str, Rule] | None:
        """Find the first rule, in name order, satisfied by the context.

        Returns:
            ``(name, rule)`` for the first accepting rule, or ``None`` if
            no rule accepts.

        Raises:
            OperatorError: If a rule fails before any rule accepts.
        """
        for match in self.find_all(context):
            return match.unwrap()
        return None

    def find_all(self, context: Any) -> Iterator[Match]:
        """Lazily yield every rule satisfied by the context, in name order.

        A rule whose evaluation fails is yielded in place as a ``Match``
        with ``error`` set; the traversal continues with the next rule.
        Rejecting rules are skipped.
        """
        for name, rule in self._rules.items():
            try:
                decision = rule.is_satisfied_by(context)
            except OperatorError as exc:
                logger.debug("rule %r failed: %s", name, exc)
                yield Match(name=name, rule=rule, error=exc)
                continue
            logger.debug("rule %r: %s", name, decision.value)
            if decision is Decision.ACCEPT:
                yield Match(name=name, rule=rule)

    def explain(self, context: Any) -> dict[str, dict[str, Any]]:
        """Explain every rule against the context, keyed by rule name.

        Raises:
            OperatorError: If any rule fails against the context.
        """
        return {name: rule.explain(context) for name, rule in self._rules.items()}

    @classmethod
    def from_document(
        cls,
        doc: Mapping[str, Any],
        registry: OperatorRegistry | None = None,
        *,
        max_depth: int | None = None,
    ) -> Rules:
        """Build rules from a parsed document.

        Args:
            doc: Mapping of rule name to rule body.
            registry: Registry used to create operators. If ``None``, uses
                the default registry from ``get_default_registry()``.
            max_depth: Nesting limit for operators and literals. Overrides
                the registry's own ``max_depth`` for this call only.

        Raises:
            OperatorSyntaxError: If the document or a rule body is invalid.
            UnknownOperatorError: If a rule uses an unregistered type.
        """
        registry = registry or get_default_registry()
        if max_depth is not None and max_depth != registry.max_depth:
            registry = registry.with_max_depth(max_depth)
        if not isinstance(doc, Mapping):
            raise OperatorSyntaxError("rules document must be a mapping of rule names to rules")

        rules: dict[str, Rule] = {}
        for name, body in doc.items():
            if not isinstance(name, str):
                raise OperatorSyntaxError(f"rule name must be a string, got {name!r}")
            try:
                rules[name] = Rule(operator=registry.create(body))
            except (OperatorSyntaxError, UnknownOperatorError) as exc:
                raise type(exc)(f"rule {name!r}: {exc}") from exc
        return cls(rules)

    def to_document(self) -> dict[str, Any]:
        return {name: rule.to_document() for name, rule in self._rules.items()}
