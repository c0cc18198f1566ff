from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .context import resolve_at
from .decision import Decision
from .errors import ContextError, UnexpectedContextError
from .value import Value


class Operator:
    """Base class for all operator types.

    Operators are the nodes of a predicate tree compiled from a tagged
    document. Branches (``all``, ``any``) combine child operators; leaves
    (``equals``, ``notEquals``) read a path from the context and compare
    it against a literal value.

    Operators are immutable and keep no state between evaluations, so the
    same tree can be evaluated against many contexts concurrently.
    They compare by value but are not hashable, because the ``Value``
    literals they hold are not.

    Subclasses must implement ``evaluate()`` and ``to_document()``. The
    ``explain()`` method can be overridden to provide detailed evaluation
    information.

    Attributes:
        type_name: The document discriminator (e.g., ``'equals'``).
    """

    type_name: str = "operator"

    def evaluate(self, context: Any) -> Decision:
        """Evaluate the operator against the given context.

        Args:
            context: Any object ``kimari.context.resolve()`` supports.

        Returns:
            Decision: ``ACCEPT`` if the predicate holds, ``REJECT`` otherwise.

        Raises:
            UnexpectedContextError: If a path cannot be resolved.
            NotImplementedError: If not overridden by a subclass.
        """
        raise NotImplementedError

    def to_document(self) -> dict[str, Any]:
        """Render the operator as a tagged document."""
        raise NotImplementedError

    def explain(self, context: Any) -> dict[str, Any]:
        """Return a detailed explanation of this operator's evaluation.

        Returns:
            dict: Explanation containing at least 'type' and 'result' keys.
                Subclasses may include additional details.
        """
        return {"type": self.type_name, "result": self.evaluate(context).value}


@dataclass(frozen=True)
class AllOperator(Operator):
    """Logical AND of nested operators.

    Evaluates nested operators in declaration order and stops at the first
    ``REJECT`` or error. An empty ``operators`` tuple accepts.

    Attributes:
        operators: Nested Operator objects.
    """

    operators: tuple[Operator, ...] = ()
    type_name = "all"
    __hash__ = None  # type: ignore[assignment]

    def evaluate(self, context: Any) -> Decision:
        return Decision.all(op.evaluate(context) for op in self.operators)

    def to_document(self) -> dict[str, Any]:
        return {"type": self.type_name, "operators": [op.to_document() for op in self.operators]}

    def explain(self, context: Any) -> dict[str, Any]:
        details: list[dict[str, Any]] = []

        def _walk():
            for op in self.operators:
                detail = op.explain(context)
                details.append(detail)
                yield Decision(detail["result"])

        result = Decision.all(_walk())
        return {"type": self.type_name, "result": result.value, "operators": details}


@dataclass(frozen=True)
class AnyOperator(Operator):
    """Logical OR of nested operators.

    Evaluates nested operators in declaration order and stops at the first
    ``ACCEPT`` or error. An empty ``operators`` tuple rejects.

    Attributes:
        operators: Nested Operator objects.
    """

    operators: tuple[Operator, ...] = ()
    type_name = "any"
    __hash__ = None  # type: ignore[assignment]

    def evaluate(self, context: Any) -> Decision:
        return Decision.any(op.evaluate(context) for op in self.operators)

    def to_document(self) -> dict[str, Any]:
        return {"type": self.type_name, "operators": [op.to_document() for op in self.operators]}

    def explain(self, context: Any) -> dict[str, Any]:
        details: list[dict[str, Any]] = []

        def _walk():
            for op in self.operators:
                detail = op.explain(context)
                details.append(detail)
                yield Decision(detail["result"])

        result = Decision.any(_walk())
        return {"type": self.type_name, "result": result.value, "operators": details}


@dataclass(frozen=True)
class _ComparisonOperator(Operator):
    where: str
    to: Value
    __hash__ = None  # type: ignore[assignment]

    def _actual(self, context: Any) -> Value:
        try:
            return resolve_at(context, self.where)
        except ContextError as exc:
            raise UnexpectedContextError(exc) from exc

    def _compare(self, actual: Value) -> bool:
        raise NotImplementedError

    def evaluate(self, context: Any) -> Decision:
        return Decision.from_bool(self._compare(self._actual(context)))

    def to_document(self) -> dict[str, Any]:
        return {"type": self.type_name, "where": self.where, "to": self.to.to_document()}

    def explain(self, context: Any) -> dict[str, Any]:
        actual = self._actual(context)
        return {
            "type": self.type_name,
            "where": self.where,
            "to": self.to.to_document(),
            "actual": actual.unwrap(),
            "result": Decision.from_bool(self._compare(actual)).value,
        }


@dataclass(frozen=True)
class EqualsOperator(_ComparisonOperator):
    """Accepts when the value at ``where`` equals ``to``.

    Equality follows ``Value`` semantics: a present optional equals its
    payload, and an absent optional equals only ``null``.

    Attributes:
        where: Dot-separated path to the value in the context.
        to: The literal value to compare against.
    """

    type_name = "equals"
    __hash__ = None  # type: ignore[assignment]

    def _compare(self, actual: Value) -> bool:
        return actual == self.to


@dataclass(frozen=True)
class NotEqualsOperator(_ComparisonOperator):
    """Accepts when the value at ``where`` does not equal ``to``.

    Attributes:
        where: Dot-separated path to the value in the context.
        to: The literal value to compare against.
    """

    type_name = "notEquals"
    __hash__ = None  # type: ignore[assignment]

    def _compare(self, actual: Value) -> bool:
        return actual != self.to
