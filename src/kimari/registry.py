from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .errors import OperatorSyntaxError, UnknownOperatorError
from .operators import AllOperator, AnyOperator, EqualsOperator, NotEqualsOperator, Operator
from .utils import DEFAULT_MAX_DEPTH
from .value import Value

logger = logging.getLogger(__name__)

OperatorFactory = Callable[[Mapping[str, Any], "OperatorRegistry", int], Operator]
"""Type alias for operator factory functions.

An operator factory takes an operator document, the registry and the
depth of the document in the tree, and returns an Operator instance.
Factories for branch operators pass ``depth + 1`` when creating children.
"""


class OperatorRegistry:
    """Registry mapping operator type names to factory functions.

    The registry turns tagged operator documents into ``Operator`` trees.
    Custom operator types can be added via ``register()``.

    Attributes:
        max_depth: Maximum nesting depth of an operator document. Deeper
            documents are rejected with ``OperatorSyntaxError`` so that
            evaluation recursion stays bounded.

    Example:
        >>> registry = OperatorRegistry()
        >>> registry.register("custom", my_custom_factory)
        >>> op = registry.create({"type": "custom", "field": "value"})
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Create an empty operator registry."""
        if max_depth < 1:
            raise ValueError("max_depth must be a positive integer")
        self.max_depth = max_depth
        self._factories: dict[str, OperatorFactory] = {}

    def register(self, type_name: str, factory: OperatorFactory) -> None:
        """Register an operator factory for a given type name.

        If a factory is already registered for the type name, it will
        be replaced.

        Args:
            type_name: The operator type identifier (e.g., ``"equals"``).
                This is the value of the ``"type"`` field in documents.
            factory: A callable taking an operator document, the registry
                and the document depth, returning an ``Operator``.
        """
        if type_name in self._factories:
            logger.debug("replacing operator factory for %r", type_name)
        self._factories[type_name] = factory

    def unregister(self, type_name: str) -> None:
        """Remove an operator factory from the registry.

        Does nothing if the type name is not registered.
        """
        self._factories.pop(type_name, None)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._factories

    def with_max_depth(self, max_depth: int) -> OperatorRegistry:
        """Return a copy of this registry with a different nesting limit.

        The copy starts with the same factories; later registrations on
        either registry do not affect the other.
        """
        registry = OperatorRegistry(max_depth=max_depth)
        registry._factories.update(self._factories)
        return registry

    def create(self, spec: Mapping[str, Any], depth: int = 0) -> Operator:
        """Create an operator from a document.

        Args:
            spec: An operator document. Must have at least a ``"type"``
                field identifying the operator type.
            depth: Nesting depth of ``spec``; ``0`` for a rule body.

        Returns:
            An instantiated ``Operator``.

        Raises:
            OperatorSyntaxError: If ``spec`` is not a mapping, has no/empty
                ``"type"`` field, is nested deeper than ``max_depth``, or
                fails the factory's own validation.
            UnknownOperatorError: If the operator type is not registered.
        """
        if depth >= self.max_depth:
            raise OperatorSyntaxError(f"operator nesting exceeds max_depth={self.max_depth}")
        if not isinstance(spec, Mapping):
            raise OperatorSyntaxError("operator spec must be a mapping")
        type_name = spec.get("type")
        if not isinstance(type_name, str) or not type_name:
            raise OperatorSyntaxError("operator spec requires non-empty 'type'")
        if type_name not in self._factories:
            raise UnknownOperatorError(type_name)
        return self._factories[type_name](spec, self, depth)


_default_registry: OperatorRegistry | None = None


def get_default_registry() -> OperatorRegistry:
    """Return the default registry with the built-in operators registered.

    The default registry is lazily initialized on first access and cached
    for subsequent calls. It includes ``all``, ``any``, ``equals`` and
    ``notEquals``.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = OperatorRegistry()
        register_builtin_operators(_default_registry)
    return _default_registry


def parse_literal(spec: Mapping[str, Any], type_name: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Read the ``to`` literal of a comparison document.

    List nesting inside the literal is capped at ``max_depth``, the same
    limit the registry applies to operator nesting.
    """
    if "to" not in spec:
        raise OperatorSyntaxError(f"{type_name} operator requires 'to'")
    return Value.from_document(spec["to"], max_depth=max_depth)


def register_builtin_operators(registry: OperatorRegistry) -> None:
    """Register the built-in operator types with a registry.

    This function registers the following operator types:
        - ``all``: Logical AND of nested operators
        - ``any``: Logical OR of nested operators
        - ``equals``: Value at a path equals a literal
        - ``notEquals``: Value at a path does not equal a literal

    Args:
        registry: The ``OperatorRegistry`` to register operators with.
    """

    def _children(spec: Mapping[str, Any], r: OperatorRegistry, depth: int, type_name: str) -> tuple[Operator, ...]:
        items = spec.get("operators")
        if not isinstance(items, list):
            raise OperatorSyntaxError(f"{type_name} operator requires list 'operators'")
        return tuple(r.create(s, depth + 1) for s in items)

    def _where(spec: Mapping[str, Any], type_name: str) -> str:
        where = spec.get("where")
        if not isinstance(where, str):
            raise OperatorSyntaxError(f"{type_name} operator requires string 'where'")
        return where

    def _all(spec: Mapping[str, Any], r: OperatorRegistry, depth: int) -> Operator:
        return AllOperator(operators=_children(spec, r, depth, "all"))

    def _any(spec: Mapping[str, Any], r: OperatorRegistry, depth: int) -> Operator:
        return AnyOperator(operators=_children(spec, r, depth, "any"))

    def _equals(spec: Mapping[str, Any], r: OperatorRegistry, depth: int) -> Operator:
        return EqualsOperator(where=_where(spec, "equals"), to=parse_literal(spec, "equals", r.max_depth))

    def _not_equals(spec: Mapping[str, Any], r: OperatorRegistry, depth: int) -> Operator:
        return NotEqualsOperator(where=_where(spec, "notEquals"), to=parse_literal(spec, "notEquals", r.max_depth))

    registry.register("all", _all)
    registry.register("any", _any)
    registry.register("equals", _equals)
    registry.register("notEquals", _not_equals)
