from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import OperatorSyntaxError
from .utils import DEFAULT_MAX_DEPTH


class Value:
    """Dynamic leaf value that comparisons and literals are expressed in.

    ``Value`` is a closed sum type with four variants: ``Integer``,
    ``String``, ``Array`` and ``Optional``. All variants are frozen
    dataclasses.

    Equality is not structural. An ``Optional`` wrapping ``x`` equals a
    bare ``x`` in both operand orders, while ``Optional(None)`` equals
    only another ``Optional(None)``. Arrays compare positionally under the
    same law. Because of this, values are not hashable.

    Example:
        >>> Integer(123) == Optional(Integer(123))
        True
        >>> String("abc") == Optional(None)
        False
    """

    __slots__ = ()
    __hash__ = None  # type: ignore[assignment]

    @staticmethod
    def from_host(obj: Any) -> Value:
        """Convert a host primitive into a ``Value``.

        Args:
            obj: ``None``, ``int`` (``bool`` included), ``str``, a
                ``list``/``tuple`` of such, or an existing ``Value``.

        Returns:
            The converted value. ``None`` becomes ``Optional(None)``;
            sequence elements are converted recursively.

        Raises:
            TypeError: If ``obj`` has no value representation.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return NONE
        if isinstance(obj, int):
            return Integer(int(obj))
        if isinstance(obj, str):
            return String(obj)
        if isinstance(obj, (list, tuple)):
            return Array(tuple(Value.from_host(v) for v in obj))
        raise TypeError(f"cannot convert {type(obj).__name__} to a value")

    @staticmethod
    def from_document(doc: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
        """Parse an untagged literal document.

        A literal is an integer, a string, a list of literals, or ``None``
        meaning the absent optional. There is no present-optional literal:
        presence is written as the wrapped value itself.

        Args:
            doc: The literal document.
            max_depth: Maximum list nesting; a top-level list is at
                depth 0.

        Raises:
            OperatorSyntaxError: If the document is not a valid literal
                (booleans and floats included), or its lists are nested
                deeper than ``max_depth``.
        """
        return _parse_literal(doc, 0, max_depth)

    def to_document(self) -> Any:
        """Render this value in the untagged literal encoding."""
        raise NotImplementedError

    def unwrap(self) -> Any:
        """Return the plain Python object this value represents."""
        return self.to_document()


@dataclass(frozen=True, eq=False)
class Integer(Value):
    value: int

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Integer):
            return self.value == other.value
        if isinstance(other, Optional):
            return other.value is not None and self == other.value
        if not isinstance(other, Value):
            return NotImplemented
        return False

    def to_document(self) -> Any:
        return self.value


@dataclass(frozen=True, eq=False)
class String(Value):
    value: str

    def __eq__(self, other: object) -> bool:
        if isinstance(other, String):
            return self.value == other.value
        if isinstance(other, Optional):
            return other.value is not None and self == other.value
        if not isinstance(other, Value):
            return NotImplemented
        return False

    def to_document(self) -> Any:
        return self.value


@dataclass(frozen=True, eq=False)
class Array(Value):
    values: tuple[Value, ...] = ()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Array):
            if len(self.values) != len(other.values):
                return False
            return all(a == b for a, b in zip(self.values, other.values))
        if isinstance(other, Optional):
            return other.value is not None and self == other.value
        if not isinstance(other, Value):
            return NotImplemented
        return False

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index: int) -> Value:
        return self.values[index]

    def to_document(self) -> Any:
        return [v.to_document() for v in self.values]


@dataclass(frozen=True, eq=False)
class Optional(Value):
    """An optional value; ``value`` is ``None`` when absent.

    Nested optionals are unwrapped one level at a time during comparison.
    """

    value: Value | None = None

    @staticmethod
    def of(obj: Any) -> Optional:
        """Wrap a host value as a present optional."""
        return Optional(Value.from_host(obj))

    @staticmethod
    def empty() -> Optional:
        return NONE

    @property
    def is_present(self) -> bool:
        return self.value is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Optional):
            if self.value is None or other.value is None:
                return self.value is None and other.value is None
            return self.value == other.value
        if isinstance(other, Value):
            return self.value is not None and self.value == other
        return NotImplemented

    def to_document(self) -> Any:
        return None if self.value is None else self.value.to_document()


NONE = Optional(None)
"""The absent optional."""


def _parse_literal(doc: Any, depth: int, max_depth: int) -> Value:
    if doc is None:
        return NONE
    if isinstance(doc, bool):
        raise OperatorSyntaxError(f"unsupported literal {doc!r}")
    if isinstance(doc, int):
        return Integer(doc)
    if isinstance(doc, str):
        return String(doc)
    if isinstance(doc, list):
        if depth >= max_depth:
            raise OperatorSyntaxError(f"literal nesting exceeds max_depth={max_depth}")
        return Array(tuple(_parse_literal(v, depth + 1, max_depth) for v in doc))
    raise OperatorSyntaxError(f"unsupported literal of type {type(doc).__name__}")
