from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from typing import Any, ClassVar, get_origin, get_type_hints

from .errors import ContextError, OtherContextError, UnexpectedIndexError, UnexpectedPathError
from .utils import parse_index, split_path
from .value import NONE, Array, Integer, Optional, String, Value


class Context(ABC):
    """Capability to resolve a path against some data into a ``Value``.

    Subclass this to bridge host data that is neither a mapping nor a
    dataclass into the engine, or decorate a class with
    ``derive_context()`` to get an implementation from its fields.

    Example:
        >>> class Clock(Context):
        ...     def resolve(self, path):
        ...         segments = list(path)
        ...         if segments == ["hour"]:
        ...             return Integer(12)
        ...         raise UnexpectedPathError(segments)
        >>> Clock().resolve_at("hour")
        Integer(value=12)
    """

    @abstractmethod
    def resolve(self, path: Iterable[str]) -> Value:
        """Resolve a sequence of path segments against this context.

        Args:
            path: Path segments; an empty path targets the context itself.

        Returns:
            The resolved value.

        Raises:
            ContextError: If the path cannot be resolved.
        """
        raise NotImplementedError

    def resolve_at(self, path: str) -> Value:
        """Resolve a dot-delimited path against this context."""
        return self.resolve(split_path(path))



def resolve(target: Any, path: Iterable[str]) -> Value:
    """Resolve a path against any supported host object.

    The first segment, if any, selects a child of an aggregate and the
    remaining segments resolve against that child. Resolution walks the
    path in a loop, so neither path length nor data depth is limited by
    the interpreter's recursion limit.

    Supported targets:
        - ``Context`` implementations: delegate to ``resolve()``
        - ``Value``: dispatch on the variant
        - ``None``: the absent optional, always ``Optional(None)``
        - ``int``/``str`` leaves: only the empty path resolves
        - ``list``/``tuple``: first segment is a non-negative index; out of
          range yields ``Optional(None)``; empty path yields an ``Array``
        - ``Mapping``, dataclass instances and ``derive_context()``
          classes: first segment is a field name

    Args:
        target: The host object to read from.
        path: Path segments.

    Returns:
        The resolved ``Value``.

    Raises:
        UnexpectedPathError: If a leaf receives a non-empty path or a field
            name is unknown.
        UnexpectedIndexError: If a sequence receives a non-index segment.
        OtherContextError: If a host ``Context`` fails, or the target type
            is not supported.
    """
    segments = list(path)
    current = target
    pos = 0

    while True:
        done = pos == len(segments)
        fields = getattr(type(current), "__context_fields__", None)

        if fields is not None:
            child = _select_field(segments, pos, fields, lambda name: getattr(current, name))
        elif isinstance(current, Context):
            return _resolve_host(current, segments[pos:])
        elif isinstance(current, Optional):
            if current.value is None:
                return NONE
            current = current.value
            continue
        elif isinstance(current, Array):
            if done:
                return current
            child = _select_index(segments, pos, current.values)
        elif isinstance(current, (Integer, String)):
            if not done:
                raise UnexpectedPathError(segments[pos:])
            return current
        elif isinstance(current, Value):
            raise OtherContextError(TypeError(f"unsupported value type: {type(current).__name__}"))
        elif current is None:
            return NONE
        elif isinstance(current, (int, str)):
            if not done:
                raise UnexpectedPathError(segments[pos:])
            return Value.from_host(current)
        elif _is_sequence(current):
            if done:
                return _materialize(current)
            child = _select_index(segments, pos, current)
        elif isinstance(current, Mapping):
            child = _select_field(segments, pos, current.keys(), current.__getitem__)
        elif dataclasses.is_dataclass(current) and not isinstance(current, type):
            names = [f.name for f in dataclasses.fields(current)]
            child = _select_field(segments, pos, names, lambda name: getattr(current, name))
        else:
            raise OtherContextError(TypeError(f"unsupported context type: {type(current).__name__}"))

        if child is _MISSING:
            return NONE
        current = child
        pos += 1


def resolve_at(target: Any, path: str) -> Value:
    """Resolve a dot-delimited path against any supported host object."""
    return resolve(target, split_path(path))


def derive_context(cls: type) -> type:
    """Class decorator that implements ``Context`` from the class fields.

    The field table is built once from ``dataclasses.fields()`` when the
    class is a dataclass, otherwise from its type hints with ``ClassVar``
    entries left out. The first path segment selects a field by exact
    name and the rest of the path resolves against the attribute's value.

    Example:
        >>> @derive_context
        ... @dataclasses.dataclass
        ... class User:
        ...     name: str
        ...     roles: list
        >>> User("ann", ["admin"]).resolve_at("roles.0")
        String(value='admin')
    """
    if dataclasses.is_dataclass(cls):
        names = tuple(f.name for f in dataclasses.fields(cls))
    else:
        names = tuple(
            name
            for name, hint in get_type_hints(cls).items()
            if hint is not ClassVar and get_origin(hint) is not ClassVar
        )

    def _resolve(self, path: Iterable[str]) -> Value:
        return resolve(self, path)

    cls.__context_fields__ = names
    cls.resolve = _resolve
    cls.resolve_at = Context.resolve_at
    Context.register(cls)
    return cls


_MISSING = object()


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray))


def _resolve_host(target: Context, segments: list[str]) -> Value:
    try:
        value = target.resolve(segments)
    except ContextError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise OtherContextError(exc) from exc
    if not isinstance(value, Value):
        raise OtherContextError(
            TypeError(f"{type(target).__name__}.resolve() returned {type(value).__name__}, not a Value")
        )
    return value


def _select_index(segments: list[str], pos: int, target: Sequence[Any]) -> Any:
    head = segments[pos]
    try:
        index = parse_index(head)
    except ValueError as exc:
        raise UnexpectedIndexError(head, str(exc)) from exc

    if index >= len(target):
        return _MISSING
    return target[index]


def _select_field(segments: list[str], pos: int, names: Collection[str], get) -> Any:
    if pos == len(segments):
        # Aggregates have no value representation of their own.
        raise UnexpectedPathError(())

    head = segments[pos]
    if head not in names:
        raise UnexpectedPathError([head])
    return get(head)


def _materialize(target: Sequence[Any]) -> Array:
    """Convert a host sequence, nested sequences included, into an ``Array``."""
    stack: list[tuple[Iterator[Any], list[Value]]] = [(iter(target), [])]
    while True:
        items, built = stack[-1]
        for item in items:
            if _is_sequence(item):
                stack.append((iter(item), []))
                break
            built.append(resolve(item, []))
        else:
            stack.pop()
            array = Array(tuple(built))
            if not stack:
                return array
            stack[-1][1].append(array)
