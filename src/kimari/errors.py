from __future__ import annotations

from collections.abc import Iterable

from .utils import render_path


class KimariError(Exception):
    """Base exception for all kimari errors.

    All other exceptions in this package inherit from this class,
    allowing callers to catch all kimari-related errors with
    a single except clause.
    """


class ContextError(KimariError):
    """Raised when a path cannot be resolved against a context."""


class UnexpectedPathError(ContextError):
    """Raised when a path has no corresponding field or leaf.

    Common causes:
        - A non-empty path remains when an ``int`` or ``str`` leaf is reached
        - The first segment names a field the aggregate does not have
        - An aggregate is asked for its own value (empty path)

    Attributes:
        path: The offending path segments. The message renders them
            joined with ``.``, literal dots escaped as ``\\.``.
    """

    def __init__(self, path: Iterable[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"Unexpected path: {render_path(self.path)}")


class UnexpectedIndexError(ContextError):
    """Raised when a sequence receives a segment that is not an index.

    The original ``ValueError`` is chained as ``__cause__``.

    Attributes:
        segment: The segment that failed to parse.
    """

    def __init__(self, segment: str, reason: str) -> None:
        self.segment = segment
        super().__init__(f"Unexpected index in an array: {reason}")


class OtherContextError(ContextError):
    """Wraps an error raised by a host ``Context`` implementation.

    The wrapped exception is not inspected; its message becomes this
    error's message.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(str(cause))


class OperatorError(KimariError):
    """Raised when an operator fails during evaluation."""


class UnexpectedContextError(OperatorError):
    """Raised when an operator cannot read its path from the context.

    Attributes:
        context_error: The underlying ``ContextError``.
    """

    def __init__(self, context_error: ContextError) -> None:
        self.context_error = context_error
        super().__init__(f"Unexpected context: {context_error}")


class RulesLoadError(KimariError):
    """Raised when a rules document cannot be loaded or parsed.

    Common causes:
        - Invalid JSON or YAML syntax in the source
        - File not found or unreadable
        - Top level is not a mapping of rule names to rule bodies
        - An operator body is invalid (wraps ``OperatorSyntaxError``
          and ``UnknownOperatorError``)
        - Unsupported source type passed to ``load_rules()``
    """


class OperatorSyntaxError(KimariError):
    """Raised when an operator document is syntactically invalid.

    Common causes:
        - Operator body is not a mapping
        - Missing or empty ``type`` field
        - ``operators`` is not a list (``all``/``any``)
        - ``where`` is missing or not a string, or ``to`` is missing
          (``equals``/``notEquals``)
        - A literal that is not an integer, string, list or null
        - Nesting deeper than the registry's ``max_depth``
    """


class UnknownOperatorError(KimariError):
    """Raised when an operator type is not found in the registry.

    The exception message contains the unknown type name.
    """
