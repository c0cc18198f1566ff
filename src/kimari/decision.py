from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class Decision(Enum):
    """Two-valued outcome of evaluating an operator or rule.

    ``bool(decision)`` is ``True`` only for ``ACCEPT``.
    """

    ACCEPT = "accept"
    REJECT = "reject"

    @classmethod
    def from_bool(cls, value: bool) -> Decision:
        return cls.ACCEPT if value else cls.REJECT

    def __bool__(self) -> bool:
        return self is Decision.ACCEPT

    @classmethod
    def all(cls, decisions: Iterable[Decision]) -> Decision:
        """Fold decisions with logical AND.

        Items are pulled one at a time, left to right. The fold returns
        ``REJECT`` at the first ``REJECT`` without pulling any later item,
        and an exception raised while producing an item propagates at once.
        An exhausted (or empty) iterable yields ``ACCEPT``.

        Pass a generator to keep evaluation lazy:

            >>> Decision.all(op.evaluate(ctx) for op in operators)  # doctest: +SKIP
        """
        for decision in decisions:
            if decision is cls.REJECT:
                return cls.REJECT
        return cls.ACCEPT

    @classmethod
    def any(cls, decisions: Iterable[Decision]) -> Decision:
        """Fold decisions with logical OR.

        Stops at the first ``ACCEPT``; an exhausted (or empty) iterable
        yields ``REJECT``. Laziness and error propagation are the same as
        ``all()``.
        """
        for decision in decisions:
            if decision is cls.ACCEPT:
                return cls.ACCEPT
        return cls.REJECT
