from __future__ import annotations

import re
from collections.abc import Iterable

_INDEX_RE = re.compile(r"\+?[0-9]+")

DEFAULT_MAX_DEPTH = 64
"""Default limit on operator and literal nesting in rule documents."""


def split_path(path: str) -> list[str]:
    """Split a dot-delimited path into its segments.

    Splitting is literal: no segment is dropped, so ``""`` yields one
    empty segment and ``"a..b"`` yields ``["a", "", "b"]``.

    Examples:
        >>> split_path("bar.array.0")
        ['bar', 'array', '0']
        >>> split_path("")
        ['']
    """
    return path.split(".")


def render_path(segments: Iterable[str]) -> str:
    """Render path segments back into a dot-delimited string.

    Literal dots inside a segment are escaped as ``\\.`` so the rendered
    path stays unambiguous in error messages.

    Examples:
        >>> render_path(["a", "b.c"])
        'a.b\\\\.c'
    """
    return ".".join(s.replace(".", "\\.") for s in segments)


def parse_index(segment: str) -> int:
    """Parse a path segment as a non-negative sequence index.

    Only ASCII digits with an optional leading ``+`` are accepted;
    whitespace, underscores and signs other than ``+`` are rejected.

    Raises:
        ValueError: If the segment is not a non-negative integer.
    """
    if not segment:
        raise ValueError("cannot parse integer from empty string")
    if not _INDEX_RE.fullmatch(segment):
        raise ValueError(f"invalid digit found in string {segment!r}")
    return int(segment)
