from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import OperatorSyntaxError, RulesLoadError, UnknownOperatorError
from .registry import OperatorRegistry
from .rules import Rules

logger = logging.getLogger(__name__)


def load_rules(
    source: Any,
    registry: OperatorRegistry | None = None,
    *,
    base_dir: str | None = None,
    max_depth: int | None = None,
) -> Rules:
    """Load and validate rules from a mapping, document string, or file path.

    Args:
        source: Rules source. Can be:
            - A ``Mapping`` of rule name to rule body
            - An inline JSON or YAML document (detected by a leading ``{``
              after stripping whitespace, or by a line break)
            - A file path (``str`` or ``Path``). Files ending in ``.json``
              are parsed as JSON, anything else as YAML.
        registry: Optional operator registry. If ``None``, uses the default
            registry from ``get_default_registry()``.
        base_dir: Base directory for resolving relative file paths. Only
            used when ``source`` is a relative path.
        max_depth: Nesting limit for operators and literals. If ``None``,
            the registry's own ``max_depth`` applies.

    Returns:
        The validated ``Rules``.

    Raises:
        RulesLoadError: If the source cannot be loaded, parsed, or fails
            validation. Wraps underlying ``json.JSONDecodeError``,
            ``yaml.YAMLError``, ``OSError``, ``UnicodeDecodeError``,
            ``RecursionError`` (parsers on deeply nested input),
            ``OperatorSyntaxError`` and ``UnknownOperatorError`` exceptions.

    Examples:
        >>> load_rules({"always": {"type": "all", "operators": []}})
        Rules({'always': Rule(operator=AllOperator(operators=()))})

        >>> load_rules("rules/access.yaml", base_dir="/app/config")
        Rules(...)
    """
    try:
        if isinstance(source, Path):
            data = _read_file(source, base_dir)
        elif isinstance(source, str):
            text = source.strip()
            if text.startswith("{") or "\n" in text:
                logger.debug("loading rules from inline document")
                data = yaml.safe_load(source)
            else:
                data = _read_file(Path(source), base_dir)
        elif isinstance(source, Mapping):
            data = source
        else:
            raise RulesLoadError(f"Unsupported rules source type: {type(source).__name__}")

        if data is None:
            data = {}
        rules = Rules.from_document(data, registry, max_depth=max_depth)
        logger.debug("loaded %d rules", len(rules))
        return rules
    except (
        json.JSONDecodeError,
        yaml.YAMLError,
        OSError,
        UnicodeDecodeError,
        RecursionError,
        OperatorSyntaxError,
        UnknownOperatorError,
    ) as exc:
        raise RulesLoadError(str(exc)) from exc


def dump_rules(rules: Rules, *, fmt: str = "yaml") -> str:
    """Render rules as a YAML or JSON document.

    The output loads back through ``load_rules()`` into equal rules.

    Args:
        rules: The rules to render.
        fmt: ``"yaml"`` or ``"json"``.

    Raises:
        ValueError: If ``fmt`` is not supported.
    """
    doc = rules.to_document()
    if fmt == "yaml":
        return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(doc, indent=2)
    raise ValueError(f"unsupported format {fmt!r}, expected 'yaml' or 'json'")


def _read_file(path: Path, base_dir: str | None) -> Any:
    if not path.is_absolute() and base_dir:
        path = Path(base_dir) / path
    logger.debug("loading rules from %s", path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)
