"""Helpers shared by the mobile and native dialect generators."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import ResolvedTokenTree, TokenDescriptor, get_node
from .units import (
    ConversionError,
    RGBA,
    ShadowLayer,
    format_number,
    is_percentage,
    parse_box_shadow,
    to_native_number,
    to_plain_number,
    try_parse_color,
)

Leaf = Tuple[List[str], str]

# Groups whose values are dimensions, keyed by a short label.
DIMENSION_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("spacing", ("spacing",)),
    ("borderRadius", ("borderRadius",)),
    ("fontSize", ("typography", "fontSize")),
    ("lineHeight", ("typography", "lineHeight")),
    ("letterSpacing", ("typography", "letterSpacing")),
    ("breakpoints", ("breakpoints",)),
)

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

logger = get_logger("generators.native")


def leaves(tree: ResolvedTokenTree, group: Sequence[str]) -> List[Leaf]:
    """Return ``(relative_parts, value)`` for every token under ``group``."""
    node = get_node(tree, ".".join(group))
    found: List[Leaf] = []
    if isinstance(node, TokenDescriptor):
        found.append(([group[-1]], node.value))
    elif isinstance(node, Mapping):
        _collect(node, [], found)
    return found


def _collect(node: Mapping[str, Any], prefix: List[str], found: List[Leaf]) -> None:
    for key, child in node.items():
        parts = prefix + [str(key)]
        if isinstance(child, TokenDescriptor):
            found.append((parts, child.value))
        elif isinstance(child, Mapping):
            _collect(child, parts, found)


def native_colors(tree: ResolvedTokenTree, dialect: str) -> List[Tuple[List[str], RGBA]]:
    """Colors that have a native representation; other syntaxes are skipped."""
    converted: List[Tuple[List[str], RGBA]] = []
    for parts, value in leaves(tree, ("colors",)):
        color = try_parse_color(value)
        if color is None:
            logger.debug("%s: skipping colors.%s with value %r", dialect, ".".join(parts), value)
            continue
        converted.append((parts, color))
    return converted


def dimension(value: str, rem_base: float, path: str) -> float:
    try:
        return to_native_number(value, rem_base)
    except ConversionError as exc:
        raise ConversionError(f"{path}: {exc}") from exc


def number(value: str, path: str) -> float:
    try:
        return to_plain_number(value)
    except ConversionError as exc:
        raise ConversionError(f"{path}: {exc}") from exc


def shadow(value: str, rem_base: float, path: str) -> Optional[ShadowLayer]:
    """First layer of a box-shadow, or None for ``none``."""
    try:
        layers = parse_box_shadow(value, rem_base)
    except ConversionError as exc:
        raise ConversionError(f"{path}: {exc}") from exc
    return layers[0] if layers else None


def elevation(layer: ShadowLayer) -> int:
    return int(round(abs(layer.offset_y)))


def dimension_value(value: str, rem_base: float, path: str) -> Any:
    """Number for absolute values; percentages stay strings."""
    if is_percentage(value):
        return value
    return dimension(value, rem_base, path)


def js_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def js_key(key: str) -> str:
    return key if _JS_IDENTIFIER.match(key) else js_string(key)


def js_literal(value: Any, indent: int = 0) -> str:
    """Render nested dicts, strings and numbers as a JavaScript object literal."""
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        pad = "  " * (indent + 1)
        body = [f"{pad}{js_key(str(key))}: {js_literal(child, indent + 1)}," for key, child in value.items()]
        return "{\n" + "\n".join(body) + "\n" + "  " * indent + "}"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return js_string(value)
    return json.dumps(value)


def nest(pairs: Sequence[Tuple[List[str], Any]]) -> Dict[str, Any]:
    """Rebuild a nested mapping from ``(parts, value)`` pairs."""
    root: Dict[str, Any] = {}
    for parts, value in pairs:
        node = root
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value
    return root
