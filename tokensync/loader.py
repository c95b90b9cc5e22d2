"""Token document loading and normalisation.

Documents arrive in one of two shapes:

* **flat**: ``{category: {key: {"value": ..., "type": ...}}}``
* **token-studio**: token sets (``core``, ``semantic``) holding categories,
  ``$``-prefixed metadata at any level and ``$value``/``$type`` leaves.

Both are normalised into a single :data:`~tokensync.models.TokenTree` whose
leaves are :class:`~tokensync.models.TokenDescriptor` instances. The dual
``value``/``$value`` spelling is handled here and nowhere else.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .hashing import hash_bytes
from .logging import get_logger
from .models import TokenDescriptor, TokenTree

TOKEN_SETS: Tuple[str, ...] = ("core", "semantic")
_STUDIO_MARKERS = ("core", "semantic", "$themes", "$metadata")
_VALUE_KEYS = ("$value", "value")
_TYPE_KEYS = ("$type", "type")
_DESCRIPTION_KEYS = ("$description", "description")

# Later segments win, so typography.fontSize infers "dimension".
_TYPE_BY_SEGMENT: Dict[str, str] = {
    "colors": "color",
    "spacing": "spacing",
    "borderRadius": "dimension",
    "breakpoints": "dimension",
    "fontSize": "dimension",
    "lineHeight": "dimension",
    "letterSpacing": "dimension",
    "fontFamily": "fontFamily",
    "fontWeight": "fontWeight",
    "shadows": "boxShadow",
    "opacity": "opacity",
    "zIndex": "other",
}

_SHADOW_TYPES = {"boxshadow", "shadow"}

logger = get_logger("loader")


class TokenStructureError(RuntimeError):
    """Raised when a token document is structurally invalid.

    ``messages`` carries every problem found in the pass, not just the first.
    """

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        summary = "; ".join(self.messages)
        super().__init__(f"Invalid token document ({len(self.messages)} problem(s)): {summary}")


@dataclass
class LoadedTokens:
    """A normalised token tree together with facts about its source."""

    tree: TokenTree
    content_hash: str
    shape: str
    source: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def get_value(node: Mapping[str, Any]) -> Any:
    for key in _VALUE_KEYS:
        if key in node:
            return node[key]
    return None


def get_type(node: Mapping[str, Any]) -> Optional[str]:
    for key in _TYPE_KEYS:
        value = node.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def get_description(node: Mapping[str, Any]) -> Optional[str]:
    for key in _DESCRIPTION_KEYS:
        value = node.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def read_document(path: Path) -> Tuple[Any, str]:
    """Read and parse a JSON token document, returning it with its content hash."""
    if not path.exists():
        raise FileNotFoundError(f"Tokens file not found: {path}")
    raw = path.read_bytes()
    duplicates: List[str] = []

    def _pairs(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                duplicates.append(key)
            result[key] = value
        return result

    try:
        document = json.loads(raw.decode("utf-8"), object_pairs_hook=_pairs)
    except UnicodeDecodeError as exc:
        raise TokenStructureError([f"{path.name} is not valid UTF-8: {exc}"]) from exc
    except json.JSONDecodeError as exc:
        raise TokenStructureError(
            [f"Malformed JSON in {path.name} at line {exc.lineno} column {exc.colno}: {exc.msg}"]
        ) from exc

    if duplicates:
        names = ", ".join(sorted(set(duplicates)))
        raise TokenStructureError([f"Duplicate keys in {path.name}: {names}"])
    return document, hash_bytes(raw)


def detect_shape(document: Mapping[str, Any]) -> str:
    if any(marker in document for marker in _STUDIO_MARKERS):
        return "token-studio"
    if _uses_dollar_leaves(document):
        return "token-studio"
    return "flat"


def normalize(document: Any, required: Sequence[str] = ("colors",)) -> TokenTree:
    """Translate a raw document into a canonical token tree.

    Raises :class:`TokenStructureError` listing every structural problem.
    """
    errors: List[str] = []
    if not isinstance(document, Mapping):
        raise TokenStructureError(["Token document must be a JSON object"])

    sources: List[Tuple[str, Mapping[str, Any]]] = []
    if detect_shape(document) == "token-studio":
        for set_name in TOKEN_SETS:
            token_set = document.get(set_name)
            if token_set is None:
                continue
            if not isinstance(token_set, Mapping):
                errors.append(f"Token set '{set_name}' must be an object")
                continue
            sources.append((set_name, token_set))
        loose = {
            key: value
            for key, value in document.items()
            if key not in TOKEN_SETS and not key.startswith("$")
        }
        if loose:
            sources.append(("<root>", loose))
    else:
        sources.append(("<root>", document))

    tree: TokenTree = {}
    owners: Dict[str, str] = {}
    for set_name, token_set in sources:
        for category, node in token_set.items():
            if category.startswith("$"):
                continue
            if not isinstance(node, Mapping):
                errors.append(f"Token category '{category}' must be an object")
                continue
            converted = _convert_group(node, [category], errors)
            target = tree.setdefault(category, {})
            _merge_into(target, converted, category, set_name, owners, errors)

    for category in required:
        if category not in tree:
            errors.append(f"Missing required token category: {category}")

    if errors:
        raise TokenStructureError(errors)
    return tree


def load_tokens(path: Path, required: Sequence[str] = ("colors",)) -> LoadedTokens:
    document, content_hash = read_document(path)
    tree = normalize(document, required)
    metadata = {
        key: value
        for key, value in document.items()
        if isinstance(key, str) and key.startswith("$")
    }
    shape = detect_shape(document)
    logger.debug("Loaded %s tokens document from %s", shape, path)
    return LoadedTokens(
        tree=tree,
        content_hash=content_hash,
        shape=shape,
        source=path,
        metadata=metadata,
    )


def _uses_dollar_leaves(node: Any) -> bool:
    if not isinstance(node, Mapping):
        return False
    if "$value" in node:
        return True
    return any(_uses_dollar_leaves(child) for child in node.values())


def _is_leaf(node: Mapping[str, Any]) -> bool:
    return any(key in node for key in _VALUE_KEYS + _TYPE_KEYS)


def _convert_group(node: Mapping[str, Any], path: List[str], errors: List[str]) -> Dict[str, Any]:
    group: Dict[str, Any] = {}
    for key, child in node.items():
        key = str(key)
        if key.startswith("$"):
            continue
        child_path = path + [key]
        dotted = ".".join(child_path)
        if isinstance(child, Mapping):
            if _is_leaf(child):
                descriptor = _convert_leaf(child, child_path, errors)
                if descriptor is not None:
                    group[key] = descriptor
            elif not any(not str(name).startswith("$") for name in child):
                errors.append(f"Token '{dotted}' has neither a value nor a type")
            elif set(child) <= set(_DESCRIPTION_KEYS):
                errors.append(f"Token '{dotted}' has neither a value nor a type")
            else:
                group[key] = _convert_group(child, child_path, errors)
            continue
        value = _coerce_scalar(child)
        if value is None:
            errors.append(f"Token '{dotted}' has an unsupported value: {child!r}")
            continue
        group[key] = TokenDescriptor(value=value, type=_infer_type(child_path))
    return group


def _convert_leaf(
    node: Mapping[str, Any], path: List[str], errors: List[str]
) -> Optional[TokenDescriptor]:
    dotted = ".".join(path)
    raw_value = get_value(node)
    token_type = get_type(node)
    if raw_value is None:
        errors.append(f"Token '{dotted}' is missing a value")
        return None

    if isinstance(raw_value, (Mapping, list)):
        if not _looks_like_shadow(raw_value, token_type, path):
            errors.append(f"Token '{dotted}' has an unsupported composite value")
            return None
        value = _shadow_to_css(raw_value)
        if value is None:
            errors.append(f"Token '{dotted}' has a malformed shadow value")
            return None
    else:
        value = _coerce_scalar(raw_value)
        if value is None:
            errors.append(f"Token '{dotted}' has an unsupported value: {raw_value!r}")
            return None

    return TokenDescriptor(
        value=value,
        type=token_type or _infer_type(path),
        description=get_description(node),
    )


def _merge_into(
    target: Dict[str, Any],
    incoming: Mapping[str, Any],
    prefix: str,
    set_name: str,
    owners: Dict[str, str],
    errors: List[str],
) -> None:
    for key, node in incoming.items():
        path = f"{prefix}.{key}"
        existing = target.get(key)
        if existing is None:
            target[key] = node
            _claim(node, path, set_name, owners)
            continue
        if isinstance(existing, dict) and isinstance(node, Mapping):
            _merge_into(existing, node, path, set_name, owners, errors)
            continue
        first = owners.get(path, "<root>")
        errors.append(f"Duplicate token path '{path}' defined in '{first}' and '{set_name}'")


def _claim(node: Any, path: str, set_name: str, owners: Dict[str, str]) -> None:
    owners[path] = set_name
    if isinstance(node, Mapping):
        for key, child in node.items():
            _claim(child, f"{path}.{key}", set_name, owners)


def _coerce_scalar(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return value
    return None


def _infer_type(path: Sequence[str]) -> str:
    inferred = "other"
    for segment in path:
        if segment in _TYPE_BY_SEGMENT:
            inferred = _TYPE_BY_SEGMENT[segment]
    return inferred


def _looks_like_shadow(value: Any, token_type: Optional[str], path: Sequence[str]) -> bool:
    if token_type and token_type.lower() in _SHADOW_TYPES:
        return True
    if "shadows" in path:
        return True
    layers = value if isinstance(value, list) else [value]
    return all(isinstance(layer, Mapping) and {"x", "y"} <= set(layer) for layer in layers)


def _shadow_to_css(value: Any) -> Optional[str]:
    layers = value if isinstance(value, list) else [value]
    rendered: List[str] = []
    for layer in layers:
        if isinstance(layer, str):
            rendered.append(layer)
            continue
        if not isinstance(layer, Mapping):
            return None
        parts = []
        if str(layer.get("type", "")).lower() == "innershadow" or layer.get("inset") is True:
            parts.append("inset")
        for key in ("x", "y", "blur", "spread"):
            part = _shadow_length(layer.get(key, 0))
            if part is None:
                return None
            parts.append(part)
        color = layer.get("color")
        if isinstance(color, str) and color:
            parts.append(color)
        rendered.append(" ".join(parts))
    return ", ".join(rendered) if rendered else None


def _shadow_length(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        text = _coerce_scalar(value) or "0"
        return text if text == "0" else f"{text}px"
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return "0"
        if stripped.lstrip("-").replace(".", "", 1).isdigit() and stripped not in {"0", "-0"}:
            return f"{stripped}px"
        return stripped
    return None


__all__ = [
    "LoadedTokens",
    "TOKEN_SETS",
    "TokenStructureError",
    "detect_shape",
    "get_description",
    "get_type",
    "get_value",
    "load_tokens",
    "normalize",
    "read_document",
]
