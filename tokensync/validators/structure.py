"""Value-level checks for normalised token trees."""

from __future__ import annotations

import re
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..loader import LoadedTokens
from ..logging import get_logger
from ..models import TokenDescriptor, iter_tokens
from .base import ValidationResult

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_COLOR = re.compile(r"^rgba?\([\d\s,./%]+\)$", re.IGNORECASE)
_HSL_COLOR = re.compile(r"^hsla?\([\d\s,%./deg]+\)$", re.IGNORECASE)
_NAMED_COLOR = re.compile(r"^[a-z]+$", re.IGNORECASE)
_DIMENSION = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:[a-z%]+)?$", re.IGNORECASE)
_REFERENCE = re.compile(r"\{[^{}]+\}")
_FONT_WEIGHT = re.compile(r"^(?:[1-9]00|normal|bold|lighter|bolder)$", re.IGNORECASE)

_CATEGORY_TYPOS: Dict[str, str] = {
    "colour": "colors",
    "colours": "colors",
    "color": "colors",
    "spacings": "spacing",
    "typo": "typography",
    "fonts": "typography",
}

_COMMON_SHADES = ("100", "200", "300", "400", "500", "600", "700", "800", "900")
_COMMON_SPACING = ("0", "1", "2", "4", "8", "16")
_NAMED_SHADES = {"DEFAULT", "default", "light", "dark", "foreground", "contrast"}
_TYPOGRAPHY_GROUPS = ("fontFamily", "fontSize", "fontWeight")
_DUPLICATE_EXEMPT = {"0", "transparent", "none"}


def is_valid_color(value: str) -> bool:
    value = value.strip()
    if _REFERENCE.search(value):
        return True
    return bool(
        _HEX_COLOR.match(value)
        or _RGB_COLOR.match(value)
        or _HSL_COLOR.match(value)
        or _NAMED_COLOR.match(value)
    )


def is_valid_dimension(value: str) -> bool:
    value = value.strip()
    if _REFERENCE.search(value):
        return True
    return value in {"0", "auto"} or bool(_DIMENSION.match(value))


class TokenValidator:
    """Checks token values and structure, memoising results per document hash."""

    name = "structure"

    def __init__(
        self,
        *,
        required: Sequence[str] = ("colors",),
        optional: Sequence[str] = ("spacing", "typography"),
    ) -> None:
        self.required = list(required)
        self.optional = list(optional)
        self.logger = get_logger("validators.structure")
        self._memo: "OrderedDict[str, ValidationResult]" = OrderedDict()
        self._memo_limit = 32

    def invalidate(self, content_hash: Optional[str] = None) -> None:
        """Drop one memoised result, or all of them when no hash is given."""
        if content_hash is None:
            self._memo.clear()
        else:
            self._memo.pop(content_hash, None)

    def validate(self, loaded: LoadedTokens) -> ValidationResult:
        cached = self._memo.get(loaded.content_hash)
        if cached is not None:
            self.logger.debug("Validation memo hit for %s", loaded.content_hash[:12])
            return cached

        result = ValidationResult()
        self._check_metadata(loaded.metadata, result)
        self._check_categories(loaded.tree, result)
        self._check_colors(loaded.tree.get("colors"), result)
        self._check_spacing(loaded.tree.get("spacing"), result)
        self._check_typography(loaded.tree.get("typography"), result)
        self._check_dimensions(loaded.tree.get("borderRadius"), "borderRadius", result)
        self._check_duplicates(loaded.tree, result)

        tokens = list(iter_tokens(loaded.tree))
        result.summary = {
            "categories": len(loaded.tree),
            "tokens": len(tokens),
            "errors": len(result.errors),
            "warnings": len(result.warnings),
        }

        self._memo[loaded.content_hash] = result
        while len(self._memo) > self._memo_limit:
            self._memo.popitem(last=False)
        return result

    def _check_metadata(self, metadata: Mapping[str, Any], result: ValidationResult) -> None:
        if "$themes" in metadata and not isinstance(metadata["$themes"], list):
            result.warnings.append("$themes should be an array in Token Studio documents")
        if "$metadata" in metadata and not isinstance(metadata["$metadata"], Mapping):
            result.warnings.append("$metadata should be an object in Token Studio documents")

    def _check_categories(self, tree: Mapping[str, Any], result: ValidationResult) -> None:
        for typo, correct in _CATEGORY_TYPOS.items():
            if typo in tree and correct not in tree:
                result.warnings.append(f'Found "{typo}" - did you mean "{correct}"?')
        for category in self.required:
            if category not in tree:
                result.errors.append(f"Missing required token category: {category}")
        for category in self.optional:
            if category not in tree:
                result.warnings.append(f"Optional token category not found: {category}")

    def _check_colors(self, colors: Any, result: ValidationResult) -> None:
        if not isinstance(colors, Mapping):
            return
        if "primary" not in colors:
            result.warnings.append("No primary palette defined (colors.primary)")
        for group, node in colors.items():
            if isinstance(node, TokenDescriptor):
                if not is_valid_color(node.value):
                    result.errors.append(f'Invalid color value: colors.{group} = "{node.value}"')
                continue
            numeric_shades = []
            for shade, path, descriptor in _walk(node, f"colors.{group}"):
                if not is_valid_color(descriptor.value):
                    result.errors.append(f'Invalid color value: {path} = "{descriptor.value}"')
                if shade.isdigit():
                    numeric_shades.append(shade)
                elif shade not in _NAMED_SHADES:
                    result.warnings.append(
                        f"Unusual shade value: {path} (consider using 50, 100, 200 ... 900, 950)"
                    )
            if numeric_shades:
                missing = [shade for shade in _COMMON_SHADES if shade not in numeric_shades]
                if missing:
                    result.warnings.append(
                        f"Consider adding common shades to colors.{group}: {', '.join(missing)}"
                    )

    def _check_spacing(self, spacing: Any, result: ValidationResult) -> None:
        if not isinstance(spacing, Mapping):
            return
        for _, path, descriptor in _walk(spacing, "spacing"):
            if not is_valid_dimension(descriptor.value):
                result.errors.append(f'Invalid spacing value: {path} = "{descriptor.value}"')
        missing = [key for key in _COMMON_SPACING if key not in spacing]
        if missing:
            result.warnings.append(f"Consider adding common spacing values: {', '.join(missing)}")

    def _check_typography(self, typography: Any, result: ValidationResult) -> None:
        if not isinstance(typography, Mapping):
            return
        for group in _TYPOGRAPHY_GROUPS:
            if group not in typography:
                result.warnings.append(f"Missing typography category: typography.{group}")

        families = typography.get("fontFamily")
        if isinstance(families, Mapping):
            if "sans" not in families:
                result.warnings.append(
                    "Missing sans-serif font family (typography.fontFamily.sans)"
                )
            for _, path, descriptor in _walk(families, "typography.fontFamily"):
                if not descriptor.value.strip(" ,'\""):
                    result.errors.append(f'Invalid font family: {path} = "{descriptor.value}"')

        self._check_dimensions(typography.get("fontSize"), "typography.fontSize", result)

        weights = typography.get("fontWeight")
        if isinstance(weights, Mapping):
            for _, path, descriptor in _walk(weights, "typography.fontWeight"):
                value = descriptor.value.strip()
                if not (_FONT_WEIGHT.match(value) or _REFERENCE.search(value)):
                    result.warnings.append(f'Unusual font weight: {path} = "{value}"')

    def _check_dimensions(self, node: Any, prefix: str, result: ValidationResult) -> None:
        if not isinstance(node, Mapping):
            return
        label = {
            "borderRadius": "border radius",
            "typography.fontSize": "font size",
        }.get(prefix, "dimension")
        for _, path, descriptor in _walk(node, prefix):
            if not is_valid_dimension(descriptor.value):
                result.errors.append(f'Invalid {label}: {path} = "{descriptor.value}"')

    def _check_duplicates(self, tree: Mapping[str, Any], result: ValidationResult) -> None:
        seen: "OrderedDict[str, List[str]]" = OrderedDict()
        for path, descriptor in iter_tokens(tree):
            value = descriptor.value
            if value in _DUPLICATE_EXEMPT or _REFERENCE.search(value):
                continue
            seen.setdefault(value, []).append(path)
        for value, paths in seen.items():
            if len(paths) > 1:
                result.warnings.append(f'Duplicate value "{value}" found in: {", ".join(paths)}')


def _walk(node: Any, prefix: str):
    """Yield ``(key, path, descriptor)`` for every leaf under ``node``."""
    if isinstance(node, TokenDescriptor):
        yield prefix.rsplit(".", 1)[-1], prefix, node
        return
    if not isinstance(node, Mapping):
        return
    for key, child in node.items():
        path = f"{prefix}.{key}"
        if isinstance(child, TokenDescriptor):
            yield str(key), path, child
        else:
            yield from _walk(child, path)


__all__ = ["TokenValidator", "is_valid_color", "is_valid_dimension"]
