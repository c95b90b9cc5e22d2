"""Declarative table of token usage detection patterns.

Each :class:`DetectionPattern` pairs a regular expression with a normalizer
that maps one match to a normalized token path such as
``colors.primary.500``. Adding a pattern means adding a row to
:data:`DEFAULT_PATTERNS`; the scanner itself never changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

Normalizer = Callable[["re.Match[str]"], Optional[str]]

CATEGORIES: Tuple[str, ...] = (
    "colors",
    "spacing",
    "typography",
    "borderRadius",
    "shadows",
    "opacity",
    "zIndex",
    "breakpoints",
    "transitions",
)

# Kebab-case variable prefixes mapped to dotted token prefixes. Longest first.
_VARIABLE_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("typography-font-size-", "typography.fontSize."),
    ("typography-font-weight-", "typography.fontWeight."),
    ("typography-font-family-", "typography.fontFamily."),
    ("typography-line-height-", "typography.lineHeight."),
    ("typography-letter-spacing-", "typography.letterSpacing."),
    ("transitions-duration-", "transitions.duration."),
    ("transition-duration-", "transitions.duration."),
    ("transitions-easing-", "transitions.easing."),
    ("transition-easing-", "transitions.easing."),
    ("letter-spacing-", "typography.letterSpacing."),
    ("border-radius-", "borderRadius."),
    ("font-weight-", "typography.fontWeight."),
    ("font-family-", "typography.fontFamily."),
    ("line-height-", "typography.lineHeight."),
    ("breakpoints-", "breakpoints."),
    ("breakpoint-", "breakpoints."),
    ("font-size-", "typography.fontSize."),
    ("typography-", "typography."),
    ("spacing-", "spacing."),
    ("opacity-", "opacity."),
    ("shadows-", "shadows."),
    ("z-index-", "zIndex."),
    ("colors-", "colors."),
    ("shadow-", "shadows."),
    ("radius-", "borderRadius."),
    ("color-", "colors."),
    ("space-", "spacing."),
)


@dataclass(frozen=True)
class DetectionPattern:
    """One usage detection rule.

    ``extensions`` limits the rule to certain file suffixes; ``None`` applies
    it everywhere.
    """

    name: str
    regex: "re.Pattern[str]"
    normalizer: Normalizer
    extensions: Optional[frozenset] = None

    def applies_to(self, suffix: str) -> bool:
        return self.extensions is None or suffix.lower() in self.extensions

    def find(self, text: str):
        """Yield normalized token names for every match in ``text``."""
        for match in self.regex.finditer(text):
            token = self.normalizer(match)
            if token:
                yield token


def normalize_variable(name: str) -> str:
    """``colors-primary-500`` -> ``colors.primary.500``; unknown prefixes pass through."""
    lowered = name.lower()
    for prefix, dotted in _VARIABLE_PREFIXES:
        if lowered.startswith(prefix) and len(name) > len(prefix):
            remainder = name[len(prefix):]
            return dotted + remainder.replace("-", ".")
    return name


def normalize_reference(expression: str) -> str:
    """``colors.primary[500]`` or ``colors['primary'].500`` -> ``colors.primary.500``."""
    text = re.sub(r"\[\s*['\"]?([^'\"\]]+)['\"]?\s*\]", r".\1", expression)
    return text.strip(".")


def token_category(token: str) -> str:
    """Best-effort category for a normalized token name."""
    head = token.split(".", 1)[0]
    if head in CATEGORIES:
        return head
    lowered = token.lower()
    if any(word in lowered for word in ("color", "primary", "secondary")):
        return "colors"
    if "spacing" in lowered or "space" in lowered:
        return "spacing"
    if "font" in lowered or "text" in lowered:
        return "typography"
    if "border" in lowered or "radius" in lowered:
        return "borderRadius"
    if "shadow" in lowered:
        return "shadows"
    if "opacity" in lowered:
        return "opacity"
    return "other"


def _group(template: str, default: Optional[str] = None) -> Normalizer:
    def _normalize(match: "re.Match[str]") -> Optional[str]:
        values = [value if value is not None else default for value in match.groups()]
        if any(value is None for value in values):
            return None
        return template.format(*values)

    return _normalize


_BOUNDARY_BEFORE = r"(?<![\w-])"
_BOUNDARY_AFTER = r"(?![\w-])"

DEFAULT_PATTERNS: Tuple[DetectionPattern, ...] = (
    DetectionPattern(
        name="css-variable",
        regex=re.compile(r"var\(\s*--([A-Za-z0-9_-]+)"),
        normalizer=lambda match: normalize_variable(match.group(1)),
    ),
    DetectionPattern(
        name="scss-variable",
        regex=re.compile(r"\$([A-Za-z][A-Za-z0-9_-]*)"),
        normalizer=lambda match: normalize_variable(match.group(1)),
        extensions=frozenset({".scss", ".sass"}),
    ),
    DetectionPattern(
        name="token-reference",
        regex=re.compile(
            r"\b(?:tokens|theme|designTokens)\.("
            + "|".join(CATEGORIES)
            + r")((?:\.[A-Za-z0-9_]+|\[\s*['\"]?[A-Za-z0-9_.-]+['\"]?\s*\])+)"
        ),
        normalizer=lambda match: normalize_reference(match.group(1) + match.group(2)),
    ),
    DetectionPattern(
        name="tailwind-color",
        regex=re.compile(
            _BOUNDARY_BEFORE
            + r"(?:text|bg|border|ring|fill|stroke|from|via|to|outline|divide|placeholder|accent|decoration|caret)"
            + r"-([a-z]+)-(\d{2,3})(?:/\d+)?"
            + _BOUNDARY_AFTER
        ),
        normalizer=_group("colors.{}.{}"),
    ),
    DetectionPattern(
        name="tailwind-spacing",
        regex=re.compile(
            _BOUNDARY_BEFORE
            + r"-?(?:p|px|py|pt|pr|pb|pl|ps|pe|m|mx|my|mt|mr|mb|ml|ms|me|gap|gap-x|gap-y"
            + r"|space-x|space-y|inset|inset-x|inset-y|top|right|bottom|left|w|h"
            + r"|min-w|min-h|max-h|scroll-m|scroll-p|translate-x|translate-y)"
            + r"-(\d+(?:\.\d+)?|px)(?![\w./-])"
        ),
        normalizer=_group("spacing.{}"),
    ),
    DetectionPattern(
        name="spacing-token",
        regex=re.compile(r"(?<![-\w$.])spacing[-.]([A-Za-z0-9_]+)"),
        normalizer=_group("spacing.{}"),
    ),
    DetectionPattern(
        name="typography-size",
        regex=re.compile(_BOUNDARY_BEFORE + r"text-(xs|sm|base|lg|xl|\d+xl)" + _BOUNDARY_AFTER),
        normalizer=_group("typography.fontSize.{}"),
    ),
    DetectionPattern(
        name="typography-weight",
        regex=re.compile(
            _BOUNDARY_BEFORE
            + r"font-(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)"
            + _BOUNDARY_AFTER
        ),
        normalizer=_group("typography.fontWeight.{}"),
    ),
    DetectionPattern(
        name="typography-family",
        regex=re.compile(
            _BOUNDARY_BEFORE + r"font-(sans|serif|mono|display|body|heading)" + _BOUNDARY_AFTER
        ),
        normalizer=_group("typography.fontFamily.{}"),
    ),
    DetectionPattern(
        name="typography-leading",
        regex=re.compile(
            _BOUNDARY_BEFORE
            + r"leading-(none|tight|snug|normal|relaxed|loose|\d+)"
            + _BOUNDARY_AFTER
        ),
        normalizer=_group("typography.lineHeight.{}"),
    ),
    DetectionPattern(
        name="border-radius",
        regex=re.compile(
            _BOUNDARY_BEFORE + r"rounded(?:-(none|xs|sm|md|lg|xl|\d+xl|full))?" + _BOUNDARY_AFTER
        ),
        normalizer=_group("borderRadius.{}", default="DEFAULT"),
    ),
    DetectionPattern(
        name="shadow",
        regex=re.compile(
            _BOUNDARY_BEFORE + r"shadow-(xs|sm|md|lg|xl|\d+xl|inner|none)" + _BOUNDARY_AFTER
        ),
        normalizer=_group("shadows.{}"),
    ),
    DetectionPattern(
        name="opacity",
        regex=re.compile(_BOUNDARY_BEFORE + r"opacity-(\d{1,3})" + _BOUNDARY_AFTER),
        normalizer=_group("opacity.{}"),
    ),
)


__all__ = [
    "CATEGORIES",
    "DEFAULT_PATTERNS",
    "DetectionPattern",
    "normalize_reference",
    "normalize_variable",
    "token_category",
]
