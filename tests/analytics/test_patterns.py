from __future__ import annotations

from tokensync.analytics.patterns import (
    DEFAULT_PATTERNS,
    normalize_reference,
    normalize_variable,
    token_category,
)
from tokensync.models import MATCH_TYPES


def _find(text: str, suffix: str = ".tsx") -> dict[str, list[str]]:
    found: dict[str, list[str]] = {}
    for pattern in DEFAULT_PATTERNS:
        if pattern.applies_to(suffix):
            matches = list(pattern.find(text))
            if matches:
                found[pattern.name] = matches
    return found


def test_pattern_table_follows_match_type_order() -> None:
    assert tuple(pattern.name for pattern in DEFAULT_PATTERNS) == MATCH_TYPES


def test_css_and_scss_variables() -> None:
    assert _find("color: var(--colors-primary-500);", ".css") == {"css-variable": ["colors.primary.500"]}
    assert _find("margin: $spacing-4;", ".scss") == {"scss-variable": ["spacing.4"]}
    assert "scss-variable" not in _find("const price = $spacing-4;", ".ts")


def test_token_references() -> None:
    found = _find("const a = tokens.colors.primary[500]; const b = theme.spacing['4'];")

    assert found["token-reference"] == ["colors.primary.500", "spacing.4"]


def test_tailwind_utilities() -> None:
    found = _find('<div className="bg-primary-500 p-4 text-lg font-bold rounded shadow-md opacity-50" />')

    assert found["tailwind-color"] == ["colors.primary.500"]
    assert found["tailwind-spacing"] == ["spacing.4"]
    assert found["typography-size"] == ["typography.fontSize.lg"]
    assert found["typography-weight"] == ["typography.fontWeight.bold"]
    assert found["border-radius"] == ["borderRadius.DEFAULT"]
    assert found["shadow"] == ["shadows.md"]
    assert found["opacity"] == ["opacity.50"]


def test_utilities_inside_words_are_ignored() -> None:
    found = _find("const display = 'prop-4 subtext-lg';")

    assert "tailwind-spacing" not in found
    assert "typography-size" not in found


def test_normalizers() -> None:
    assert normalize_variable("border-radius-md") == "borderRadius.md"
    assert normalize_variable("font-size-base") == "typography.fontSize.base"
    assert normalize_variable("brand") == "brand"
    assert normalize_reference("colors['primary'].500") == "colors.primary.500"
    assert token_category("colors.primary.500") == "colors"
    assert token_category("brand-primary") == "colors"
    assert token_category("mystery") == "other"
