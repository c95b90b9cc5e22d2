from __future__ import annotations

import pytest

from tokensync.analytics.classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    UnusedTokenClassifier,
    classify,
    token_variants,
)
from tokensync.loader import normalize
from tokensync.models import Classification, UsageRecord, token_paths

DEFINED = normalize(
    {
        "colors": {
            "primary": {"100": "#dbeafe", "500": "#3b82f6", "700": "#1d4ed8"},
            "secondary": {"300": "#cbd5e1", "500": "#64748b"},
            "brand": "{colors.primary.500}",
        },
        "spacing": {"0": "0", "4": "1rem", "24": "6rem"},
        "borderRadius": {"none": "0", "md": "0.375rem"},
        "typography": {"fontFamily": {"mono": "monospace"}},
        "opacity": {"0": "0", "100": "1"},
    }
)


def _usage(*tokens: str) -> dict[str, UsageRecord]:
    return {token: UsageRecord(token=token, count=1, files={"a.tsx"}) for token in tokens}


def _verdicts(report) -> dict[str, str]:
    return {verdict.token_path: verdict.classification.recommendation for verdict in report.unused}


@pytest.mark.parametrize(
    ("token", "recommendation"),
    [
        ("colors.secondary.300", "remove"),
        ("colors.primary.700", "remove"),
        ("colors.primary.100", "review"),
        ("spacing.24", "review"),
        ("colors.secondary.500", "review"),
        ("borderRadius.md", "review"),
        ("borderRadius.none", "keep"),
        ("opacity.0", "keep"),
        ("typography.fontFamily.mono", "keep"),
    ],
)
def test_unused_tokens_follow_rule_cascade(token: str, recommendation: str) -> None:
    report = classify(DEFINED, _usage("colors.primary.500", "spacing.4"))

    assert _verdicts(report)[token] == recommendation


def test_mid_scale_color_reason() -> None:
    report = classify(DEFINED, {})
    verdict = next(v for v in report.unused if v.token_path == "colors.secondary.300")

    assert verdict.classification.kind == "unused-design"
    assert verdict.value == "#cbd5e1"


def test_fallback_reason() -> None:
    report = classify(DEFINED, {})
    verdict = next(v for v in report.unused if v.token_path == "borderRadius.md")

    assert verdict.classification.reason == "Token not detected in codebase scan"


def test_aliases_and_structural_defaults_are_indirectly_used() -> None:
    report = classify(DEFINED, {})
    indirect = {item.token_path: item.reason for item in report.indirectly_used}

    assert indirect["colors.brand"] == "Alias of {colors.primary.500}"
    assert set(indirect) == {"colors.brand", "spacing.0", "opacity.100"}


def test_indirect_defaults_are_configurable() -> None:
    report = UnusedTokenClassifier(indirect_defaults=()).classify(DEFINED, {})

    assert _verdicts(report)["spacing.0"] == "keep"
    assert _verdicts(report)["opacity.100"] == "review"


def test_variant_spellings_count_as_direct_use() -> None:
    report = classify(
        DEFINED,
        _usage("primary-700", "rounded-md", "typography.font-family.mono", "spacing-24"),
    )

    assert {"colors.primary.700", "borderRadius.md", "typography.fontFamily.mono", "spacing.24"} <= set(
        report.used
    )
    assert report.matches["colors.primary.700"] == ["primary-700"]


def test_classification_partitions_every_defined_token() -> None:
    report = classify(DEFINED, _usage("colors.primary.500", "spacing-4", "opacity.0"))

    indirect = [item.token_path for item in report.indirectly_used]
    unused = [verdict.token_path for verdict in report.unused]
    groups = report.used + indirect + unused

    assert sorted(groups) == sorted(token_paths(DEFINED))
    assert len(groups) == len(set(groups))
    summary = report.summary
    assert summary["remove"] + summary["review"] + summary["keep"] == summary["total_unused"] == len(unused)


def test_token_variants() -> None:
    assert token_variants("colors.primary.500")[:4] == [
        "colors.primary.500",
        "colors-primary-500",
        "500",
        "primary-500",
    ]
    assert "color-primary-500" in token_variants("colors.primary.500")
    assert "font-size-base" in token_variants("typography.fontSize.base")
    assert "border-radius-md" in token_variants("borderRadius.md")
    assert "shadow-md" in token_variants("shadows.md")


def test_custom_rules_are_evaluated_in_order() -> None:
    keep_everything = ClassificationRule(
        name="keep-all",
        predicate=lambda parts, descriptor: True,
        classification=Classification(kind="custom", reason="Pinned", recommendation="keep"),
    )
    classifier = UnusedTokenClassifier(rules=[keep_everything, *DEFAULT_RULES])

    report = classifier.classify(DEFINED, {})

    assert set(_verdicts(report).values()) == {"keep"}


def test_empty_rule_list_rejected() -> None:
    with pytest.raises(ValueError):
        UnusedTokenClassifier(rules=[])
