from __future__ import annotations

from datetime import UTC, datetime

from tokensync.analytics.classifier import classify
from tokensync.analytics.report import build_report
from tokensync.analytics.scanner import ScanResult
from tokensync.loader import normalize
from tokensync.models import UsageRecord

DEFINED = normalize(
    {
        "colors": {
            "primary": {"100": "#dbeafe", "300": "#93c5fd", "500": "#3b82f6", "700": "#1d4ed8"},
            "brand": "{colors.primary.500}",
        },
        "spacing": {"1": "0.25rem", "2": "0.5rem", "4": "1rem"},
        "borderRadius": {"none": "0"},
    }
)


def _scan(counts: dict[str, int]) -> ScanResult:
    usage = {
        token: UsageRecord(
            token=token,
            count=count,
            files={f"src/{index}.tsx"},
            match_types={"tailwind-spacing" if token.startswith("spacing") else "css-variable"},
            category=token.split(".", 1)[0],
        )
        for index, (token, count) in enumerate(sorted(counts.items()))
    }
    return ScanResult(usage=usage, files_scanned=3, files_by_extension={".tsx": 3})


def test_report_summary_and_rankings() -> None:
    scan = _scan({"colors.primary.500": 5, "spacing.4": 2, "spacing.2": 1})
    classification = classify(DEFINED, scan.usage)

    report = build_report(
        DEFINED, scan, classification, generated_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    )

    summary = report.summary
    assert summary["total_tokens"] == 9
    assert summary["used_tokens"] == 3
    assert summary["indirectly_used_tokens"] == 1
    assert summary["adoption_rate"] == 44.4
    assert summary["files_scanned"] == 3
    assert [row["token"] for row in report.most_used] == ["colors.primary.500", "spacing.4", "spacing.2"]
    assert [row["token"] for row in report.least_used] == ["spacing.2"]
    assert report.match_types == {
        "css-variable": {"tokens": 1, "occurrences": 5},
        "tailwind-spacing": {"tokens": 2, "occurrences": 3},
    }
    assert report.categories["spacing"] == {"tokens": 2, "occurrences": 3}
    assert report.file_distribution == {".tsx": 3}
    assert report.generated_at == "2024-01-02T03:04:05Z"


def test_recommendations_are_prioritised_and_consistent() -> None:
    scan = _scan({"colors.primary.500": 5})
    classification = classify(DEFINED, scan.usage)

    report = build_report(DEFINED, scan, classification)

    priorities = [item.priority for item in report.recommendations]
    assert priorities == sorted(priorities, key=["high", "medium", "low"].index)
    by_type = {item.type: item for item in report.recommendations}
    assert set(by_type) == {"cleanup", "review", "info", "adoption"}
    buckets = {
        name: {row["token"] for row in report.unused[name]} for name in ("remove", "review", "keep")
    }
    assert set(by_type["cleanup"].details) <= buckets["remove"]
    assert set(by_type["review"].details) <= buckets["review"]
    assert set(by_type["info"].details) <= buckets["keep"]
    unused_summary = report.unused["summary"]
    assert (
        unused_summary["remove"] + unused_summary["review"] + unused_summary["keep"]
        == unused_summary["total_unused"]
    )


def test_low_usage_recommendation_requires_more_than_five_single_use_tokens() -> None:
    tokens = {f"spacing.{index}": 1 for index in range(6)}
    scan = _scan(tokens)
    report = build_report(DEFINED, scan, classify(DEFINED, scan.usage))

    low_usage = [item for item in report.recommendations if item.type == "low-usage"]
    assert len(low_usage) == 1
    assert len(low_usage[0].details) == 5


def test_empty_definitions_have_zero_adoption() -> None:
    report = build_report({}, ScanResult(), classify({}, {}))

    assert report.summary["adoption_rate"] == 0.0
    assert report.recommendations == []
