"""Usage report assembly."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from ..models import RECOMMENDATIONS, TokenTree, UnusedTokenVerdict, UsageRecord, token_paths
from .classifier import ClassificationReport
from .scanner import ScanResult

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
ADOPTION_THRESHOLD = 60.0
MOST_USED_LIMIT = 10
DETAIL_LIMIT = 5
LOW_USAGE_THRESHOLD = 5


@dataclass(frozen=True)
class Recommendation:
    type: str
    priority: str
    message: str
    details: List[str] = field(default_factory=list)


@dataclass
class UsageReport:
    """Everything an analyze run learned about token adoption."""

    summary: Dict[str, Any]
    most_used: List[Dict[str, Any]]
    least_used: List[Dict[str, Any]]
    match_types: Dict[str, Dict[str, int]]
    categories: Dict[str, Dict[str, int]]
    file_distribution: Dict[str, int]
    unused: Dict[str, Any]
    recommendations: List[Recommendation]
    skipped_files: List[str] = field(default_factory=list)
    generated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["recommendations"] = [asdict(item) for item in self.recommendations]
        return payload


def _verdict_dict(verdict: UnusedTokenVerdict) -> Dict[str, str]:
    return {
        "token": verdict.token_path,
        "value": verdict.value,
        "type": verdict.classification.kind,
        "reason": verdict.classification.reason,
        "recommendation": verdict.classification.recommendation,
    }


def _grouped(records: List[UsageRecord], key: str) -> Dict[str, Dict[str, int]]:
    tokens: Counter[str] = Counter()
    occurrences: Counter[str] = Counter()
    for record in records:
        name = getattr(record, key) or "unknown"
        tokens[name] += 1
        occurrences[name] += record.count
    return {name: {"tokens": tokens[name], "occurrences": occurrences[name]} for name in sorted(tokens)}


def build_recommendations(
    classification: ClassificationReport,
    adoption_rate: float,
    single_use: List[UsageRecord],
    total_tokens: int,
) -> List[Recommendation]:
    remove = classification.bucket("remove")
    review = classification.bucket("review")
    keep = classification.bucket("keep")
    items: List[Recommendation] = []
    if remove:
        items.append(
            Recommendation(
                type="cleanup",
                priority="medium",
                message=f"{len(remove)} unused token(s) can likely be removed",
                details=[verdict.token_path for verdict in remove[:DETAIL_LIMIT]],
            )
        )
    if review:
        items.append(
            Recommendation(
                type="review",
                priority="low",
                message=f"{len(review)} unused token(s) need manual review",
                details=[verdict.token_path for verdict in review[:DETAIL_LIMIT]],
            )
        )
    if keep:
        items.append(
            Recommendation(
                type="info",
                priority="low",
                message=f"{len(keep)} unused token(s) are system utilities and should be kept",
                details=[verdict.token_path for verdict in keep[:DETAIL_LIMIT]],
            )
        )
    if total_tokens and adoption_rate < ADOPTION_THRESHOLD:
        items.append(
            Recommendation(
                type="adoption",
                priority="medium",
                message=f"Token adoption is {adoption_rate}%; consider migrating hardcoded values to tokens",
            )
        )
    if len(single_use) > LOW_USAGE_THRESHOLD:
        items.append(
            Recommendation(
                type="low-usage",
                priority="low",
                message=f"{len(single_use)} token(s) are used only once",
                details=[record.token for record in single_use[:DETAIL_LIMIT]],
            )
        )
    items.sort(key=lambda item: PRIORITY_ORDER.get(item.priority, len(PRIORITY_ORDER)))
    return items


def build_report(
    defined: TokenTree,
    scan: ScanResult,
    classification: ClassificationReport,
    *,
    generated_at: Optional[datetime] = None,
) -> UsageReport:
    total = len(token_paths(defined))
    used = len(classification.used)
    indirect = len(classification.indirectly_used)
    adoption_rate = round((used + indirect) / total * 100, 1) if total else 0.0

    records = list(scan.usage.values())
    ranked = sorted(records, key=lambda record: (-record.count, record.token))
    single_use = sorted((record for record in records if record.count == 1), key=lambda record: record.token)

    unused: Dict[str, Any] = {"summary": dict(classification.summary)}
    for recommendation in RECOMMENDATIONS:
        unused[recommendation] = [_verdict_dict(item) for item in classification.bucket(recommendation)]
    unused["indirectly_used"] = [asdict(item) for item in classification.indirectly_used]

    stamp = (generated_at or datetime.now(UTC)).strftime("%Y-%m-%dT%H:%M:%SZ")
    return UsageReport(
        summary={
            "total_tokens": total,
            "used_tokens": used,
            "indirectly_used_tokens": indirect,
            "unused_tokens": len(classification.unused),
            "adoption_rate": adoption_rate,
            "files_scanned": scan.files_scanned,
            "detected_references": len(records),
        },
        most_used=[record.to_dict() for record in ranked[:MOST_USED_LIMIT]],
        least_used=[record.to_dict() for record in single_use],
        match_types=_grouped(records, "match_type"),
        categories=_grouped(records, "category"),
        file_distribution=dict(scan.files_by_extension),
        unused=unused,
        recommendations=build_recommendations(classification, adoption_rate, single_use, total),
        skipped_files=list(scan.skipped),
        generated_at=stamp,
    )


__all__ = ["Recommendation", "UsageReport", "build_recommendations", "build_report"]
