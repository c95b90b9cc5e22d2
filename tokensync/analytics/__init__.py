"""Token usage analytics: scanning, unused-token classification and reporting."""

from .classifier import (
    DEFAULT_RULES,
    INDIRECT_DEFAULTS,
    ClassificationReport,
    ClassificationRule,
    UnusedTokenClassifier,
    classify,
    token_variants,
)
from .export import EXPORT_FORMATS, save_report, to_csv, to_html, to_json
from .patterns import DEFAULT_PATTERNS, DetectionPattern
from .report import Recommendation, UsageReport, build_report
from .scanner import ScanResult, UsageScanner, merge_usage

__all__ = [
    "DEFAULT_PATTERNS",
    "DEFAULT_RULES",
    "EXPORT_FORMATS",
    "INDIRECT_DEFAULTS",
    "ClassificationReport",
    "ClassificationRule",
    "DetectionPattern",
    "Recommendation",
    "ScanResult",
    "UnusedTokenClassifier",
    "UsageReport",
    "UsageScanner",
    "build_report",
    "classify",
    "merge_usage",
    "save_report",
    "to_csv",
    "to_html",
    "to_json",
    "token_variants",
]
