from __future__ import annotations

import csv
import io
import json
from pathlib import Path

import pytest

from tokensync.analytics.classifier import classify
from tokensync.analytics.export import render, save_report, to_csv, to_html, to_json
from tokensync.analytics.report import UsageReport, build_report
from tokensync.analytics.scanner import ScanResult
from tokensync.loader import normalize
from tokensync.models import UsageRecord


@pytest.fixture
def report() -> UsageReport:
    defined = normalize(
        {"colors": {"primary": {"300": "#93c5fd", "500": "#3b82f6"}, "label": "<b>bold</b>"}}
    )
    usage = {
        "colors.primary.500": UsageRecord(
            token="colors.primary.500", count=2, files={"src/a.tsx"}, match_types={"tailwind-color"}, category="colors"
        )
    }
    scan = ScanResult(usage=usage, files_scanned=1, files_by_extension={".tsx": 1})
    return build_report(defined, scan, classify(defined, usage))


def test_json_export(report: UsageReport) -> None:
    data = json.loads(to_json(report))

    assert data["summary"]["used_tokens"] == 1
    assert data["unused"]["remove"][0]["token"] == "colors.primary.300"
    assert data["recommendations"][0]["type"] == "cleanup"


def test_csv_export(report: UsageReport) -> None:
    rows = list(csv.DictReader(io.StringIO(to_csv(report))))

    assert rows[0]["section"] == "most_used"
    assert rows[0]["token"] == "colors.primary.500"
    unused = {row["token"]: row["recommendation"] for row in rows if row["section"] == "unused"}
    assert unused == {"colors.primary.300": "remove", "colors.label": "review"}


def test_html_export_escapes_values(report: UsageReport) -> None:
    html = to_html(report)

    assert "<h1>Design Token Usage Report</h1>" in html
    assert "colors.primary.300" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "<b>bold</b>" not in html


def test_render_rejects_unknown_format(report: UsageReport) -> None:
    with pytest.raises(ValueError):
        render(report, "xml")


def test_save_report_writes_named_file(report: UsageReport, tmp_path: Path) -> None:
    target = save_report(report, tmp_path / "reports", "csv")

    assert target == tmp_path / "reports" / "token-usage-report.csv"
    assert target.read_text(encoding="utf-8").startswith("section,token,count")
