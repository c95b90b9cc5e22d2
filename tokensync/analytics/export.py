"""Serialize usage reports to JSON, CSV and HTML."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from ..writer import write_if_changed
from .report import UsageReport

EXPORT_FORMATS = ("json", "csv", "html")
_TEMPLATE_NAME = "report.html.j2"
_CSV_HEADER = ("section", "token", "count", "category", "match_type", "recommendation", "reason")

logger = get_logger("analytics.export")


def to_json(report: UsageReport) -> str:
    return json.dumps(report.to_dict(), indent=2, sort_keys=True) + "\n"


def to_csv(report: UsageReport) -> str:
    """Flat table of used and unused tokens, one row each."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(_CSV_HEADER)
    for section, rows in (("most_used", report.most_used), ("least_used", report.least_used)):
        for row in rows:
            writer.writerow((section, row["token"], row["count"], row["category"], row["match_type"], "", ""))
    for recommendation in ("remove", "review", "keep"):
        for row in report.unused.get(recommendation, []):
            writer.writerow(("unused", row["token"], 0, "", "", row["recommendation"], row["reason"]))
    return buffer.getvalue()


def _environment(templates_dir: Optional[Path] = None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)


def to_html(report: UsageReport, *, templates_dir: Optional[Path] = None) -> str:
    template = _environment(templates_dir).get_template(_TEMPLATE_NAME)
    return template.render(report=report) + "\n"


def render(report: UsageReport, fmt: str) -> str:
    if fmt == "json":
        return to_json(report)
    if fmt == "csv":
        return to_csv(report)
    if fmt == "html":
        return to_html(report)
    raise ValueError(f"Unsupported report format '{fmt}'. Expected one of: {', '.join(EXPORT_FORMATS)}")


def save_report(report: UsageReport, directory: Path, fmt: str = "json") -> Path:
    """Write the report as ``token-usage-report.<fmt>`` under ``directory``."""
    content = render(report, fmt)
    target = directory / f"token-usage-report.{fmt}"
    write_if_changed(target, content)
    logger.info("Saved %s usage report to %s", fmt, target)
    return target


__all__ = ["EXPORT_FORMATS", "render", "save_report", "to_csv", "to_html", "to_json"]
