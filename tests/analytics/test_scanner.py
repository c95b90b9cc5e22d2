from __future__ import annotations

from pathlib import Path

from tests._fixtures.project_builder import ProjectBuilder
from tokensync.analytics.scanner import UsageScanner, merge_usage
from tokensync.models import UsageRecord


def _write_sources(project_builder: ProjectBuilder) -> Path:
    project_builder.write(
        {
            "src/Button.tsx": """
                export const Button = () => (
                  <button className="bg-primary-500 text-primary-500 p-4 rounded-md">
                    {tokens.colors.primary[500]}
                  </button>
                );
            """,
            "src/styles/app.css": """
                .card { color: var(--colors-primary-500); margin: var(--spacing-4); }
            """,
            "src/.cache/Hidden.tsx": "bg-secondary-300",
            "src/node_modules/lib/index.js": "bg-secondary-300",
            "src/notes.md": "bg-secondary-300",
        }
    )
    return project_builder.path()


def test_scan_builds_usage_table(project_builder: ProjectBuilder) -> None:
    root = _write_sources(project_builder)
    scanner = UsageScanner(root=root)

    result = scanner.scan_with_stats(["src"], [".tsx", ".css", ".js"])

    primary = result.usage["colors.primary.500"]
    assert primary.count == 4
    assert primary.files == {"src/Button.tsx", "src/styles/app.css"}
    assert primary.match_type == "css-variable"
    assert primary.category == "colors"
    assert result.usage["spacing.4"].count == 2
    assert result.usage["borderRadius.md"].count == 1
    assert "colors.secondary.300" not in result.usage
    assert result.files_scanned == 2
    assert result.files_by_extension == {".css": 1, ".tsx": 1}


def test_unreadable_files_are_skipped(project_builder: ProjectBuilder) -> None:
    root = project_builder.path()
    project_builder.write({"src/ok.tsx": "p-4"})
    (root / "src" / "broken.tsx").write_bytes(b"\xff\xfe\xfa bg-primary-500")

    result = UsageScanner(root=root).scan_with_stats(["src"], [".tsx"])

    assert result.skipped == ["src/broken.tsx"]
    assert result.files_scanned == 1
    assert set(result.usage) == {"spacing.4"}


def test_exclude_paths_and_gitignore(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/.gitignore": "generated/\n",
            "src/generated/a.tsx": "p-4",
            "src/legacy/b.tsx": "p-8",
            "src/app.tsx": "p-2",
        }
    )
    scanner = UsageScanner(root=project_builder.path(), exclude_paths=["legacy/"])

    usage = scanner.scan(["src"], ["tsx"])

    assert set(usage) == {"spacing.2"}


def test_root_gitignore_applies_to_scan_directories(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".gitignore": "src/generated/\n",
            "src/generated/a.tsx": "p-4",
            "src/app.tsx": "p-2",
        }
    )

    usage = UsageScanner(root=project_builder.path()).scan(["src"], [".tsx"])

    assert set(usage) == {"spacing.2"}


def test_root_relative_exclude_paths(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/legacy/old.tsx": "p-8",
            "components/legacy/kept.tsx": "p-6",
            "src/app.tsx": "p-2",
        }
    )
    scanner = UsageScanner(root=project_builder.path(), exclude_paths=["src/legacy/"])

    usage = scanner.scan(["src", "components"], [".tsx"])

    assert set(usage) == {"spacing.2", "spacing.6"}


def test_nested_gitignore_can_reinclude(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".gitignore": "*.gen.tsx\n",
            "src/.gitignore": "!keep.gen.tsx\n",
            "src/keep.gen.tsx": "p-4",
            "src/drop.gen.tsx": "p-8",
        }
    )

    usage = UsageScanner(root=project_builder.path()).scan(["src"], [".tsx"])

    assert set(usage) == {"spacing.4"}


def test_missing_source_directories_are_ignored(tmp_path: Path) -> None:
    assert UsageScanner(root=tmp_path).scan(["absent"], [".tsx"]) == {}


def test_merge_order_does_not_matter() -> None:
    def partial(file: str, count: int, match_type: str) -> dict[str, UsageRecord]:
        return {
            "spacing.4": UsageRecord(
                token="spacing.4", count=count, files={file}, match_types={match_type}, category="spacing"
            )
        }

    partials = [
        partial("a.tsx", 2, "tailwind-spacing"),
        partial("b.css", 1, "css-variable"),
        partial("c.tsx", 3, "spacing-token"),
    ]
    forward: dict[str, UsageRecord] = {}
    backward: dict[str, UsageRecord] = {}
    for item in partials:
        merge_usage(forward, item)
    for item in reversed(partials):
        merge_usage(backward, item)

    assert forward["spacing.4"].to_dict() == backward["spacing.4"].to_dict()
    assert forward["spacing.4"].count == 6
    assert forward["spacing.4"].match_type == "css-variable"
    assert partials[0]["spacing.4"].count == 2


def test_single_worker_matches_parallel_scan(project_builder: ProjectBuilder) -> None:
    root = _write_sources(project_builder)

    serial = UsageScanner(root=root, max_workers=1).scan(["src"], [".tsx", ".css"])
    parallel = UsageScanner(root=root, max_workers=8).scan(["src"], [".tsx", ".css"])

    assert {k: v.to_dict() for k, v in serial.items()} == {k: v.to_dict() for k, v in parallel.items()}
