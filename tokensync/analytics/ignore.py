"""Gitignore-style path filtering for source scans."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

DEFAULT_EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        "bower_components",
        "dist",
        "build",
        "out",
        "coverage",
        "vendor",
        "storybook-static",
        "__pycache__",
    }
)

# Rules paired with the directory their patterns are relative to.
IgnoreScope = Tuple[Path, Sequence["IgnoreRule"]]


@dataclass
class IgnoreRule:
    """One pattern from a .gitignore file or the ``analytics.exclude_paths`` setting."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def parse_gitignore(path: Path) -> List[IgnoreRule]:
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, UnicodeDecodeError):
        return []

    rules: List[IgnoreRule] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def rules_from_patterns(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules = (build_ignore_rule(pattern) for pattern in patterns)
    return [rule for rule in rules if rule is not None]


def is_ignored(path: Path, is_dir: bool, scopes: Sequence[IgnoreScope]) -> bool:
    """Apply every scope that contains ``path``, outermost first.

    Each scope matches against the path relative to its own directory, and a
    later match overrides an earlier one, so a nested ``.gitignore`` can
    re-include what the root file excluded.
    """
    ignored = False
    for anchor, rules in scopes:
        try:
            rel_path = path.relative_to(anchor).as_posix()
        except ValueError:
            continue
        if rel_path == ".":
            continue
        for rule in rules:
            if rule.matches(rel_path, is_dir):
                ignored = not rule.negate
    return ignored
