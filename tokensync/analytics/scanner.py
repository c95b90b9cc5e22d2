"""Concurrent source scanner that builds a token usage table."""

from __future__ import annotations

import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..logging import get_logger
from ..models import UsageRecord
from .ignore import (
    DEFAULT_EXCLUDED_DIRS,
    IgnoreRule,
    IgnoreScope,
    is_ignored,
    parse_gitignore,
    rules_from_patterns,
)
from .patterns import DEFAULT_PATTERNS, DetectionPattern, token_category

UsageTable = Dict[str, UsageRecord]


@dataclass
class ScanResult:
    """Usage table plus bookkeeping about the files that produced it."""

    usage: UsageTable = field(default_factory=dict)
    files_scanned: int = 0
    skipped: List[str] = field(default_factory=list)
    files_by_extension: Dict[str, int] = field(default_factory=dict)


def merge_usage(target: UsageTable, partial: UsageTable) -> None:
    """Fold ``partial`` into ``target``; order of calls does not affect the result."""
    for token, record in partial.items():
        existing = target.get(token)
        if existing is None:
            target[token] = UsageRecord(
                token=token,
                count=record.count,
                files=set(record.files),
                match_types=set(record.match_types),
                category=record.category,
            )
        else:
            existing.merge(record)


class UsageScanner:
    """Runs the detection pattern table over source files.

    Files are read on a bounded thread pool; each worker returns a private
    partial table that is merged on the calling thread.
    """

    def __init__(
        self,
        *,
        patterns: Sequence[DetectionPattern] = DEFAULT_PATTERNS,
        max_workers: int = 8,
        exclude_paths: Sequence[str] = (),
        root: Optional[Path] = None,
        respect_gitignore: bool = True,
    ) -> None:
        self.patterns = list(patterns)
        self.max_workers = max(1, max_workers)
        self.exclude_paths = list(exclude_paths)
        self.root = root
        self.respect_gitignore = respect_gitignore
        self.logger = get_logger("analytics.scanner")

    def scan(self, source_dirs: Iterable[Path | str], file_extensions: Sequence[str]) -> UsageTable:
        return self.scan_with_stats(source_dirs, file_extensions).usage

    def scan_with_stats(
        self, source_dirs: Iterable[Path | str], file_extensions: Sequence[str]
    ) -> ScanResult:
        files = list(self.iter_source_files(source_dirs, file_extensions))
        self.logger.debug("Scanning %d source files", len(files))
        return self.scan_files(files)

    def scan_files(self, files: Sequence[Path]) -> ScanResult:
        result = ScanResult()
        if not files:
            return result

        usage: UsageTable = {}
        extensions: Counter[str] = Counter()
        workers = min(self.max_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tokensync-scan") as pool:
            futures = {pool.submit(self.scan_file, path): path for path in files}
            for future in as_completed(futures):
                path = futures[future]
                partial = future.result()
                if partial is None:
                    result.skipped.append(self._label(path))
                    continue
                merge_usage(usage, partial)
                result.files_scanned += 1
                extensions[path.suffix.lower() or "(none)"] += 1

        result.usage = dict(sorted(usage.items()))
        result.skipped.sort()
        result.files_by_extension = dict(sorted(extensions.items()))
        return result

    def scan_file(self, path: Path) -> Optional[UsageTable]:
        """Return the partial usage table for one file, or None if unreadable."""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Skipping unreadable file %s: %s", path, exc)
            return None

        label = self._label(path)
        suffix = path.suffix.lower()
        partial: UsageTable = {}
        for pattern in self.patterns:
            if not pattern.applies_to(suffix):
                continue
            for token in pattern.find(text):
                record = partial.get(token)
                if record is None:
                    record = UsageRecord(token=token, category=token_category(token))
                    partial[token] = record
                record.count += 1
                record.files.add(label)
                record.match_types.add(pattern.name)
        return partial

    def iter_source_files(
        self, source_dirs: Iterable[Path | str], file_extensions: Sequence[str]
    ) -> Iterator[Path]:
        allowed = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in file_extensions}
        seen: set[Path] = set()
        for source in source_dirs:
            base = Path(source)
            if not base.is_absolute() and self.root is not None:
                base = self.root / base
            if not base.is_dir():
                self.logger.debug("Source directory %s does not exist; skipping", base)
                continue
            yield from self._iter_dir(base, allowed, seen)

    def _iter_dir(self, base: Path, allowed: set[str], seen: set[Path]) -> Iterator[Path]:
        for path in _walk(base, self._ignore_scopes(base)):
            if path.suffix.lower() not in allowed:
                continue
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            yield path

    def _ignore_scopes(self, base: Path) -> List[IgnoreScope]:
        """Root ``.gitignore`` and ``exclude_paths`` relative to the project root, then ``base/.gitignore``."""
        anchor = (self.root if self.root is not None else base).resolve()
        root_rules: List[IgnoreRule] = []
        if self.respect_gitignore:
            root_rules.extend(parse_gitignore(anchor / ".gitignore"))
        root_rules.extend(rules_from_patterns(self.exclude_paths))
        scopes: List[IgnoreScope] = [(anchor, root_rules)]

        resolved_base = base.resolve()
        if resolved_base == anchor:
            return scopes
        base_rules: List[IgnoreRule] = []
        if self.respect_gitignore:
            base_rules.extend(parse_gitignore(resolved_base / ".gitignore"))
        if not resolved_base.is_relative_to(anchor):
            base_rules.extend(rules_from_patterns(self.exclude_paths))
        scopes.append((resolved_base, base_rules))
        return scopes

    def _label(self, path: Path) -> str:
        if self.root is not None:
            try:
                return path.resolve().relative_to(self.root.resolve()).as_posix()
            except ValueError:
                pass
        return path.as_posix()


def _walk(base: Path, scopes: Sequence[IgnoreScope]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        resolved = current.resolve()

        kept = []
        for name in sorted(dirnames):
            if name.startswith(".") or name in DEFAULT_EXCLUDED_DIRS:
                continue
            if is_ignored(resolved / name, True, scopes):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if is_ignored(resolved / filename, False, scopes):
                continue
            yield current / filename


__all__ = ["ScanResult", "UsageScanner", "UsageTable", "merge_usage"]
