"""Idempotent, atomic writes for generated artifacts."""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List

from .logging import get_logger
from .models import GeneratedArtifact


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Process umask, read once at import.
_UMASK = _current_umask()


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, or the umask default for a new file."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def write_if_changed(path: Path, content: str, *, dry_run: bool = False) -> bool:
    """Write ``content`` to ``path`` only when the bytes differ.

    Returns True when the file content changed (or would change under
    ``dry_run``). Writes go through a sibling temp file and ``os.replace`` so
    readers never observe a partial file.
    """
    data = content.encode("utf-8")
    try:
        if path.read_bytes() == data:
            return False
    except FileNotFoundError:
        pass
    if dry_run:
        return True

    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return True


class ArtifactWriter:
    """Writes artifacts relative to a project root."""

    def __init__(self, root: Path, *, dry_run: bool = False) -> None:
        self.root = root
        self.dry_run = dry_run
        self.logger = get_logger("writer")

    def target(self, artifact: GeneratedArtifact) -> Path:
        path = Path(artifact.path)
        return path if path.is_absolute() else self.root / path

    def write(self, artifact: GeneratedArtifact) -> GeneratedArtifact:
        target = self.target(artifact)
        changed = write_if_changed(target, artifact.content, dry_run=self.dry_run)
        if changed:
            verb = "Would write" if self.dry_run else "Wrote"
            self.logger.info("%s %s (%d bytes)", verb, artifact.path, artifact.size)
        else:
            self.logger.debug("%s unchanged", artifact.path)
        return replace(artifact, changed=changed)

    def write_all(self, artifacts: Iterable[GeneratedArtifact]) -> List[GeneratedArtifact]:
        return [self.write(artifact) for artifact in artifacts]


__all__ = ["ArtifactWriter", "write_if_changed"]
