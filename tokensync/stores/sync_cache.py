"""Persistent record of the last successful sync."""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..hashing import hash_file, hash_text
from ..models import GeneratedArtifact

_CACHE_VERSION = 1
CACHE_RELATIVE_PATH = Path(".tokensync") / "sync_cache.json"


class SyncCache:
    """Remembers the document hash and artifact hashes of the last sync.

    A sync can be skipped when the document, the output settings and every
    previously written artifact are unchanged on disk.
    """

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._fingerprint: Optional[str] = None
        self._signature: Optional[str] = None
        self._artifacts: Dict[str, Dict[str, str]] = {}
        self.sync_count = 0
        self.last_sync: Optional[str] = None
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    @classmethod
    def for_root(cls, root: Path) -> "SyncCache":
        return cls(root / CACHE_RELATIVE_PATH)

    def is_fresh(self, *, fingerprint: str, signature: str, root: Path) -> bool:
        if self._fingerprint != fingerprint or self._signature != signature:
            return False
        if not self._artifacts:
            return False
        for entry in self._artifacts.values():
            target = Path(entry["path"])
            if not target.is_absolute():
                target = root / target
            try:
                if hash_file(target) != entry["sha256"]:
                    return False
            except OSError:
                return False
        return True

    def record(
        self,
        *,
        fingerprint: str,
        signature: str,
        artifacts: Iterable[GeneratedArtifact],
    ) -> None:
        self._fingerprint = fingerprint
        self._signature = signature
        self._artifacts = {
            artifact.name: {"path": artifact.path, "sha256": hash_text(artifact.content)}
            for artifact in artifacts
        }
        self.sync_count += 1
        self.last_sync = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _CACHE_VERSION,
            "fingerprint": self._fingerprint,
            "signature": self._signature,
            "artifacts": self._artifacts,
            "sync_count": self.sync_count,
            "last_sync": self.last_sync,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        artifacts = data.get("artifacts")
        if not isinstance(artifacts, dict):
            return
        valid: Dict[str, Dict[str, str]] = {}
        for name, entry in artifacts.items():
            if not isinstance(name, str) or not isinstance(entry, dict):
                continue
            if not isinstance(entry.get("path"), str) or not isinstance(entry.get("sha256"), str):
                continue
            valid[name] = {"path": entry["path"], "sha256": entry["sha256"]}
        fingerprint = data.get("fingerprint")
        signature = data.get("signature")
        self._fingerprint = fingerprint if isinstance(fingerprint, str) else None
        self._signature = signature if isinstance(signature, str) else None
        self._artifacts = valid
        count = data.get("sync_count")
        self.sync_count = count if isinstance(count, int) else 0
        last_sync = data.get("last_sync")
        self.last_sync = last_sync if isinstance(last_sync, str) else None
        self._dirty = False


__all__ = ["CACHE_RELATIVE_PATH", "SyncCache"]
