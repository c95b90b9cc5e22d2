from __future__ import annotations

import json
from pathlib import Path

from tokensync.models import GeneratedArtifact
from tokensync.stores import SyncCache
from tokensync.stores.sync_cache import CACHE_RELATIVE_PATH


def _artifact(root: Path, content: str = ":root {}\n") -> GeneratedArtifact:
    target = root / "tokens.css"
    target.write_text(content, encoding="utf-8")
    return GeneratedArtifact(name="css", path="tokens.css", content=content, changed=True)


def test_cache_round_trip_reports_fresh(tmp_path: Path) -> None:
    cache = SyncCache.for_root(tmp_path)
    cache.record(fingerprint="abc", signature="sig", artifacts=[_artifact(tmp_path)])
    cache.persist()

    reloaded = SyncCache.for_root(tmp_path)

    assert reloaded.is_fresh(fingerprint="abc", signature="sig", root=tmp_path)
    assert reloaded.sync_count == 1
    assert reloaded.last_sync is not None and reloaded.last_sync.endswith("Z")
    data = json.loads((tmp_path / CACHE_RELATIVE_PATH).read_text(encoding="utf-8"))
    assert data["version"] == 1


def test_cache_is_stale_when_inputs_change(tmp_path: Path) -> None:
    cache = SyncCache.for_root(tmp_path)
    cache.record(fingerprint="abc", signature="sig", artifacts=[_artifact(tmp_path)])

    assert not cache.is_fresh(fingerprint="other", signature="sig", root=tmp_path)
    assert not cache.is_fresh(fingerprint="abc", signature="changed", root=tmp_path)


def test_cache_is_stale_when_artifact_edited_or_deleted(tmp_path: Path) -> None:
    cache = SyncCache.for_root(tmp_path)
    cache.record(fingerprint="abc", signature="sig", artifacts=[_artifact(tmp_path)])

    (tmp_path / "tokens.css").write_text("edited\n", encoding="utf-8")
    assert not cache.is_fresh(fingerprint="abc", signature="sig", root=tmp_path)

    (tmp_path / "tokens.css").unlink()
    assert not cache.is_fresh(fingerprint="abc", signature="sig", root=tmp_path)


def test_corrupt_cache_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / CACHE_RELATIVE_PATH
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    cache = SyncCache(path)

    assert cache.sync_count == 0
    assert not cache.is_fresh(fingerprint="abc", signature="sig", root=tmp_path)
