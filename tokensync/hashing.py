"""Content hashing helpers used for cache invalidation."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Mapping

from .models import TokenDescriptor


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    return hash_bytes(text.encode("utf-8"))


def hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def fingerprint_tree(tree: Mapping[str, Any]) -> str:
    """Return a stable digest of a token tree, sensitive to key order."""
    payload = json.dumps(_to_plain(tree), separators=(",", ":"), ensure_ascii=False)
    return hash_text(payload)


def _to_plain(node: Any) -> Any:
    if isinstance(node, TokenDescriptor):
        return [node.value, node.type, node.description]
    if isinstance(node, Mapping):
        # Lists of pairs keep insertion order, which the resolver depends on.
        return [[str(key), _to_plain(value)] for key, value in node.items()]
    return node


__all__ = ["fingerprint_tree", "hash_bytes", "hash_file", "hash_text"]
