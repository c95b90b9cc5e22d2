"""Reference resolution for ``{dot.path}`` placeholders inside token values."""

from __future__ import annotations

import re
import threading
from collections import OrderedDict
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .hashing import fingerprint_tree
from .loader import TOKEN_SETS
from .logging import get_logger
from .models import ResolvedTokenTree, TokenDescriptor, TokenTree, get_node

REFERENCE_PATTERN = re.compile(r"\{([^{}]+)\}")
DEFAULT_MAX_DEPTH = 10


class ResolutionCache:
    """Memo of resolved values, partitioned by document fingerprint.

    Entries are keyed by ``(raw_value, depth)`` inside the partition of the
    tree they were resolved against, so resolvers for different documents can
    share one cache. Only the ``max_documents`` most recently bound
    fingerprints are retained. All access is serialised by a lock.
    """

    def __init__(self, max_documents: int = 8) -> None:
        self.max_documents = max(1, max_documents)
        self._partitions: "OrderedDict[str, Dict[Tuple[str, int], str]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def bind(self, fingerprint: str) -> None:
        """Mark ``fingerprint`` as in use, evicting the least recently bound documents."""
        with self._lock:
            self._partitions.setdefault(fingerprint, {})
            self._partitions.move_to_end(fingerprint)
            while len(self._partitions) > self.max_documents:
                self._partitions.popitem(last=False)

    def get(self, fingerprint: str, raw_value: str, depth: int) -> Optional[str]:
        with self._lock:
            partition = self._partitions.get(fingerprint)
            value = partition.get((raw_value, depth)) if partition is not None else None
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def store(self, fingerprint: str, raw_value: str, depth: int, value: str) -> None:
        with self._lock:
            partition = self._partitions.get(fingerprint)
            # Evicted while resolving; the value is simply not memoised.
            if partition is not None:
                partition[(raw_value, depth)] = value

    def invalidate(self, fingerprint: Optional[str] = None) -> None:
        """Drop one document's entries, or every entry when no fingerprint is given."""
        with self._lock:
            if fingerprint is None:
                self._partitions.clear()
            else:
                self._partitions.pop(fingerprint, None)

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            return fingerprint in self._partitions

    def __len__(self) -> int:
        with self._lock:
            return sum(len(partition) for partition in self._partitions.values())


class ReferenceResolver:
    """Substitutes references against one token tree.

    Resolution is textual. Unresolvable references, circular references and
    chains deeper than ``max_depth`` leave the placeholder in place and record a
    warning in :attr:`warnings`.
    """

    def __init__(
        self,
        tree: TokenTree,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        cache: Optional[ResolutionCache] = None,
        fingerprint: Optional[str] = None,
    ) -> None:
        self.tree = tree
        self.max_depth = max_depth
        self.cache = cache
        self.warnings: List[str] = []
        self.logger = get_logger("resolver")
        self.fingerprint = fingerprint
        if cache is not None:
            self.fingerprint = fingerprint or fingerprint_tree(tree)
            cache.bind(self.fingerprint)

    def resolve(self, raw_value: str, depth: int = 0) -> str:
        value, _ = self._resolve(raw_value, depth, ())
        return value

    def resolve_tree(self) -> ResolvedTokenTree:
        return self._resolve_group(self.tree, "")

    def lookup(self, reference: str) -> Optional[Tuple[str, TokenDescriptor]]:
        """Return ``(path, descriptor)`` for a reference body, or None."""
        reference = reference.strip()
        if not reference:
            return None
        if "." not in reference:
            for category, node in self.tree.items():
                if isinstance(node, Mapping):
                    candidate = node.get(reference)
                    if isinstance(candidate, TokenDescriptor):
                        return f"{category}.{reference}", candidate
            return None

        candidate = get_node(self.tree, reference)
        if isinstance(candidate, TokenDescriptor):
            return reference, candidate
        head, _, rest = reference.partition(".")
        if head in TOKEN_SETS and rest:
            candidate = get_node(self.tree, rest)
            if isinstance(candidate, TokenDescriptor):
                return rest, candidate
        return None

    def _resolve_group(self, node: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
        resolved: Dict[str, Any] = {}
        for key, child in node.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(child, TokenDescriptor):
                value, _ = self._resolve(child.value, 0, (path,))
                resolved[key] = child if value == child.value else replace(child, value=value)
            elif isinstance(child, Mapping):
                resolved[key] = self._resolve_group(child, path)
            else:
                resolved[key] = child
        return resolved

    def _resolve(self, raw_value: str, depth: int, chain: Tuple[str, ...]) -> Tuple[str, bool]:
        """Return the resolved text and whether it may be memoised."""
        if "{" not in raw_value:
            return raw_value, True
        if depth > self.max_depth:
            self._warn(
                f"Reference depth limit ({self.max_depth}) exceeded while resolving '{raw_value}'"
            )
            return raw_value, False

        if self.cache is not None:
            cached = self.cache.get(self.fingerprint, raw_value, depth)
            if cached is not None:
                return cached, True

        clean = True

        def _substitute(match: "re.Match[str]") -> str:
            nonlocal clean
            placeholder = match.group(0)
            found = self.lookup(match.group(1))
            if found is None:
                self._warn(f"Token reference not found: {placeholder}")
                clean = False
                return placeholder
            path, descriptor = found
            if path in chain:
                cycle = " -> ".join(chain[chain.index(path):] + (path,))
                self._warn(f"Circular token reference: {cycle}")
                clean = False
                return placeholder
            value, ok = self._resolve(descriptor.value, depth + 1, chain + (path,))
            if not ok:
                clean = False
            return value

        result = REFERENCE_PATTERN.sub(_substitute, raw_value)
        if clean and self.cache is not None:
            self.cache.store(self.fingerprint, raw_value, depth, result)
        return result, clean

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        self.logger.warning(message)


def resolve(
    tree: TokenTree,
    raw_value: str,
    depth: int = 0,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    cache: Optional[ResolutionCache] = None,
) -> str:
    """Resolve a single raw value against ``tree``."""
    return ReferenceResolver(tree, max_depth=max_depth, cache=cache).resolve(raw_value, depth)


def resolve_tree(
    tree: TokenTree,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    cache: Optional[ResolutionCache] = None,
) -> ResolvedTokenTree:
    return ReferenceResolver(tree, max_depth=max_depth, cache=cache).resolve_tree()


def is_reference(value: str) -> bool:
    """True when ``value`` is exactly one reference placeholder."""
    return REFERENCE_PATTERN.fullmatch(value.strip()) is not None


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "REFERENCE_PATTERN",
    "ReferenceResolver",
    "ResolutionCache",
    "is_reference",
    "resolve",
    "resolve_tree",
]
