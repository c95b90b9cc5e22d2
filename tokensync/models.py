"""Core data models shared across tokensync components."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

# Detection pattern categories in declaration order; a usage record reports
# the earliest of these among the categories that matched it.
MATCH_TYPES: Tuple[str, ...] = (
    "css-variable",
    "scss-variable",
    "token-reference",
    "tailwind-color",
    "tailwind-spacing",
    "spacing-token",
    "typography-size",
    "typography-weight",
    "typography-family",
    "typography-leading",
    "border-radius",
    "shadow",
    "opacity",
)

RECOMMENDATIONS: Tuple[str, ...] = ("remove", "review", "keep")


@dataclass(frozen=True)
class TokenDescriptor:
    """A single design token leaf as read from the token document."""

    value: str
    type: str
    description: Optional[str] = None


# Category name -> nested mapping whose leaves are TokenDescriptor instances.
TokenTree = Dict[str, Any]
ResolvedTokenTree = Dict[str, Any]


@dataclass
class GeneratedArtifact:
    """Rendered output for one dialect."""

    name: str
    path: str
    content: str
    changed: bool = False

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass
class UsageRecord:
    """Aggregate evidence that a normalized token name appears in source files."""

    token: str
    count: int = 0
    files: Set[str] = field(default_factory=set)
    match_types: Set[str] = field(default_factory=set)
    category: str = "other"

    @property
    def match_type(self) -> Optional[str]:
        if not self.match_types:
            return None
        return min(self.match_types, key=_match_type_rank)

    def merge(self, other: "UsageRecord") -> None:
        self.count += other.count
        self.files.update(other.files)
        self.match_types.update(other.match_types)
        if self.category == "other":
            self.category = other.category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "count": self.count,
            "files": sorted(self.files),
            "match_type": self.match_type,
            "category": self.category,
        }


@dataclass(frozen=True)
class Classification:
    """Heuristic verdict for a token that was not found in a usage scan."""

    kind: str
    reason: str
    recommendation: str


@dataclass(frozen=True)
class UnusedTokenVerdict:
    """A defined token absent from the usage table, with its classification."""

    token_path: str
    value: str
    classification: Classification


@dataclass(frozen=True)
class IndirectUsage:
    """A token considered used without appearing in the usage table."""

    token_path: str
    value: str
    reason: str


def _match_type_rank(name: str) -> Tuple[int, str]:
    try:
        return (MATCH_TYPES.index(name), name)
    except ValueError:
        return (len(MATCH_TYPES), name)


def iter_tokens(tree: Mapping[str, Any], prefix: str = "") -> Iterator[Tuple[str, TokenDescriptor]]:
    """Yield ``(dot_path, descriptor)`` pairs in tree insertion order."""
    for key, node in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(node, TokenDescriptor):
            yield path, node
        elif isinstance(node, Mapping):
            yield from iter_tokens(node, path)


def get_node(tree: Mapping[str, Any], path: str) -> Any:
    """Walk a dot-separated path from the tree root; return None when absent."""
    current: Any = tree
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


def token_paths(tree: Mapping[str, Any]) -> List[str]:
    return [path for path, _ in iter_tokens(tree)]
