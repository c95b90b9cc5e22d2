"""Unused-token classification.

Every defined token ends up in exactly one of three groups: directly used
(some spelling of its path appears in the usage table), indirectly used (an
alias, or a structural default frameworks consume implicitly) or unused. Unused
tokens receive a remove/review/keep verdict from an ordered rule list; the
first rule whose predicate matches wins.

A ``remove`` verdict is a suggestion derived from text matching, not proof
that nothing depends on the token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from ..generators.naming import kebab, kebab_path
from ..models import (
    RECOMMENDATIONS,
    Classification,
    IndirectUsage,
    TokenDescriptor,
    TokenTree,
    UnusedTokenVerdict,
    UsageRecord,
    iter_tokens,
)
from ..resolver import is_reference

INDIRECT_DEFAULTS: FrozenSet[str] = frozenset({"spacing.0", "opacity.100"})

_EXTREME_SHADES = frozenset({"50", "100", "900", "950"})
_STRUCTURAL_KEYS = frozenset({"0", "none", "DEFAULT", "default"})
_STRUCTURAL_VALUES = frozenset({"0", "0px", "0rem", "none", "transparent"})
_SEPARATORS = re.compile(r"[.\-_/]+")

Predicate = Callable[[List[str], TokenDescriptor], bool]


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Predicate
    classification: Classification

    def matches(self, path: str, descriptor: TokenDescriptor) -> bool:
        return self.predicate(path.split("."), descriptor)


def _numeric(segment: str) -> Optional[float]:
    try:
        return float(segment)
    except ValueError:
        return None


def _is_system_utility(parts: List[str], descriptor: TokenDescriptor) -> bool:
    if parts[-1] in _STRUCTURAL_KEYS:
        return True
    if descriptor.value.strip().lower() in _STRUCTURAL_VALUES:
        return True
    return "fontFamily" in parts


def _is_extreme_shade(parts: List[str], descriptor: TokenDescriptor) -> bool:
    return parts[0] == "colors" and len(parts) > 2 and parts[-1] in _EXTREME_SHADES


def _is_large_spacing(parts: List[str], descriptor: TokenDescriptor) -> bool:
    if parts[0] != "spacing":
        return False
    step = _numeric(parts[-1])
    return step is not None and step >= 20


def _is_mid_scale_color(parts: List[str], descriptor: TokenDescriptor) -> bool:
    if parts[0] != "colors" or len(parts) < 3:
        return False
    shade = _numeric(parts[-1])
    return shade is not None and 150 <= shade <= 850 and shade != 500


DEFAULT_RULES: Sequence[ClassificationRule] = (
    ClassificationRule(
        name="system-utility",
        predicate=_is_system_utility,
        classification=Classification(
            kind="system",
            reason="System utility token, may be used indirectly",
            recommendation="keep",
        ),
    ),
    ClassificationRule(
        name="extreme-shade",
        predicate=_is_extreme_shade,
        classification=Classification(
            kind="design-scale",
            reason="Extreme shade in color scale, may be used for subtle effects",
            recommendation="review",
        ),
    ),
    ClassificationRule(
        name="large-spacing",
        predicate=_is_large_spacing,
        classification=Classification(
            kind="design-scale",
            reason="Large spacing value, may be used for layout",
            recommendation="review",
        ),
    ),
    ClassificationRule(
        name="mid-scale-color",
        predicate=_is_mid_scale_color,
        classification=Classification(
            kind="unused-design",
            reason="Mid-range design token not detected in codebase scan",
            recommendation="remove",
        ),
    ),
    ClassificationRule(
        name="fallback",
        predicate=lambda parts, descriptor: True,
        classification=Classification(
            kind="unknown",
            reason="Token not detected in codebase scan",
            recommendation="review",
        ),
    ),
)


@dataclass
class ClassificationReport:
    """Partition of the defined tokens into used, indirectly used and unused."""

    used: List[str] = field(default_factory=list)
    indirectly_used: List[IndirectUsage] = field(default_factory=list)
    unused: List[UnusedTokenVerdict] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)
    matches: Dict[str, List[str]] = field(default_factory=dict)

    def bucket(self, recommendation: str) -> List[UnusedTokenVerdict]:
        return [
            verdict
            for verdict in self.unused
            if verdict.classification.recommendation == recommendation
        ]


def token_variants(path: str) -> List[str]:
    """Plausible spellings a developer might have used for ``path``."""
    parts = path.split(".")
    variants: List[str] = [path, path.replace(".", "-"), kebab_path(parts)]
    if len(parts) > 1:
        category, rest = parts[0], parts[1:]
        variants.append(parts[-1])
        dashed_rest = "-".join(rest)
        if category == "colors":
            variants.extend([dashed_rest, f"color-{dashed_rest}", f"colors.{'.'.join(rest)}"])
        elif category == "spacing":
            variants.extend([f"spacing-{dashed_rest}", dashed_rest])
        elif category == "typography" and len(rest) > 1:
            group, tail = rest[0], ".".join(rest[1:])
            variants.extend([f"{group}.{tail}", f"{kebab(group)}-{'-'.join(rest[1:])}"])
        elif category == "borderRadius":
            variants.extend(
                [f"borderRadius.{'.'.join(rest)}", f"border-radius-{dashed_rest}", f"rounded-{dashed_rest}"]
            )
        elif category == "shadows":
            variants.append(f"shadow-{dashed_rest}")
    return list(dict.fromkeys(variants))


def _flatten(name: str) -> str:
    return "-".join(kebab(part) for part in _SEPARATORS.split(name) if part)


class UnusedTokenClassifier:
    """Cross-references defined tokens against a usage table."""

    def __init__(
        self,
        *,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
        indirect_defaults: Iterable[str] = INDIRECT_DEFAULTS,
    ) -> None:
        if not rules:
            raise ValueError("At least one classification rule is required")
        self.rules = list(rules)
        self.indirect_defaults = frozenset(indirect_defaults)

    def classify_token(self, path: str, descriptor: TokenDescriptor) -> Classification:
        for rule in self.rules:
            if rule.matches(path, descriptor):
                return rule.classification
        # Only reachable with a custom rule list lacking a catch-all.
        return DEFAULT_RULES[-1].classification

    def indirect_reason(self, path: str, descriptor: TokenDescriptor) -> Optional[str]:
        if is_reference(descriptor.value):
            return f"Alias of {descriptor.value.strip()}"
        if path in self.indirect_defaults:
            return "Structural default consumed implicitly by frameworks"
        return None

    def classify(self, defined: TokenTree, usage: Mapping[str, UsageRecord]) -> ClassificationReport:
        report = ClassificationReport()
        usage_keys = set(usage)
        flattened: Dict[str, List[str]] = {}
        for key in usage:
            flattened.setdefault(_flatten(key), []).append(key)

        for path, descriptor in iter_tokens(defined):
            matched = [variant for variant in token_variants(path) if variant in usage_keys]
            matched.extend(
                key for key in flattened.get(_flatten(path), []) if key not in matched
            )
            if matched:
                report.used.append(path)
                report.matches[path] = matched
                continue
            reason = self.indirect_reason(path, descriptor)
            if reason is not None:
                report.indirectly_used.append(
                    IndirectUsage(token_path=path, value=descriptor.value, reason=reason)
                )
                continue
            report.unused.append(
                UnusedTokenVerdict(
                    token_path=path,
                    value=descriptor.value,
                    classification=self.classify_token(path, descriptor),
                )
            )

        report.summary = {"total_unused": len(report.unused)}
        for recommendation in RECOMMENDATIONS:
            report.summary[recommendation] = len(report.bucket(recommendation))
        return report


def classify(defined: TokenTree, usage: Mapping[str, UsageRecord]) -> ClassificationReport:
    return UnusedTokenClassifier().classify(defined, usage)


__all__ = [
    "ClassificationReport",
    "ClassificationRule",
    "DEFAULT_RULES",
    "INDIRECT_DEFAULTS",
    "UnusedTokenClassifier",
    "classify",
    "token_variants",
]
