"""Dialect generator implementations and discovery utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import metadata
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from ..logging import get_logger
from ..models import GeneratedArtifact, ResolvedTokenTree
from .android import AndroidGenerator
from .base import Generator, GeneratorOptions
from .css import CSSGenerator
from .expo import ExpoGenerator
from .flutter import FlutterGenerator
from .ios import IOSGenerator
from .react_native import ReactNativeGenerator
from .scss import SCSSGenerator
from .tailwind import TailwindGenerator
from .typescript import TypeScriptGenerator
from .units import ConversionError
from .xamarin import XamarinGenerator

_ENTRY_POINT_GROUP = "tokensync.generators"

_BUILTIN_FACTORIES: dict[str, Callable[[], Generator]] = {
    "css": CSSGenerator,
    "tailwind": TailwindGenerator,
    "typescript": TypeScriptGenerator,
    "scss": SCSSGenerator,
    "react_native": ReactNativeGenerator,
    "expo": ExpoGenerator,
    "flutter": FlutterGenerator,
    "ios": IOSGenerator,
    "android": AndroidGenerator,
    "xamarin": XamarinGenerator,
}

logger = get_logger("generators")


@dataclass
class GenerationResult:
    """Artifacts that rendered, plus the dialects that failed and why."""

    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)


def discover_generators(enabled: Sequence[str] | None = None) -> List[Generator]:
    """Return instantiated generators, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    generators: List[Generator] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Generator]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Generator):
            raise TypeError(f"Generator factory for '{name}' did not return a Generator instance")
        generators.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        if enabled_set is not None and name.lower() not in enabled_set:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken plugin
            raise RuntimeError(f"Failed to load generator entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Generator:
            return _coerce_generator(obj)

        _add(name, _factory)

    if enabled_set is not None:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown generators requested: {', '.join(sorted(missing))}")

    return generators


def generate_all(
    tree: ResolvedTokenTree,
    targets: Mapping[str, Optional[str]],
    *,
    rem_base: float = 16.0,
    generators: Optional[Iterable[Generator]] = None,
) -> GenerationResult:
    """Run each requested generator; one failing dialect never stops the others.

    ``targets`` maps generator names to output paths (``None`` keeps the
    generator's default path).
    """
    if generators is None:
        generators = discover_generators()
    by_name = {generator.name: generator for generator in generators}

    result = GenerationResult()
    for name, path in targets.items():
        generator = by_name.get(name)
        if generator is None:
            result.failures[name] = "generator not available"
            logger.warning("No generator registered for '%s'", name)
            continue
        options = GeneratorOptions(path=path, rem_base=rem_base)
        try:
            artifact = generator.generate(tree, options)
        except Exception as exc:
            result.failures[name] = str(exc)
            logger.error("Generator '%s' failed: %s", name, exc)
            logger.debug("Generator '%s' traceback", name, exc_info=True)
            continue
        result.artifacts.append(artifact)
    return result


def _coerce_generator(obj: object) -> Generator:
    if isinstance(obj, Generator):
        return obj
    if isinstance(obj, type) and issubclass(obj, Generator):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Generator):
            return instance
    raise TypeError("Generator entry point must be a Generator subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    entry_points = metadata.entry_points()
    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]
    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "ConversionError",
    "GenerationResult",
    "Generator",
    "GeneratorOptions",
    "discover_generators",
    "generate_all",
]
