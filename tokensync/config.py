"""Configuration loading for tokensync (.tokensync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

CONFIG_FILENAME = ".tokensync.yml"

DEFAULT_OUTPUTS: Dict[str, str] = {
    "css": "src/styles/tokens.css",
    "tailwind": "tailwind.config.js",
}

DEFAULT_SCAN_DIRS = ["src", "components", "pages", "app"]
DEFAULT_FILE_EXTENSIONS = [
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".vue",
    ".svelte",
    ".css",
    ".scss",
    ".html",
]

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})
_SCALARS = (str, int, float, bool)

Number = TypeVar("Number", int, float)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TokensConfig:
    """Where the token document lives and which categories it must define."""

    input: str = "tokens.json"
    required: List[str] = field(default_factory=lambda: ["colors"])
    optional: List[str] = field(default_factory=lambda: ["spacing", "typography"])


@dataclass
class ResolverConfig:
    """Reference resolution limits."""

    max_depth: int = 10
    cache: bool = True


@dataclass
class GeneratorConfig:
    """Options shared by every dialect generator."""

    rem_base: float = 16.0


@dataclass
class AnalyticsConfig:
    """Usage scan settings."""

    scan_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SCAN_DIRS))
    file_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=list)
    max_workers: int = 8
    output_dir: str = ".tokensync/reports"


@dataclass
class TokenSyncConfig:
    """Represents the high-level settings defined in .tokensync.yml."""

    root: Path
    tokens: TokensConfig = field(default_factory=TokensConfig)
    outputs: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_OUTPUTS))
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    generators: GeneratorConfig = field(default_factory=GeneratorConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    sync_cache: bool = True

    @property
    def input_path(self) -> Path:
        return self.root / self.tokens.input

    def signature(self) -> str:
        """Stable description of the settings that influence generated output."""
        parts = [f"{name}={path}" for name, path in sorted(self.outputs.items())]
        parts.append(f"max_depth={self.resolver.max_depth}")
        parts.append(f"rem_base={self.generators.rem_base}")
        return ";".join(parts)


def load_config(config_path: Path) -> TokenSyncConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TokenSyncConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    tokens = TokensConfig()
    tokens_data = _as_dict(data.get("tokens"))
    if tokens_data:
        tokens.input = _as_str(tokens_data.get("input")) or tokens.input
        validation = _as_dict(tokens_data.get("validation"))
        if "required" in validation:
            tokens.required = _as_str_list(validation.get("required"))
        if "optional" in validation:
            tokens.optional = _as_str_list(validation.get("optional"))

    outputs = dict(DEFAULT_OUTPUTS)
    if "output" in data:
        output_data = data.get("output")
        if output_data is not None and not isinstance(output_data, dict):
            raise ConfigError("'output' must map generator names to file paths")
        outputs = {}
        for name, target in _as_dict(output_data).items():
            # A null target disables the generator.
            path = _as_str(target)
            if path:
                outputs[str(name)] = path

    resolver = ResolverConfig()
    resolver_data = _as_dict(data.get("resolver"))
    if resolver_data:
        max_depth = _as_number(resolver_data.get("max_depth"), int)
        if max_depth is not None:
            if max_depth < 0:
                raise ConfigError("resolver.max_depth must not be negative")
            resolver.max_depth = max_depth
        cache = _as_bool(resolver_data.get("cache"))
        if cache is not None:
            resolver.cache = cache

    generators = GeneratorConfig()
    generator_data = _as_dict(data.get("generators"))
    rem_base = _as_number(generator_data.get("rem_base"), float) if generator_data else None
    if rem_base is not None:
        if rem_base <= 0:
            raise ConfigError("generators.rem_base must be positive")
        generators.rem_base = rem_base

    analytics = AnalyticsConfig()
    analytics_data = _as_dict(data.get("analytics"))
    if analytics_data:
        if "scan_dirs" in analytics_data:
            analytics.scan_dirs = _as_str_list(analytics_data.get("scan_dirs"))
        if "file_extensions" in analytics_data:
            analytics.file_extensions = [
                ext if ext.startswith(".") else f".{ext}"
                for ext in _as_str_list(analytics_data.get("file_extensions"))
            ]
        analytics.exclude_paths = _as_str_list(analytics_data.get("exclude_paths"))
        max_workers = _as_number(analytics_data.get("max_workers"), int)
        if max_workers is not None:
            analytics.max_workers = max(1, max_workers)
        analytics.output_dir = _as_str(analytics_data.get("output_dir")) or analytics.output_dir

    sync_data = _as_dict(data.get("sync"))
    sync_cache = _as_bool(sync_data.get("cache")) if sync_data else None

    return TokenSyncConfig(
        root=root,
        tokens=tokens,
        outputs=outputs,
        resolver=resolver,
        generators=generators,
        analytics=analytics,
        sync_cache=True if sync_cache is None else sync_cache,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, _SCALARS):
        return str(value)
    return None


def _as_number(value: Any, kind: Type[Number]) -> Optional[Number]:
    """Coerce YAML numbers and numeric strings; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    if kind is int and isinstance(value, float):
        return None
    try:
        return kind(value)
    except ValueError:
        return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    word = value.strip().lower() if isinstance(value, str) else None
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if isinstance(item, _SCALARS)]
    return []
