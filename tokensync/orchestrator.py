"""Pipeline orchestration for validate/sync/analyze flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .analytics.classifier import UnusedTokenClassifier
from .analytics.report import UsageReport, build_report
from .analytics.scanner import UsageScanner
from .config import TokenSyncConfig, load_config
from .generators import Generator, generate_all
from .loader import LoadedTokens, load_tokens
from .logging import get_logger
from .models import GeneratedArtifact
from .resolver import ReferenceResolver, ResolutionCache
from .stores import SyncCache
from .validators import TokenValidationError, TokenValidator, ValidationResult, Validator
from .writer import ArtifactWriter

WriterFactory = Callable[..., ArtifactWriter]


@dataclass
class SyncOutcome:
    """Result of a sync run."""

    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    skipped: bool = False
    dry_run: bool = False
    validation: Optional[ValidationResult] = None

    @property
    def changed(self) -> List[GeneratedArtifact]:
        return [artifact for artifact in self.artifacts if artifact.changed]


class Orchestrator:
    """Coordinates token validation, generation and usage analysis."""

    def __init__(
        self,
        validator: Validator | None = None,
        scanner: UsageScanner | None = None,
        classifier: UnusedTokenClassifier | None = None,
        generators: Optional[Iterable[Generator]] = None,
        writer_factory: WriterFactory | None = None,
        resolution_cache: ResolutionCache | None = None,
    ) -> None:
        self._validator_override = validator
        self._validator_cache: Dict[Tuple[Tuple[str, ...], Tuple[str, ...]], TokenValidator] = {}
        self.scanner = scanner
        self.classifier = classifier if classifier is not None else UnusedTokenClassifier()
        self._generators = list(generators) if generators is not None else None
        self.writer_factory = writer_factory or ArtifactWriter
        self.resolution_cache = resolution_cache if resolution_cache is not None else ResolutionCache()
        self.logger = get_logger("orchestrator")

    def run_validate(self, path: str) -> ValidationResult:
        """Load and validate the token document for a project."""
        config = self._load_config(path)
        loaded = self._load_tokens(config)
        result = self._validator_for(config).validate(loaded)
        self.logger.info(
            "Validated %d token(s): %d error(s), %d warning(s)",
            result.summary.get("tokens", 0),
            len(result.errors),
            len(result.warnings),
        )
        return result

    def run_sync(self, path: str, *, dry_run: bool = False, force: bool = False) -> SyncOutcome:
        """Regenerate every configured artifact from the token document."""
        config = self._load_config(path)
        root = config.root
        self.logger.info("Starting sync run for %s", root)
        loaded = self._load_tokens(config)

        validation = self._validator_for(config).validate(loaded)
        for warning in validation.warnings:
            self.logger.debug("Validation warning: %s", warning)
        if not validation.is_valid:
            if not force:
                raise TokenValidationError(validation)
            self.logger.warning(
                "Continuing despite %d validation error(s) (--force)", len(validation.errors)
            )

        cache = SyncCache.for_root(root) if config.sync_cache else SyncCache(None)
        signature = config.signature()
        if not force and not dry_run and cache.is_fresh(
            fingerprint=loaded.content_hash, signature=signature, root=root
        ):
            self.logger.info("Tokens unchanged since last sync; skipping generation")
            return SyncOutcome(skipped=True, validation=validation)

        resolver = ReferenceResolver(
            loaded.tree,
            max_depth=config.resolver.max_depth,
            cache=self.resolution_cache if config.resolver.cache else None,
            fingerprint=loaded.content_hash,
        )
        resolved = resolver.resolve_tree()
        self.logger.debug("Resolved token tree (%d cached value(s))", len(self.resolution_cache))

        generation = generate_all(
            resolved,
            config.outputs,
            rem_base=config.generators.rem_base,
            generators=self._generators,
        )
        writer = self.writer_factory(root, dry_run=dry_run)
        artifacts = writer.write_all(generation.artifacts)

        if dry_run:
            self.logger.info("Dry-run completed; %d artifact(s) would change", sum(a.changed for a in artifacts))
        elif generation.failures:
            self.logger.warning(
                "%d generator(s) failed; sync cache not updated", len(generation.failures)
            )
        else:
            cache.record(fingerprint=loaded.content_hash, signature=signature, artifacts=artifacts)
            cache.persist()

        return SyncOutcome(
            artifacts=artifacts,
            failures=dict(generation.failures),
            warnings=list(resolver.warnings),
            dry_run=dry_run,
            validation=validation,
        )

    def run_analyze(self, path: str) -> UsageReport:
        """Scan project sources and classify unused tokens."""
        config = self._load_config(path)
        root = config.root
        self.logger.info("Starting analyze run for %s", root)
        loaded = self._load_tokens(config)

        analytics = config.analytics
        scanner = self.scanner or UsageScanner(
            max_workers=analytics.max_workers,
            exclude_paths=analytics.exclude_paths,
            root=root,
        )
        scan_dirs = [root / directory for directory in analytics.scan_dirs]
        scan = scanner.scan_with_stats(scan_dirs, analytics.file_extensions)
        self.logger.debug(
            "Scanned %d file(s); %d distinct token reference(s)", scan.files_scanned, len(scan.usage)
        )

        classification = self.classifier.classify(loaded.tree, scan.usage)
        report = build_report(loaded.tree, scan, classification)
        self.logger.info(
            "Token adoption %.1f%% (%d unused)",
            report.summary["adoption_rate"],
            report.summary["unused_tokens"],
        )
        return report

    @staticmethod
    def _load_config(path: str) -> TokenSyncConfig:
        return load_config(Path(path).expanduser())

    def _load_tokens(self, config: TokenSyncConfig) -> LoadedTokens:
        self.logger.debug("Loading tokens from %s", config.input_path)
        return load_tokens(config.input_path, config.tokens.required)

    def _validator_for(self, config: TokenSyncConfig) -> Validator:
        if self._validator_override is not None:
            return self._validator_override
        key = (tuple(config.tokens.required), tuple(config.tokens.optional))
        validator = self._validator_cache.get(key)
        if validator is None:
            validator = TokenValidator(required=key[0], optional=key[1])
            self._validator_cache[key] = validator
        return validator


__all__ = ["Orchestrator", "SyncOutcome"]
