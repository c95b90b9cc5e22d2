"""Base interface for dialect generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..models import GeneratedArtifact, ResolvedTokenTree

HEADER_TITLE = "Design Tokens - Auto-generated"
HEADER_NOTICE = "Do not edit this file manually"


@dataclass(frozen=True)
class GeneratorOptions:
    """Small set of knobs shared by every generator."""

    path: Optional[str] = None
    rem_base: float = 16.0


class Generator(ABC):
    """Pure transform from a resolved token tree into one text artifact."""

    name: str = ""
    default_path: str = ""

    @abstractmethod
    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        """Return the artifact text for ``tree``."""

    def generate(
        self, tree: ResolvedTokenTree, options: Optional[GeneratorOptions] = None
    ) -> GeneratedArtifact:
        options = options if options is not None else GeneratorOptions()
        content = self.render(tree, options)
        if not content.endswith("\n"):
            content += "\n"
        return GeneratedArtifact(
            name=self.name,
            path=options.path or self.default_path,
            content=content,
        )
