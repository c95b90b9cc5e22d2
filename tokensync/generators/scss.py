"""SCSS variable generator."""

from __future__ import annotations

from typing import List

from ..models import ResolvedTokenTree, iter_tokens
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .css import iter_categories
from .naming import kebab_path, title


class SCSSGenerator(Generator):
    name = "scss"
    default_path = "src/styles/_tokens.scss"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [f"// {HEADER_TITLE}", f"// {HEADER_NOTICE}"]
        for category, node in iter_categories(tree):
            lines.extend(["", f"// {title(category)}"])
            for path, descriptor in iter_tokens(node, category):
                lines.append(f"${kebab_path(path.split('.'))}: {descriptor.value};")
        return "\n".join(lines) + "\n"
