"""CSS custom property generator."""

from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Tuple

from ..models import ResolvedTokenTree, TokenDescriptor, iter_tokens
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import kebab_path, title


def css_variable_name(path: str) -> str:
    """``colors.primary.500`` -> ``--colors-primary-500``."""
    return f"--{kebab_path(path.split('.'))}"


def iter_categories(tree: ResolvedTokenTree) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    """Yield non-empty categories in tree order."""
    for category, node in tree.items():
        if isinstance(node, Mapping) and any(True for _ in iter_tokens(node)):
            yield category, node


class CSSGenerator(Generator):
    """Emits one ``:root`` custom property per token, grouped by category."""

    name = "css"
    default_path = "src/styles/tokens.css"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [f"/* {HEADER_TITLE} */", f"/* {HEADER_NOTICE} */", "", ":root {"]
        sections: List[List[str]] = []
        for category, node in iter_categories(tree):
            section = [f"  /* {title(category)} */"]
            for path, descriptor in iter_tokens(node, category):
                section.append(f"  {css_variable_name(path)}: {descriptor.value};")
            sections.append(section)
        for index, section in enumerate(sections):
            if index:
                lines.append("")
            lines.extend(section)
        lines.append("}")

        utilities = list(self._color_utilities(tree.get("colors")))
        if utilities:
            lines.extend(["", "/* Utility Classes */"])
            lines.extend(utilities)
        return "\n".join(lines) + "\n"

    def _color_utilities(self, colors: Any) -> Iterator[str]:
        if not isinstance(colors, Mapping):
            return
        for path, descriptor in iter_tokens(colors, "colors"):
            if not isinstance(descriptor, TokenDescriptor):
                continue
            suffix = kebab_path(path.split(".")[1:])
            yield f".text-{suffix} {{ color: var({css_variable_name(path)}); }}"
