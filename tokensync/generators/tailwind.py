"""Tailwind theme configuration generator."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from ..models import ResolvedTokenTree, TokenDescriptor
from .base import HEADER_NOTICE, Generator, GeneratorOptions
from .units import split_font_family

# Token category -> key under ``theme.extend``.
_THEME_KEYS: Dict[str, str] = {
    "shadows": "boxShadow",
    "breakpoints": "screens",
}

# Sub-groups hoisted to the top of ``theme.extend``.
_HOISTED: Dict[str, Dict[str, str]] = {
    "typography": {
        "fontFamily": "fontFamily",
        "fontSize": "fontSize",
        "fontWeight": "fontWeight",
        "lineHeight": "lineHeight",
        "letterSpacing": "letterSpacing",
    },
    "transitions": {
        "duration": "transitionDuration",
        "easing": "transitionTimingFunction",
    },
}


def theme_key(key: str) -> str:
    return "DEFAULT" if key == "default" else key


def build_theme(tree: ResolvedTokenTree) -> Dict[str, Any]:
    """Return the ``theme.extend`` mapping for ``tree`` in category order."""
    extend: Dict[str, Any] = {}
    for category, node in tree.items():
        if not isinstance(node, Mapping) or not node:
            continue
        hoisted = _HOISTED.get(category)
        if hoisted is not None:
            for group, child in node.items():
                if not isinstance(child, Mapping) or not child:
                    continue
                target = hoisted.get(group, group)
                extend[target] = _convert(child, font_family=(target == "fontFamily"))
            continue
        target = _THEME_KEYS.get(category, category)
        extend[target] = _convert(node, font_family=(target == "fontFamily"))
    return extend


def _convert(node: Mapping[str, Any], *, font_family: bool) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, child in node.items():
        if isinstance(child, TokenDescriptor):
            if font_family:
                result[theme_key(key)] = list(split_font_family(child.value))
            else:
                result[theme_key(key)] = child.value
        elif isinstance(child, Mapping):
            result[theme_key(key)] = _convert(child, font_family=font_family)
    return result


class TailwindGenerator(Generator):
    """Emits a Tailwind config module extending the default theme."""

    name = "tailwind"
    default_path = "tailwind.config.js"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        config = {"theme": {"extend": build_theme(tree)}}
        lines: List[str] = [
            "/** @type {import('tailwindcss').Config} */",
            "// Design Tokens - Auto-generated Tailwind Configuration",
            f"// {HEADER_NOTICE}",
            "",
            f"export default {json.dumps(config, indent=2, ensure_ascii=False)};",
        ]
        return "\n".join(lines) + "\n"
