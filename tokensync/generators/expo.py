"""Expo theme module generator."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import camel_identifier, kebab_path
from .native import js_literal, leaves
from .react_native import build_sections


class ExpoGenerator(Generator):
    """React Native sections plus a light theme and NativeWind color map."""

    name = "expo"
    default_path = "src/theme/tokens.expo.js"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        colors = leaves(tree, ("colors",))
        flat_colors: Dict[str, Any] = {
            camel_identifier(parts, prefix="color"): value for parts, value in colors
        }
        nativewind: Dict[str, Any] = {kebab_path(parts): value for parts, value in colors}

        lines: List[str] = [
            f"// {HEADER_TITLE} for Expo",
            f"// {HEADER_NOTICE}",
            "",
            f"export const theme = {js_literal({'light': {'colors': flat_colors}})};",
            "",
            f"export const nativeWindColors = {js_literal(nativewind)};",
            "",
        ]
        sections = [
            (export, value)
            for export, value in build_sections(tree, options.rem_base)
            if export != "colors"
        ]
        for export, value in sections:
            lines.append(f"export const {export} = {js_literal(value)};")
            lines.append("")
        lines.append("export const getThemeColors = (colorScheme = 'light') =>")
        lines.append("  (theme[colorScheme] || theme.light).colors;")
        lines.append("")
        lines.append("export default {")
        lines.append("  theme,")
        lines.append("  nativeWindColors,")
        lines.extend(f"  {export}," for export, _ in sections)
        lines.append("};")
        return "\n".join(lines) + "\n"
