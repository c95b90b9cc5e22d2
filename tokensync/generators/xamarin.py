"""Xamarin.Forms (C#) token generator."""

from __future__ import annotations

from typing import List

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import pascal_identifier
from .native import DIMENSION_GROUPS, dimension, elevation, leaves, native_colors, shadow
from .units import RGBA, format_double, split_font_family


def xamarin_color(color: RGBA) -> str:
    return f"Color.FromRgba({color.red}, {color.green}, {color.blue}, {color.alpha_byte})"


def _cs_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class XamarinGenerator(Generator):
    name = "xamarin"
    default_path = "Xamarin/DesignTokens.cs"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            f"// {HEADER_TITLE} for Xamarin",
            f"// {HEADER_NOTICE}",
            "",
            "using Xamarin.Forms;",
        ]

        colors = native_colors(tree, self.name)
        if colors:
            body = [
                f"    public static readonly Color {pascal_identifier(parts, prefix='Color')} = {xamarin_color(color)};"
                for parts, color in colors
            ]
            lines.extend(self._class("AppColors", body))

        for label, group in DIMENSION_GROUPS:
            values = leaves(tree, group)
            if not values:
                continue
            body = []
            for parts, value in values:
                path = ".".join(group + tuple(parts))
                amount = format_double(dimension(value, options.rem_base, path))
                body.append(f"    public const double {pascal_identifier([label] + parts)} = {amount};")
            lines.extend(self._class(f"App{pascal_identifier([label])}", body))

        families = leaves(tree, ("typography", "fontFamily"))
        if families:
            body = [
                f"    public const string {pascal_identifier(parts)}FontFamily = "
                f"{_cs_string((split_font_family(value) or (value,))[0])};"
                for parts, value in families
            ]
            lines.extend(self._class("AppFonts", body))

        shadows = leaves(tree, ("shadows",))
        if shadows:
            body = []
            for parts, value in shadows:
                layer = shadow(value, options.rem_base, "shadows." + ".".join(parts))
                amount = float(elevation(layer)) if layer is not None else 0.0
                body.append(
                    f"    public const double {pascal_identifier(parts, prefix='Shadow')}Elevation = {format_double(amount)};"
                )
            lines.extend(self._class("AppShadows", body))

        return "\n".join(lines) + "\n"

    @staticmethod
    def _class(name: str, body: List[str]) -> List[str]:
        return ["", f"public static class {name}", "{", *body, "}"]
