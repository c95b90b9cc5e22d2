"""Flutter (Dart) token class generator."""

from __future__ import annotations

from typing import List, Optional

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import camel_identifier, title
from .native import DIMENSION_GROUPS, dimension, leaves, native_colors, number, shadow
from .units import RGBA, format_double, split_font_family

_FONT_WEIGHT_KEYWORDS = {"normal": "FontWeight.normal", "bold": "FontWeight.bold"}

_CLASS_NAMES = {
    "spacing": "AppSpacing",
    "borderRadius": "AppRadius",
    "fontSize": "AppFontSize",
    "lineHeight": "AppLineHeight",
    "letterSpacing": "AppLetterSpacing",
    "breakpoints": "AppBreakpoints",
}


def flutter_color(color: RGBA) -> str:
    """``#3b82f6`` -> ``Color(0xFF3B82F6)``."""
    return f"Color(0x{color.argb_hex()})"


def flutter_font_weight(value: str) -> Optional[str]:
    text = value.strip().lower()
    if text in _FONT_WEIGHT_KEYWORDS:
        return _FONT_WEIGHT_KEYWORDS[text]
    if text.isdigit() and len(text) == 3 and text.endswith("00") and text[0] != "0":
        return f"FontWeight.w{text}"
    return None


def _dart_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("$", "\\$")
    return f"'{escaped}'"


class FlutterGenerator(Generator):
    name = "flutter"
    default_path = "lib/theme/design_tokens.dart"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            f"// {HEADER_TITLE} for Flutter",
            f"// {HEADER_NOTICE}",
            "",
            "import 'package:flutter/material.dart';",
        ]

        colors = native_colors(tree, self.name)
        if colors:
            body: List[str] = []
            current_group = None
            for parts, color in colors:
                group = parts[0] if len(parts) > 1 else None
                if group != current_group:
                    if body:
                        body.append("")
                    if group is not None:
                        body.append(f"  // {title(group)}")
                    current_group = group
                name = camel_identifier(parts, prefix="color")
                body.append(f"  static const Color {name} = {flutter_color(color)};")
            lines.extend(self._class("AppColors", body))

        for label, group in DIMENSION_GROUPS:
            values = leaves(tree, group)
            if not values:
                continue
            body = []
            for parts, value in values:
                path = ".".join(group + tuple(parts))
                name = camel_identifier([label] + parts)
                body.append(
                    f"  static const double {name} = {format_double(dimension(value, options.rem_base, path))};"
                )
            lines.extend(self._class(_CLASS_NAMES[label], body))

        typography: List[str] = []
        for parts, value in leaves(tree, ("typography", "fontFamily")):
            family = (split_font_family(value) or (value,))[0]
            name = camel_identifier(["fontFamily"] + parts)
            typography.append(f"  static const String {name} = {_dart_string(family)};")
        for parts, value in leaves(tree, ("typography", "fontWeight")):
            weight = flutter_font_weight(value)
            if weight is None:
                continue
            name = camel_identifier(["fontWeight"] + parts)
            typography.append(f"  static const FontWeight {name} = {weight};")
        if typography:
            lines.extend(self._class("AppTypography", typography))

        opacity = leaves(tree, ("opacity",))
        if opacity:
            body = [
                f"  static const double {camel_identifier(['opacity'] + parts)} = "
                f"{format_double(number(value, 'opacity.' + '.'.join(parts)))};"
                for parts, value in opacity
            ]
            lines.extend(self._class("AppOpacity", body))

        shadows: List[str] = []
        for parts, value in leaves(tree, ("shadows",)):
            layer = shadow(value, options.rem_base, "shadows." + ".".join(parts))
            name = camel_identifier(parts, prefix="shadow")
            if layer is None:
                shadows.append(f"  static const List<BoxShadow> {name} = <BoxShadow>[];")
                continue
            shadows.append(f"  static const List<BoxShadow> {name} = <BoxShadow>[")
            shadows.append("    BoxShadow(")
            shadows.append(f"      color: {flutter_color(layer.color)},")
            shadows.append(
                f"      offset: Offset({format_double(layer.offset_x)}, {format_double(layer.offset_y)}),"
            )
            shadows.append(f"      blurRadius: {format_double(layer.blur)},")
            shadows.append(f"      spreadRadius: {format_double(layer.spread)},")
            shadows.append("    ),")
            shadows.append("  ];")
        if shadows:
            lines.extend(self._class("AppShadows", shadows))

        return "\n".join(lines) + "\n"

    @staticmethod
    def _class(name: str, body: List[str]) -> List[str]:
        return ["", f"class {name} {{", f"  {name}._();", "", *body, "}"]
