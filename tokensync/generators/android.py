"""Android resource XML generator."""

from __future__ import annotations

from typing import List
from xml.sax.saxutils import escape

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import snake_path
from .native import DIMENSION_GROUPS, dimension, elevation, leaves, native_colors, number, shadow
from .units import RGBA, format_number, split_font_family

# Text sizes use scale-independent pixels; everything else density-independent.
_SP_GROUPS = {"fontSize", "letterSpacing"}


def android_color(color: RGBA) -> str:
    """``#3b82f6`` -> ``#FF3B82F6``."""
    return f"#{color.argb_hex()}"


class AndroidGenerator(Generator):
    name = "android"
    default_path = "android/app/src/main/res/values/design_tokens.xml"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f"<!-- {HEADER_TITLE} for Android -->",
            f"<!-- {HEADER_NOTICE} -->",
            "<resources>",
        ]

        colors = native_colors(tree, self.name)
        if colors:
            lines.append("    <!-- Colors -->")
            for parts, color in colors:
                lines.append(f'    <color name="{snake_path(parts)}">{android_color(color)}</color>')

        for label, group in DIMENSION_GROUPS:
            values = leaves(tree, group)
            if not values:
                continue
            unit = "sp" if label in _SP_GROUPS else "dp"
            lines.append(f"    <!-- {label} -->")
            for parts, value in values:
                if label == "lineHeight" and value.strip().replace(".", "", 1).isdigit():
                    # Unitless line heights are multipliers.
                    lines.append(
                        f'    <item name="{snake_path([label] + parts)}" format="float" type="dimen">'
                        f"{format_number(number(value, 'typography.lineHeight'))}</item>"
                    )
                    continue
                path = ".".join(group + tuple(parts))
                amount = format_number(dimension(value, options.rem_base, path))
                lines.append(f'    <dimen name="{snake_path([label] + parts)}">{amount}{unit}</dimen>')

        families = leaves(tree, ("typography", "fontFamily"))
        if families:
            lines.append("    <!-- fontFamily -->")
            for parts, value in families:
                family = (split_font_family(value) or (value,))[0]
                lines.append(
                    f'    <string name="{snake_path(["font_family"] + parts)}">{escape(family)}</string>'
                )

        shadows = leaves(tree, ("shadows",))
        if shadows:
            lines.append("    <!-- shadows -->")
            for parts, value in shadows:
                layer = shadow(value, options.rem_base, "shadows." + ".".join(parts))
                amount = elevation(layer) if layer is not None else 0
                lines.append(
                    f'    <dimen name="{snake_path(["shadow"] + parts + ["elevation"])}">{amount}dp</dimen>'
                )

        lines.append("</resources>")
        return "\n".join(lines) + "\n"
