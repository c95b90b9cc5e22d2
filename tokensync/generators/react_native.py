"""React Native token module generator."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .native import (
    dimension_value,
    elevation,
    js_literal,
    leaves,
    nest,
    number,
    shadow,
)
from .units import RGBA, ShadowLayer, split_font_family


def rn_shadow(layer: ShadowLayer) -> Dict[str, Any]:
    color: RGBA = layer.color
    return {
        "shadowColor": color.rgb_hex(),
        "shadowOffset": {"width": layer.offset_x, "height": layer.offset_y},
        "shadowOpacity": round(color.alpha, 3),
        "shadowRadius": layer.blur,
        "elevation": elevation(layer),
    }


def build_sections(tree: ResolvedTokenTree, rem_base: float) -> List[Tuple[str, Dict[str, Any]]]:
    """Return ``(export_name, object)`` pairs for every category present."""
    sections: List[Tuple[str, Dict[str, Any]]] = []

    colors = leaves(tree, ("colors",))
    if colors:
        sections.append(("colors", nest(colors)))

    spacing = leaves(tree, ("spacing",))
    if spacing:
        sections.append(
            ("spacing", nest([(p, dimension_value(v, rem_base, "spacing")) for p, v in spacing]))
        )

    typography: Dict[str, Any] = {}
    families = leaves(tree, ("typography", "fontFamily"))
    if families:
        typography["fontFamily"] = nest(
            [(p, (split_font_family(v) or (v,))[0]) for p, v in families]
        )
    for group in ("fontSize", "lineHeight", "letterSpacing"):
        values = leaves(tree, ("typography", group))
        if values:
            label = f"typography.{group}"
            typography[group] = nest([(p, dimension_value(v, rem_base, label)) for p, v in values])
    weights = leaves(tree, ("typography", "fontWeight"))
    if weights:
        typography["fontWeight"] = nest(weights)
    if typography:
        sections.append(("typography", typography))

    radii = leaves(tree, ("borderRadius",))
    if radii:
        sections.append(
            ("borderRadius", nest([(p, dimension_value(v, rem_base, "borderRadius")) for p, v in radii]))
        )

    shadows = []
    for parts, value in leaves(tree, ("shadows",)):
        layer = shadow(value, rem_base, "shadows." + ".".join(parts))
        shadows.append((parts, rn_shadow(layer) if layer is not None else {}))
    if shadows:
        sections.append(("shadows", nest(shadows)))

    opacity = leaves(tree, ("opacity",))
    if opacity:
        sections.append(("opacity", nest([(p, number(v, "opacity")) for p, v in opacity])))

    z_index = leaves(tree, ("zIndex",))
    if z_index:
        sections.append(("zIndex", nest([(p, number(v, "zIndex")) for p, v in z_index])))

    breakpoints = leaves(tree, ("breakpoints",))
    if breakpoints:
        sections.append(
            ("breakpoints", nest([(p, dimension_value(v, rem_base, "breakpoints")) for p, v in breakpoints]))
        )
    return sections


class ReactNativeGenerator(Generator):
    """Plain JS objects with numeric density-independent values."""

    name = "react_native"
    default_path = "src/theme/tokens.js"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            f"// {HEADER_TITLE} for React Native",
            f"// {HEADER_NOTICE}",
            "",
        ]
        sections = build_sections(tree, options.rem_base)
        for export, value in sections:
            lines.append(f"export const {export} = {js_literal(value)};")
            lines.append("")
        lines.append("export default {")
        lines.extend(f"  {export}," for export, _ in sections)
        lines.append("};")
        return "\n".join(lines) + "\n"
