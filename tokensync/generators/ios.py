"""iOS (Swift/UIKit) token generator."""

from __future__ import annotations

from typing import List

from ..models import ResolvedTokenTree
from .base import HEADER_NOTICE, HEADER_TITLE, Generator, GeneratorOptions
from .naming import camel_identifier, pascal_identifier
from .native import DIMENSION_GROUPS, dimension, leaves, native_colors, shadow
from .units import RGBA, format_number


def swift_color(color: RGBA) -> str:
    """Component form, e.g. ``UIColor(red: 0.231, green: 0.510, blue: 0.965, alpha: 1.000)``."""
    return (
        f"UIColor(red: {color.red / 255:.3f}, green: {color.green / 255:.3f}, "
        f"blue: {color.blue / 255:.3f}, alpha: {color.alpha:.3f})"
    )


class IOSGenerator(Generator):
    name = "ios"
    default_path = "ios/DesignTokens.swift"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            f"// {HEADER_TITLE} for iOS",
            f"// {HEADER_NOTICE}",
            "",
            "import UIKit",
        ]

        colors = native_colors(tree, self.name)
        if colors:
            lines.extend(["", "public extension UIColor {"])
            for parts, color in colors:
                name = camel_identifier(parts, prefix="color")
                lines.append(f"    static let {name} = {swift_color(color)}")
            lines.append("}")

        for label, group in DIMENSION_GROUPS:
            values = leaves(tree, group)
            if not values:
                continue
            lines.extend(["", f"public enum {pascal_identifier([label])} {{"])
            for parts, value in values:
                path = ".".join(group + tuple(parts))
                points = dimension(value, options.rem_base, path)
                name = camel_identifier(parts, prefix=label)
                lines.append(f"    public static let {name}: CGFloat = {format_number(points)}")
            lines.append("}")

        shadows = leaves(tree, ("shadows",))
        if shadows:
            lines.extend(
                [
                    "",
                    "public struct ShadowToken {",
                    "    public let color: UIColor",
                    "    public let opacity: Float",
                    "    public let offset: CGSize",
                    "    public let radius: CGFloat",
                    "}",
                    "",
                    "public enum Shadows {",
                ]
            )
            for parts, value in shadows:
                layer = shadow(value, options.rem_base, "shadows." + ".".join(parts))
                name = camel_identifier(parts, prefix="shadow")
                if layer is None:
                    lines.append(f"    public static let {name}: ShadowToken? = nil")
                    continue
                opaque = RGBA(layer.color.red, layer.color.green, layer.color.blue, 1.0)
                lines.append(
                    f"    public static let {name} = ShadowToken("
                    f"color: {swift_color(opaque)}, "
                    f"opacity: {format_number(round(layer.color.alpha, 3))}, "
                    f"offset: CGSize(width: {format_number(layer.offset_x)}, height: {format_number(layer.offset_y)}), "
                    f"radius: {format_number(layer.blur / 2)})"
                )
            lines.append("}")

        return "\n".join(lines) + "\n"
