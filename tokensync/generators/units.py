"""Unit and color conversion used by the native dialect generators."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

_DIMENSION = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))\s*([a-z%]*)$", re.IGNORECASE)
_HEX = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB = re.compile(r"^rgba?\((.*)\)$", re.IGNORECASE)

_REM_UNITS = {"rem", "em"}
_ABSOLUTE_UNITS = {"", "px", "pt", "dp", "sp"}


class ConversionError(ValueError):
    """Raised when a token value cannot be expressed in a native unit."""


@dataclass(frozen=True)
class RGBA:
    red: int
    green: int
    blue: int
    alpha: float = 1.0

    @property
    def alpha_byte(self) -> int:
        return int(round(self.alpha * 255))

    def argb_hex(self) -> str:
        """``AARRGGBB`` in upper case, the 32-bit ordering Flutter and Android use."""
        return f"{self.alpha_byte:02X}{self.red:02X}{self.green:02X}{self.blue:02X}"

    def rgb_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


@dataclass(frozen=True)
class ShadowLayer:
    offset_x: float
    offset_y: float
    blur: float
    spread: float
    color: RGBA
    inset: bool = False


def to_native_number(value: str, rem_base: float = 16.0) -> float:
    """Convert ``1rem``/``24px``/``12`` into density-independent units."""
    text = str(value).strip()
    match = _DIMENSION.match(text)
    if not match:
        raise ConversionError(f"Cannot convert {value!r} to a native dimension")
    number = float(match.group(1))
    unit = match.group(2).lower()
    if unit in _REM_UNITS:
        return number * rem_base
    if unit in _ABSOLUTE_UNITS:
        return number
    raise ConversionError(f"Unsupported unit {unit!r} in {value!r}")


def is_percentage(value: str) -> bool:
    return bool(re.match(r"^-?(?:\d+\.?\d*|\.\d+)%$", str(value).strip()))


def to_plain_number(value: str) -> float:
    """Parse a unitless number such as an opacity or z-index."""
    text = str(value).strip()
    try:
        return float(text)
    except ValueError as exc:
        raise ConversionError(f"Expected a number, got {value!r}") from exc


def format_number(number: float) -> str:
    """``16.0`` -> ``16``; ``0.5`` -> ``0.5``."""
    if float(number).is_integer():
        return str(int(number))
    return f"{number:.4f}".rstrip("0").rstrip(".")


def format_double(number: float) -> str:
    """Always keep a decimal point: ``16`` -> ``16.0``."""
    if float(number).is_integer():
        return f"{number:.1f}"
    return f"{number:.4f}".rstrip("0")


def is_hex_color(value: str) -> bool:
    return bool(_HEX.match(str(value).strip()))


def parse_hex_color(value: str) -> RGBA:
    """Parse ``#RGB``, ``#RGBA``, ``#RRGGBB`` or ``#RRGGBBAA``."""
    match = _HEX.match(str(value).strip())
    if not match:
        raise ConversionError(f"Not a hex color: {value!r}")
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(char * 2 for char in digits)
    red, green, blue = (int(digits[index : index + 2], 16) for index in (0, 2, 4))
    alpha = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return RGBA(red, green, blue, alpha)


def parse_color(value: str) -> RGBA:
    """Parse a hex or ``rgb()``/``rgba()`` color."""
    text = str(value).strip()
    if text.startswith("#"):
        return parse_hex_color(text)
    match = _RGB.match(text)
    if not match:
        raise ConversionError(f"Unsupported color syntax: {value!r}")
    body = match.group(1).replace("/", " ").replace(",", " ")
    parts = body.split()
    if len(parts) not in (3, 4):
        raise ConversionError(f"Unsupported color syntax: {value!r}")
    try:
        channels = [_channel(part) for part in parts[:3]]
        alpha = _alpha(parts[3]) if len(parts) == 4 else 1.0
    except ValueError as exc:
        raise ConversionError(f"Unsupported color syntax: {value!r}") from exc
    return RGBA(channels[0], channels[1], channels[2], alpha)


def try_parse_color(value: str) -> Optional[RGBA]:
    try:
        return parse_color(value)
    except ConversionError:
        return None


def parse_box_shadow(value: str, rem_base: float = 16.0) -> List[ShadowLayer]:
    """Decompose a CSS box-shadow into layers; ``none`` yields an empty list."""
    text = str(value).strip()
    if not text or text.lower() == "none":
        return []
    layers: List[ShadowLayer] = []
    for raw_layer in _split_outside_parens(text, ","):
        tokens = _split_outside_parens(raw_layer.strip(), " ")
        inset = False
        color: Optional[RGBA] = None
        lengths: List[float] = []
        for token in tokens:
            if not token:
                continue
            if token.lower() == "inset":
                inset = True
            elif token.startswith("#") or token.lower().startswith("rgb"):
                color = parse_color(token)
            else:
                lengths.append(to_native_number(token, rem_base))
        if len(lengths) < 2 or len(lengths) > 4:
            raise ConversionError(f"Cannot decompose box-shadow {value!r}")
        lengths.extend([0.0] * (4 - len(lengths)))
        layers.append(
            ShadowLayer(
                offset_x=lengths[0],
                offset_y=lengths[1],
                blur=lengths[2],
                spread=lengths[3],
                color=color or RGBA(0, 0, 0, 1.0),
                inset=inset,
            )
        )
    return layers


def _split_outside_parens(text: str, separator: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part for part in parts if part.strip()]


def _channel(text: str) -> int:
    if text.endswith("%"):
        percent = float(text[:-1])
        if not 0 <= percent <= 100:
            raise ValueError(text)
        return int(round(percent * 255 / 100))
    number = int(round(float(text)))
    if not 0 <= number <= 255:
        raise ValueError(text)
    return number


def _alpha(text: str) -> float:
    alpha = float(text[:-1]) / 100 if text.endswith("%") else float(text)
    if not 0 <= alpha <= 1:
        raise ValueError(text)
    return alpha


def split_font_family(value: str) -> Tuple[str, ...]:
    """Split a CSS font stack into trimmed, unquoted family names."""
    families = []
    for part in str(value).split(","):
        name = part.strip().strip("'\"").strip()
        if name:
            families.append(name)
    return tuple(families)
