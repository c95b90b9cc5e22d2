"""Identifier helpers shared by the dialect generators."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


def kebab(segment: str) -> str:
    """``borderRadius`` -> ``border-radius``; ``2xl`` stays ``2xl``."""
    text = _CAMEL_BOUNDARY.sub("-", str(segment))
    text = _NON_WORD.sub("-", text)
    return text.strip("-").lower() or "_"


def kebab_path(parts: Iterable[str]) -> str:
    return "-".join(kebab(part) for part in parts)


def snake_path(parts: Iterable[str]) -> str:
    return "_".join(kebab(part).replace("-", "_") for part in parts)


def _words(parts: Iterable[str]) -> list[str]:
    words: list[str] = []
    for part in parts:
        words.extend(word for word in kebab(part).split("-") if word)
    return words


def camel_identifier(parts: Sequence[str], *, prefix: str = "token") -> str:
    """Join path parts into a lowerCamelCase identifier valid in Dart, Swift and JS."""
    words = _words(parts)
    if not words:
        return prefix
    head, *tail = words
    identifier = head + "".join(word[:1].upper() + word[1:] for word in tail)
    if identifier[0].isdigit():
        identifier = prefix + identifier[:1].upper() + identifier[1:]
    return identifier


def pascal_identifier(parts: Sequence[str], *, prefix: str = "Token") -> str:
    words = _words(parts)
    identifier = "".join(word[:1].upper() + word[1:] for word in words)
    if not identifier:
        return prefix
    if identifier[0].isdigit():
        identifier = prefix + identifier
    return identifier


def title(category: str) -> str:
    """Human heading for a category comment, e.g. ``borderRadius`` -> ``Border Radius``."""
    return " ".join(word.capitalize() for word in kebab(category).split("-"))
