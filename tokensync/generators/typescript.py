"""TypeScript declaration generator.

Declarations describe the shape of the token tree only, so the output changes
when keys are added or removed but not when values change.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping

from ..models import ResolvedTokenTree, TokenDescriptor
from .base import HEADER_NOTICE, Generator, GeneratorOptions
from .css import iter_categories
from .naming import pascal_identifier


class TypeScriptGenerator(Generator):
    name = "typescript"
    default_path = "src/types/tokens.d.ts"

    def render(self, tree: ResolvedTokenTree, options: GeneratorOptions) -> str:
        lines: List[str] = [
            "// Design Tokens - Auto-generated TypeScript Definitions",
            f"// {HEADER_NOTICE}",
            "",
        ]
        members: List[str] = []
        for category, node in iter_categories(tree):
            interface = pascal_identifier([category])
            lines.append(f"export interface {interface} {{")
            lines.extend(self._shape(node, indent=1))
            lines.append("}")
            lines.append("")
            members.append(f"  {_property(category)}: {interface};")

        lines.append("export interface DesignTokens {")
        lines.extend(members)
        lines.append("}")
        lines.append("")
        lines.append("declare const tokens: DesignTokens;")
        lines.append("export default tokens;")
        return "\n".join(lines) + "\n"

    def _shape(self, node: Mapping[str, Any], indent: int) -> List[str]:
        pad = "  " * indent
        lines: List[str] = []
        for key, child in node.items():
            if isinstance(child, TokenDescriptor):
                lines.append(f"{pad}{json.dumps(str(key))}: string;")
            elif isinstance(child, Mapping):
                lines.append(f"{pad}{json.dumps(str(key))}: {{")
                lines.extend(self._shape(child, indent + 1))
                lines.append(f"{pad}}};")
        return lines


def _property(name: str) -> str:
    if name.isidentifier():
        return name
    return json.dumps(name)
