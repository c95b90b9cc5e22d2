"""Core validation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from tokensync.loader import LoadedTokens


@dataclass
class ValidationResult:
    """Errors block generation; warnings are advisory."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, object]:
        return {
            "valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "summary": dict(self.summary),
        }


class TokenValidationError(RuntimeError):
    """Raised when token validation reports errors and the caller did not force."""

    def __init__(self, result: ValidationResult) -> None:
        count = len(result.errors)
        detail = "; ".join(result.errors)
        super().__init__(f"Token validation failed with {count} error(s): {detail}")
        self.result = result


class Validator(Protocol):
    """Protocol implemented by token validators."""

    name: str

    def validate(self, loaded: "LoadedTokens") -> ValidationResult:
        """Run validation and return the collected findings."""
