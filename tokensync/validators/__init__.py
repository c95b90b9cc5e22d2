"""Token validators."""

from .base import TokenValidationError, ValidationResult, Validator
from .structure import TokenValidator

__all__ = [
    "TokenValidationError",
    "TokenValidator",
    "ValidationResult",
    "Validator",
]
