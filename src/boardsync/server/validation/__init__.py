"""
Validation package for client payloads.

This package provides schema definitions and validators that make sure a
payload carries the keys its handler looks up.
"""

from .validators import (
    ValidationResult,
    validate_payload,
    validate_required_keys,
)
from .schemas import PAYLOAD_SCHEMAS, PayloadSchema, get_schema

__all__ = [
    "ValidationResult",
    "validate_payload",
    "validate_required_keys",
    "PAYLOAD_SCHEMAS",
    "PayloadSchema",
    "get_schema",
]
