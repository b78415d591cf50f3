"""
Payload validators.

This module checks that client payloads have the shape the handlers need
to perform their lookups. It does not validate field values.
"""

from typing import Any, List, Optional, Tuple
import logging

from .schemas import PAYLOAD_SCHEMAS

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of validation with detailed error information."""

    def __init__(self, valid: bool, errors: List[str] = None):
        self.valid = valid
        self.errors = errors or []

    def __bool__(self):
        return self.valid

    def __str__(self):
        if self.valid:
            return "Validation passed"
        return f"Validation failed: {'; '.join(self.errors)}"


def validate_payload(message_type: str, payload: Any) -> ValidationResult:
    """
    Validate a message payload against its schema.

    Args:
        message_type: Client message type (e.g., "MOVE_TASK")
        payload: Decoded payload

    Returns:
        ValidationResult with success status and any errors

    Example:
        >>> result = validate_payload("MOVE_TASK", {"id": "t1", "status": "done"})
        >>> bool(result)
        True
    """
    schema = PAYLOAD_SCHEMAS.get(message_type)

    if schema is None:
        logger.debug(f"No schema defined for message type: {message_type}")
        return ValidationResult(valid=True)

    if not schema.requires_object:
        return ValidationResult(valid=True)

    if not isinstance(payload, dict):
        return ValidationResult(
            valid=False,
            errors=[f"Payload has type {type(payload).__name__}, expected object"],
        )

    valid, error = validate_required_keys(payload, *schema.required)
    if not valid:
        return ValidationResult(valid=False, errors=[error])

    return ValidationResult(valid=True)


def validate_required_keys(payload: dict, *keys: str) -> Tuple[bool, Optional[str]]:
    """
    Check that required keys are present.

    Args:
        payload: Payload to validate
        *keys: Required key names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing = [key for key in keys if key not in payload]

    if missing:
        return False, f"Missing required payload keys: {', '.join(missing)}"

    return True, None
