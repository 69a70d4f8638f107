"""Validation utilities."""
from pathlib import Path

from prep_admin.errors import ValidationError


def validate_id(name: str, value: str) -> str:
    """Validate ID string (no path traversal)."""
    if not isinstance(value, str):
        raise ValidationError(f"{name} is required", {name: "Required"})
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{name} is required", {name: "Required"})
    if Path(cleaned).name != cleaned or "/" in cleaned or "\\" in cleaned:
        raise ValidationError(f"Invalid {name}", {name: "Invalid characters"})
    return cleaned
