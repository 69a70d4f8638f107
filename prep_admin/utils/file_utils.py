"""File handling utilities."""
from pathlib import Path

from prep_admin.errors import ValidationError


def safe_asset_path(base_dir: Path, asset_path: str) -> Path:
    """Resolve asset path safely (prevent path traversal)."""
    resolved = (base_dir / asset_path).resolve()
    if base_dir.resolve() not in resolved.parents and resolved != base_dir.resolve():
        raise ValidationError("Invalid asset path")
    return resolved
