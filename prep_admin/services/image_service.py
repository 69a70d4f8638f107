"""Image uploads for questions, breakdowns, slides and videos."""
import logging
import uuid
from pathlib import Path

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from prep_admin.config import (
    IMAGE_ALLOWED_EXTENSIONS,
    IMAGE_FOLDERS,
    IMAGE_MAX_DIMENSION,
    IMAGE_MAX_SIZE_BYTES,
)
from prep_admin.errors import StoreError, ValidationError
from prep_admin.utils.file_utils import safe_asset_path

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}


def validate_image_file(file: UploadFile, folder: str) -> None:
    """
    Validate an uploaded image before it is stored.

    Raises:
        ValidationError: If folder, extension or content type is not allowed
    """
    if folder not in IMAGE_FOLDERS:
        raise ValidationError(f"Unknown folder: {folder}", {"folder": "Invalid"})

    if not file.filename:
        raise ValidationError("No filename provided", {"file": "Required"})

    ext = Path(file.filename).suffix.lower()
    if ext not in IMAGE_ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(IMAGE_ALLOWED_EXTENSIONS))
        raise ValidationError(f"Invalid file type. Allowed: {allowed}", {"file": "Invalid type"})

    if file.content_type and file.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            f"Invalid content type: {file.content_type}", {"file": "Invalid content type"}
        )


def resize_image(image_path: Path, max_dimension: int = IMAGE_MAX_DIMENSION) -> bool:
    """
    Downscale an image in place to fit within `max_dimension`.

    Returns:
        True if the file was rewritten
    """
    try:
        with Image.open(image_path) as img:
            width, height = img.size
            if width <= max_dimension and height <= max_dimension:
                return False

            ratio = min(max_dimension / width, max_dimension / height)
            new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))
            resized = img.resize(new_size, Image.Resampling.LANCZOS)
            if resized.mode == "P" and image_path.suffix.lower() in (".jpg", ".jpeg"):
                resized = resized.convert("RGB")
            resized.save(image_path, optimize=True, quality=85)
            logger.info(f"Resized image from {width}x{height} to {new_size}")
            return True
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Error resizing image {image_path.name}: {e}")
        return False


async def store_image(file: UploadFile, folder: str, uploads_dir: Path) -> tuple[str, int]:
    """
    Validate, save and downscale an uploaded image.

    Returns:
        Tuple of (public URL, stored size in bytes)
    """
    validate_image_file(file, folder)

    content = await file.read()
    if len(content) > IMAGE_MAX_SIZE_BYTES:
        raise ValidationError(
            f"File too large. Maximum size: {IMAGE_MAX_SIZE_BYTES // (1024 * 1024)}MB",
            {"file": "Too large"},
        )
    if not content:
        raise ValidationError("Empty file", {"file": "Empty"})

    ext = Path(file.filename).suffix.lower()
    filename = f"{uuid.uuid4().hex}{ext}"
    target_dir = uploads_dir / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    image_path = target_dir / filename

    try:
        image_path.write_bytes(content)
    except OSError as e:
        logger.error(f"Error saving image: {e}")
        raise StoreError("Failed to save image") from e

    resize_image(image_path)
    logger.info(f"Stored image {folder}/{filename}")
    return get_image_url(folder, filename), image_path.stat().st_size


def get_image_url(folder: str, filename: str) -> str:
    return f"/api/uploads/{folder}/{filename}"


def get_image_path(uploads_dir: Path, folder: str, filename: str) -> Path | None:
    """Resolve a stored image, refusing paths outside the folder."""
    if folder not in IMAGE_FOLDERS:
        return None
    path = safe_asset_path(uploads_dir / folder, filename)
    if path.exists() and path.is_file():
        return path
    return None
