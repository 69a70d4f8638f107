"""Application configuration and constants."""
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Parse float from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_list_env(name: str, default: list[str]) -> list[str]:
    """Parse comma-separated list from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'prep_admin.db'}"
)

# Uploaded images (object storage)
UPLOADS_DIR = Path(os.environ.get("UPLOADS_DIR", Path.cwd() / "data" / "uploads"))
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
IMAGE_MAX_SIZE_BYTES = _parse_int_env("IMAGE_MAX_SIZE_BYTES", 5 * 1024 * 1024)
IMAGE_MAX_DIMENSION = _parse_int_env("IMAGE_MAX_DIMENSION", 1600)  # pixels
IMAGE_ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
IMAGE_FOLDERS = {"questions", "breakdowns", "slides", "videos"}

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)

# Admin allow-list
ADMIN_PRIMARY_UIDS = _parse_list_env(
    "ADMIN_PRIMARY_UIDS", ["Aayx2gnj7yRakyRP0FjzZ78PkKd2"]
)
ADMIN_SECONDARY_UIDS = _parse_list_env(
    "ADMIN_SECONDARY_UIDS", ["YkPeEILGa0V4KxqGGtpk23td7uh1"]
)
ADMIN_BOOTSTRAP_ENABLED = _parse_bool_env("ADMIN_BOOTSTRAP_ENABLED", False)

# Language model
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_ENDPOINT = os.environ.get(
    "OPENAI_ENDPOINT", "https://api.openai.com/v1/chat/completions"
)
OPENAI_TEMPERATURE = _parse_float_env("OPENAI_TEMPERATURE", 0.3)
AI_REQUEST_TIMEOUT_SECONDS = _parse_int_env("AI_REQUEST_TIMEOUT_SECONDS", 60)
AI_TAG_CANDIDATE_LIMIT = _parse_int_env("AI_TAG_CANDIDATE_LIMIT", 80)
AI_MAX_SUGGESTED_TAGS = _parse_int_env("AI_MAX_SUGGESTED_TAGS", 3)

# Test builder
BUILDER_DRAFT_TTL_MINUTES = _parse_int_env("BUILDER_DRAFT_TTL_MINUTES", 12 * 60)
BUILDER_CLEANUP_INTERVAL_SECONDS = _parse_int_env(
    "BUILDER_CLEANUP_INTERVAL_SECONDS", 30 * 60
)
DEFAULT_TEST_DURATION_SEC = _parse_int_env("DEFAULT_TEST_DURATION_SEC", 3600)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
