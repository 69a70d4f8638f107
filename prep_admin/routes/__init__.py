"""API route modules."""
from prep_admin.routes import (
    ai,
    auth,
    breakdowns,
    builder,
    chapters,
    questions,
    tests,
    uploads,
    videos,
)

__all__ = [
    "ai",
    "auth",
    "breakdowns",
    "builder",
    "chapters",
    "questions",
    "tests",
    "uploads",
    "videos",
]
