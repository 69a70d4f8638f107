"""Timestamps written to documents and kept by in-process drafts."""
from datetime import datetime, timezone


def utc_datetime() -> datetime:
    return datetime.now(timezone.utc)


def utc_now() -> str:
    """ISO-8601 UTC timestamp for `createdAt` / `updatedAt` fields.

    Lexical order of these strings matches chronological order, which the
    store relies on when sorting by them.
    """
    return utc_datetime().isoformat()
