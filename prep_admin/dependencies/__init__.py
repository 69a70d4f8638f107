"""FastAPI dependencies."""
from prep_admin.dependencies.auth import (
    CurrentSession,
    get_authenticated_session,
    get_current_session,
    get_directory,
)
from prep_admin.dependencies.services import (
    Registry,
    SelectedChapter,
    Store,
    Suggestions,
    get_registry,
    get_store,
    get_suggestion_client,
)

__all__ = [
    "CurrentSession",
    "Registry",
    "SelectedChapter",
    "Store",
    "Suggestions",
    "get_authenticated_session",
    "get_current_session",
    "get_directory",
    "get_registry",
    "get_store",
    "get_suggestion_client",
]
