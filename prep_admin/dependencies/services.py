"""Application-scoped collaborators, resolved from `app.state`."""
from typing import Annotated

from fastapi import Depends, Request

from prep_admin.services.ai_service import SuggestionClient
from prep_admin.services.chapter_service import get_chapter
from prep_admin.services.document_store import Document, DocumentStore
from prep_admin.services.test_builder import BuilderRegistry
from prep_admin.utils.validation import validate_id


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_registry(request: Request) -> BuilderRegistry:
    return request.app.state.builders


def get_suggestion_client(request: Request) -> SuggestionClient:
    return request.app.state.suggestions


Store = Annotated[DocumentStore, Depends(get_store)]
Registry = Annotated[BuilderRegistry, Depends(get_registry)]
Suggestions = Annotated[SuggestionClient, Depends(get_suggestion_client)]


def get_selected_chapter(chapter_id: str, store: Store) -> Document:
    """Chapter named in the path; 404 when it does not exist."""
    return get_chapter(store, validate_id("chapter_id", chapter_id))


SelectedChapter = Annotated[Document, Depends(get_selected_chapter)]
