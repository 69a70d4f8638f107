"""Chapter videos, stored in the chapter's Theory collection."""
from collections.abc import Mapping
from typing import Any

from prep_admin.errors import ValidationError
from prep_admin.services.collection_service import ChapterCollection
from prep_admin.services.document_store import Document, DocumentStore
from prep_admin.services.permission_service import AdminSession
from prep_admin.utils.skills import display_skill_tags

VIDEOS_SUFFIX = "Theory"


def video_collection(store: DocumentStore, chapter: Mapping[str, Any] | None) -> ChapterCollection:
    return ChapterCollection(store, chapter, VIDEOS_SUFFIX)


def _number(value: object, default: float = 0) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return default


def validate_video(video: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field, label in (
        ("title", "Title"),
        ("description", "Description"),
        ("storagePath", "Storage path"),
        ("thumbnailPath", "Thumbnail path"),
    ):
        value = video.get(field)
        if not isinstance(value, str) or not value.strip():
            errors[field] = f"{label} is required"
    if not display_skill_tags(video):
        errors["skillTag"] = "Skill tag is required"
    if _number(video.get("durationSec")) <= 0:
        errors["durationSec"] = "Duration must be greater than 0"
    if not 1 <= _number(video.get("difficulty"), 5) <= 10:
        errors["difficulty"] = "Difficulty must be between 1 and 10"
    if _number(video.get("order")) < 0:
        errors["order"] = "Order must be 0 or greater"
    return errors


def prepare_video(data: Mapping[str, Any]) -> dict[str, Any]:
    video = {
        k: v for k, v in data.items()
        if k not in ("id", "chapterId", "createdAt", "updatedAt")
    }
    video.setdefault("difficulty", 5)
    video.setdefault("order", 0)
    video["prereq"] = video.get("prereq") or ""
    errors = validate_video(video)
    if errors:
        raise ValidationError("Invalid video", errors)
    return video


def list_videos(store: DocumentStore, chapter: Mapping[str, Any] | None) -> list[Document]:
    return video_collection(store, chapter).list_items(order_by="order")


def create_video(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    data: Mapping[str, Any],
) -> str:
    collection = video_collection(store, chapter)
    return collection.create_item(session, prepare_video(data))


def update_video(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    video_id: str,
    updates: Mapping[str, Any],
) -> Document:
    collection = video_collection(store, chapter)
    existing = collection.get_item(video_id)
    collection.update_item(session, video_id, prepare_video({**existing, **updates}))
    return collection.get_item(video_id)


def delete_video(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    video_id: str,
) -> None:
    video_collection(store, chapter).delete_item(session, video_id)
