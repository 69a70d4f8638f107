"""Breakdowns and their ordered slides."""
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from prep_admin.errors import NotFoundError, ValidationError
from prep_admin.models.breakdowns import QuestionSlide, slide_adapter
from prep_admin.services.collection_service import ChapterCollection
from prep_admin.services.document_store import Document, DocumentStore
from prep_admin.services.permission_service import (
    Action,
    AdminSession,
    require_permission,
)
from prep_admin.services.question_service import validate_answer
from prep_admin.utils.paths import slides_collection, chapter_name
from prep_admin.utils.question_types import map_question_type
from prep_admin.utils.skills import with_skill_tags
from prep_admin.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

BREAKDOWNS_SUFFIX = "Breakdowns"

_SYSTEM_FIELDS = ("id", "chapterId", "createdAt", "updatedAt", "order")


def breakdown_collection(
    store: DocumentStore, chapter: Mapping[str, Any] | None
) -> ChapterCollection:
    return ChapterCollection(store, chapter, BREAKDOWNS_SUFFIX)


def prepare_breakdown(data: Mapping[str, Any]) -> dict[str, Any]:
    breakdown = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
    title = breakdown.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Invalid breakdown", {"title": "Title is required"})
    breakdown["description"] = str(breakdown.get("description") or "")
    breakdown["type"] = map_question_type(str(breakdown.get("type") or ""))
    return with_skill_tags(breakdown)


def list_breakdowns(store: DocumentStore, chapter: Mapping[str, Any] | None) -> list[Document]:
    items = breakdown_collection(store, chapter).list_items(order_by="createdAt")
    return [with_skill_tags(item) for item in items]


def create_breakdown(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    data: Mapping[str, Any],
) -> str:
    collection = breakdown_collection(store, chapter)
    return collection.create_item(session, prepare_breakdown(data))


def update_breakdown(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
    updates: Mapping[str, Any],
) -> Document:
    collection = breakdown_collection(store, chapter)
    existing = collection.get_item(breakdown_id)
    collection.update_item(session, breakdown_id, prepare_breakdown({**existing, **updates}))
    return collection.get_item(breakdown_id)


def delete_breakdown(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
) -> None:
    """Delete a breakdown together with its slides."""
    require_permission(session, Action.DELETE)
    collection = breakdown_collection(store, chapter)
    collection.get_item(breakdown_id)
    path = _slides_path(collection, breakdown_id)
    store.batch().delete_collection(path).commit()
    collection.delete_item(session, breakdown_id)


def _slides_path(collection: ChapterCollection, breakdown_id: str) -> str:
    chapter_id = collection.chapter_id
    return slides_collection(chapter_id, chapter_name(collection.chapter), breakdown_id)


def _slides_for(
    store: DocumentStore, chapter: Mapping[str, Any] | None, breakdown_id: str
) -> str:
    collection = breakdown_collection(store, chapter)
    collection.get_item(breakdown_id)
    return _slides_path(collection, breakdown_id)


def _has_order(slide: Mapping[str, Any]) -> bool:
    order = slide.get("order")
    return isinstance(order, int) and not isinstance(order, bool)


def _slide_sort_key(slide: Mapping[str, Any]) -> tuple[bool, int, str]:
    order = slide["order"] if _has_order(slide) else 0
    return (not _has_order(slide), order, str(slide.get("createdAt") or ""))


def _validate_slide(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate either slide kind; question slides also get the question answer checks."""
    payload = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
    if payload.get("kind") == "question":
        if payload.get("type"):
            payload["type"] = map_question_type(str(payload["type"]))
        payload.update(with_skill_tags(payload))
    try:
        slide = slide_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        errors = {
            ".".join(str(part) for part in error["loc"]) or "slide": error["msg"]
            for error in exc.errors()
        }
        raise ValidationError("Invalid slide", errors) from exc
    if isinstance(slide, QuestionSlide):
        errors = validate_answer(slide.model_dump(mode="json"))
        if errors:
            raise ValidationError("Invalid slide", errors)
    return slide.model_dump(mode="json", exclude_none=True)


def list_slides(
    store: DocumentStore, chapter: Mapping[str, Any] | None, breakdown_id: str
) -> list[Document]:
    """Slides by `order`; legacy slides without one follow in creation order."""
    path = _slides_for(store, chapter, breakdown_id)
    return sorted(store.list(path), key=_slide_sort_key)


def has_legacy_slides(
    store: DocumentStore, chapter: Mapping[str, Any] | None, breakdown_id: str
) -> bool:
    return any(not _has_order(slide) for slide in list_slides(store, chapter, breakdown_id))


def create_slide(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
    data: Mapping[str, Any],
) -> str:
    require_permission(session, Action.CREATE)
    path = _slides_for(store, chapter, breakdown_id)
    slide = _validate_slide(data)
    orders = [s["order"] for s in store.list(path) if _has_order(s)]
    now = utc_now()
    slide_id = store.add(path, {
        **slide,
        "order": max(orders, default=-1) + 1,
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Created slide {slide_id} in {path}")
    return slide_id


def update_slide(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
    slide_id: str,
    updates: Mapping[str, Any],
) -> Document:
    require_permission(session, Action.UPDATE)
    path = _slides_for(store, chapter, breakdown_id)
    existing = store.get(path, slide_id)
    if existing is None:
        raise NotFoundError(f"Slide not found: {slide_id}")
    slide = _validate_slide({**existing, **updates})
    data = {**slide, "updatedAt": utc_now()}
    for field in ("order", "createdAt"):
        if field in existing:
            data[field] = existing[field]
    store.set(path, slide_id, data)
    logger.info(f"Updated slide {slide_id} in {path}")
    return {**data, "id": slide_id}


def delete_slide(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
    slide_id: str,
) -> None:
    require_permission(session, Action.DELETE)
    path = _slides_for(store, chapter, breakdown_id)
    if not store.delete(path, slide_id):
        raise NotFoundError(f"Slide not found: {slide_id}")
    logger.info(f"Deleted slide {slide_id} from {path}")


def move_slide(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    breakdown_id: str,
    slide_id: str,
    direction: str,
) -> bool:
    """Swap a slide's `order` with its neighbour; False at either boundary."""
    require_permission(session, Action.UPDATE)
    if direction not in ("up", "down"):
        raise ValidationError("Invalid direction", {"direction": "Must be 'up' or 'down'"})
    path = _slides_for(store, chapter, breakdown_id)

    with store.transaction() as txn:
        slides = sorted(txn.list(path), key=_slide_sort_key)
        index = next((i for i, s in enumerate(slides) if s["id"] == slide_id), None)
        if index is None:
            raise NotFoundError(f"Slide not found: {slide_id}")
        other = index - 1 if direction == "up" else index + 1
        if other < 0 or other >= len(slides):
            return False

        # Positions become the order values, then the pair swaps
        orders = {slide["id"]: position for position, slide in enumerate(slides)}
        orders[slides[index]["id"]], orders[slides[other]["id"]] = other, index
        now = utc_now()
        for slide in slides:
            if slide.get("order") != orders[slide["id"]]:
                txn.update(path, slide["id"], {"order": orders[slide["id"]], "updatedAt": now})

    logger.info(f"Moved slide {slide_id} {direction} in {path}")
    return True


def backfill_slide_order(
    store: DocumentStore, chapter: Mapping[str, Any] | None, breakdown_id: str
) -> int:
    """Give slides without `order` one after the existing maximum, in creation order."""
    path = _slides_for(store, chapter, breakdown_id)
    slides = store.list(path)
    next_order = max((s["order"] for s in slides if _has_order(s)), default=-1) + 1
    legacy = sorted(
        (s for s in slides if not _has_order(s)),
        key=lambda s: str(s.get("createdAt") or ""),
    )
    batch = store.batch()
    for offset, slide in enumerate(legacy):
        batch.update(path, slide["id"], {"order": next_order + offset})
    batch.commit()
    if legacy:
        logger.info(f"Backfilled order on {len(legacy)} slides in {path}")
    return len(legacy)
