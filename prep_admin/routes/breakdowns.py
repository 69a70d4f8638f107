"""Breakdown and slide endpoints."""
from typing import Literal

from fastapi import APIRouter, Body, status

from prep_admin.dependencies import CurrentSession, SelectedChapter, Store
from prep_admin.services import breakdown_service
from prep_admin.services.permission_service import Action, require_permission

router = APIRouter(prefix="/api/chapters/{chapter_id}/breakdowns", tags=["breakdowns"])


@router.get("")
def list_breakdowns(
    chapter: SelectedChapter, store: Store, session: CurrentSession
) -> list[dict[str, object]]:
    return breakdown_service.list_breakdowns(store, chapter)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_breakdown(
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    breakdown_id = breakdown_service.create_breakdown(store, session, chapter, payload)
    return breakdown_service.breakdown_collection(store, chapter).get_item(breakdown_id)


@router.patch("/{breakdown_id}")
def update_breakdown(
    breakdown_id: str,
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    return breakdown_service.update_breakdown(store, session, chapter, breakdown_id, payload)


@router.delete("/{breakdown_id}")
def delete_breakdown(
    breakdown_id: str, chapter: SelectedChapter, store: Store, session: CurrentSession
) -> dict[str, object]:
    """Delete a breakdown and all of its slides."""
    breakdown_service.delete_breakdown(store, session, chapter, breakdown_id)
    return {"deleted": breakdown_id}


@router.get("/{breakdown_id}/slides")
def list_slides(
    breakdown_id: str, chapter: SelectedChapter, store: Store, session: CurrentSession
) -> dict[str, object]:
    return {
        "slides": breakdown_service.list_slides(store, chapter, breakdown_id),
        "hasLegacySlides": breakdown_service.has_legacy_slides(store, chapter, breakdown_id),
    }


@router.post("/{breakdown_id}/slides", status_code=status.HTTP_201_CREATED)
def create_slide(
    breakdown_id: str,
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    slide_id = breakdown_service.create_slide(store, session, chapter, breakdown_id, payload)
    return {"id": slide_id}


@router.patch("/{breakdown_id}/slides/{slide_id}")
def update_slide(
    breakdown_id: str,
    slide_id: str,
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    return breakdown_service.update_slide(
        store, session, chapter, breakdown_id, slide_id, payload
    )


@router.delete("/{breakdown_id}/slides/{slide_id}")
def delete_slide(
    breakdown_id: str,
    slide_id: str,
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
) -> dict[str, object]:
    breakdown_service.delete_slide(store, session, chapter, breakdown_id, slide_id)
    return {"deleted": slide_id}


@router.post("/{breakdown_id}/slides/{slide_id}/move/{direction}")
def move_slide(
    breakdown_id: str,
    slide_id: str,
    direction: Literal["up", "down"],
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
) -> dict[str, object]:
    moved = breakdown_service.move_slide(
        store, session, chapter, breakdown_id, slide_id, direction
    )
    return {"moved": moved}


@router.post("/{breakdown_id}/slides/backfill-order")
def backfill_slide_order(
    breakdown_id: str, chapter: SelectedChapter, store: Store, session: CurrentSession
) -> dict[str, object]:
    """Assign `order` to legacy slides in creation order."""
    require_permission(session, Action.UPDATE)
    updated = breakdown_service.backfill_slide_order(store, chapter, breakdown_id)
    return {"updated": updated}
