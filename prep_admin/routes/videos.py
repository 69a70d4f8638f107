"""Chapter video endpoints."""
from fastapi import APIRouter, Body, status

from prep_admin.dependencies import CurrentSession, SelectedChapter, Store
from prep_admin.services import video_service

router = APIRouter(prefix="/api/chapters/{chapter_id}/videos", tags=["videos"])


@router.get("")
def list_videos(
    chapter: SelectedChapter, store: Store, session: CurrentSession
) -> list[dict[str, object]]:
    return video_service.list_videos(store, chapter)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_video(
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    video_id = video_service.create_video(store, session, chapter, payload)
    return video_service.video_collection(store, chapter).get_item(video_id)


@router.patch("/{video_id}")
def update_video(
    video_id: str,
    chapter: SelectedChapter,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    return video_service.update_video(store, session, chapter, video_id, payload)


@router.delete("/{video_id}")
def delete_video(
    video_id: str, chapter: SelectedChapter, store: Store, session: CurrentSession
) -> dict[str, object]:
    video_service.delete_video(store, session, chapter, video_id)
    return {"deleted": video_id}
