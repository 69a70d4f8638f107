"""Chapter, skill-tag vocabulary and maintenance endpoints."""
from fastapi import APIRouter, status

from prep_admin.dependencies import CurrentSession, SelectedChapter, Store
from prep_admin.models.chapters import ChapterCreate, SkillTagCreate, SkillTagRename
from prep_admin.services import chapter_service
from prep_admin.services.permission_service import Action, require_permission
from prep_admin.services.question_service import backfill_test_defaults

router = APIRouter(prefix="/api/chapters", tags=["chapters"])
skill_tags_router = APIRouter(prefix="/api/skill-tags", tags=["chapters"])


@router.get("")
def list_chapters(store: Store, session: CurrentSession) -> list[dict[str, object]]:
    """List chapters by name."""
    return chapter_service.list_chapters(store)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_chapter(
    data: ChapterCreate, store: Store, session: CurrentSession
) -> dict[str, object]:
    chapter_id = chapter_service.create_chapter(store, session, data.model_dump())
    return chapter_service.get_chapter(store, chapter_id)


@router.post("/seed")
def seed_chapters(store: Store, session: CurrentSession) -> dict[str, object]:
    """Initialize the sample chapters."""
    require_permission(session, Action.CREATE)
    return {"chapters": chapter_service.seed_chapters(store)}


@router.get("/{chapter_id}")
def get_chapter(chapter: SelectedChapter, session: CurrentSession) -> dict[str, object]:
    return chapter


@router.post("/{chapter_id}/skill-tags")
def add_skill_tag(
    chapter_id: str, data: SkillTagCreate, store: Store, session: CurrentSession
) -> dict[str, object]:
    tags = chapter_service.add_skill_tag(store, session, chapter_id, data.tag)
    return {"skillTags": tags}


@router.put("/{chapter_id}/skill-tags")
def rename_skill_tag(
    chapter_id: str, data: SkillTagRename, store: Store, session: CurrentSession
) -> dict[str, object]:
    tags = chapter_service.rename_skill_tag(store, session, chapter_id, data.old, data.new)
    return {"skillTags": tags}


@router.delete("/{chapter_id}/skill-tags/{tag}")
def remove_skill_tag(
    chapter_id: str, tag: str, store: Store, session: CurrentSession
) -> dict[str, object]:
    tags = chapter_service.remove_skill_tag(store, session, chapter_id, tag)
    return {"skillTags": tags}


@router.post("/{chapter_id}/reconcile-counters")
def reconcile_counters(
    chapter_id: str, store: Store, session: CurrentSession
) -> dict[str, object]:
    """Recompute the chapter's counters from its collections."""
    require_permission(session, Action.UPDATE)
    return {"counters": chapter_service.reconcile_counters(store, chapter_id)}


@router.post("/{chapter_id}/backfill/skill-tags")
def backfill_skill_tags(
    chapter_id: str, store: Store, session: CurrentSession
) -> dict[str, object]:
    require_permission(session, Action.UPDATE)
    return {"updated": chapter_service.backfill_skill_tags(store, chapter_id)}


@router.post("/{chapter_id}/backfill/test-defaults")
def backfill_defaults(
    chapter: SelectedChapter, store: Store, session: CurrentSession
) -> dict[str, object]:
    require_permission(session, Action.UPDATE)
    return {"updated": backfill_test_defaults(store, chapter)}


@skill_tags_router.get("")
def list_all_skill_tags(store: Store, session: CurrentSession) -> list[dict[str, str]]:
    """Every chapter's skill tags, de-duplicated and sorted."""
    return chapter_service.all_skill_tags(store)
