"""AI helper endpoints; results fall back to neutral defaults, never errors."""
from fastapi import APIRouter

from prep_admin.dependencies import CurrentSession, Store, Suggestions
from prep_admin.errors import PermissionDeniedError
from prep_admin.models.ai import GenerateAllRequest, QuestionTextRequest, SkillTagRequest
from prep_admin.services.chapter_service import all_skill_tags, get_chapter
from prep_admin.services.document_store import DocumentStore
from prep_admin.services.permission_service import AdminSession, can_use_ai

router = APIRouter(prefix="/api/ai", tags=["ai"])


def _check(session: AdminSession) -> None:
    if not can_use_ai(session):
        raise PermissionDeniedError("AI features are not available")


def _vocabulary(
    store: DocumentStore, chapter_id: str | None, vocabulary: list[str] | None
) -> list[str]:
    if vocabulary:
        return vocabulary
    if chapter_id:
        return [str(tag) for tag in get_chapter(store, chapter_id).get("skillTags") or []]
    return [option["value"] for option in all_skill_tags(store)]


@router.post("/skill-tags")
def suggest_skill_tags(
    data: SkillTagRequest, store: Store, client: Suggestions, session: CurrentSession
) -> dict[str, object]:
    _check(session)
    vocabulary = _vocabulary(store, data.chapterId, data.vocabulary)
    return {"skillTags": client.generate_skill_tags(data.text, vocabulary, data.limit)}


@router.post("/title")
def suggest_title(
    data: QuestionTextRequest, client: Suggestions, session: CurrentSession
) -> dict[str, object]:
    _check(session)
    return {"title": client.generate_title(data.text)}


@router.post("/difficulty")
def suggest_difficulty(
    data: QuestionTextRequest, client: Suggestions, session: CurrentSession
) -> dict[str, object]:
    _check(session)
    return {"difficulty": client.generate_difficulty(data.text)}


@router.post("/refine-latex")
def refine_latex(
    data: QuestionTextRequest, client: Suggestions, session: CurrentSession
) -> dict[str, object]:
    _check(session)
    return {"content": client.refine_latex(data.text)}


@router.post("/generate-all")
def generate_all(
    data: GenerateAllRequest, store: Store, client: Suggestions, session: CurrentSession
) -> dict[str, object]:
    """Skill tags, title and difficulty in one call."""
    _check(session)
    vocabulary = _vocabulary(store, data.chapterId, data.vocabulary)
    text = "\n\n".join(part for part in (data.questionText, data.detailedAnswer) if part)
    return client.generate_all(text, vocabulary)
