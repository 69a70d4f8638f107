"""Question bank endpoints."""
from typing import Annotated

from fastapi import APIRouter, Body, Depends, status

from prep_admin.dependencies import CurrentSession, SelectedChapter, Store
from prep_admin.errors import NotFoundError
from prep_admin.models.questions import QuestionBank
from prep_admin.services import question_service
from prep_admin.utils.skills import with_skill_tags

router = APIRouter(
    prefix="/api/chapters/{chapter_id}/questions/{bank}", tags=["questions"]
)


def get_bank(bank: str) -> QuestionBank:
    try:
        return QuestionBank.parse(bank)
    except ValueError as exc:
        raise NotFoundError(str(exc)) from exc


Bank = Annotated[QuestionBank, Depends(get_bank)]


@router.get("")
def list_questions(
    chapter: SelectedChapter, bank: Bank, store: Store, session: CurrentSession
) -> list[dict[str, object]]:
    return question_service.list_questions(store, chapter, bank)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_question(
    chapter: SelectedChapter,
    bank: Bank,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Validate and create a question; bumps the chapter's counter."""
    question_id = question_service.create_question(store, session, chapter, bank, payload)
    collection = question_service.question_collection(store, chapter, bank)
    return with_skill_tags(collection.get_item(question_id))


@router.get("/{question_id}")
def get_question(
    question_id: str,
    chapter: SelectedChapter,
    bank: Bank,
    store: Store,
    session: CurrentSession,
) -> dict[str, object]:
    collection = question_service.question_collection(store, chapter, bank)
    return with_skill_tags(collection.get_item(question_id))


@router.patch("/{question_id}")
def update_question(
    question_id: str,
    chapter: SelectedChapter,
    bank: Bank,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    question = question_service.update_question(
        store, session, chapter, bank, question_id, payload
    )
    return with_skill_tags(question)


@router.delete("/{question_id}")
def delete_question(
    question_id: str,
    chapter: SelectedChapter,
    bank: Bank,
    store: Store,
    session: CurrentSession,
) -> dict[str, object]:
    question_service.delete_question(store, session, chapter, bank, question_id)
    return {"deleted": question_id}
