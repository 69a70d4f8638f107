"""Question banks: validation, normalization and CRUD per chapter."""
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from prep_admin.errors import ValidationError
from prep_admin.models.questions import (
    MAX_CHOICES,
    MIN_CHOICES,
    TEST_ONLY_FIELDS,
    ExamType,
    PartialScheme,
    QuestionBank,
    QuestionStatus,
    QuestionType,
)
from prep_admin.services.collection_service import ChapterCollection
from prep_admin.services.document_store import Document, DocumentStore
from prep_admin.services.permission_service import AdminSession
from prep_admin.services.question_defaults import band_from_difficulty, with_computed_fields
from prep_admin.utils.paths import chapter_collection, chapter_name
from prep_admin.utils.question_types import map_question_type
from prep_admin.utils.skills import with_skill_tags
from prep_admin.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

_partial_scheme_adapter = TypeAdapter(PartialScheme)

# Fields owned by the store or the gateway, never taken from a payload
_SYSTEM_FIELDS = ("id", "chapterId", "createdAt", "updatedAt")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_answer(question: Mapping[str, Any]) -> dict[str, str]:
    """Checks on choices, answers and the numerical range for the question's type."""
    errors: dict[str, str] = {}
    question_type = question.get("type")
    if question_type in (QuestionType.MCQ.value, QuestionType.MULTIPLE_ANSWER.value):
        choices = question.get("choices")
        if not isinstance(choices, list) or len(choices) < MIN_CHOICES:
            errors["choices"] = f"At least {MIN_CHOICES} choices are required"
        elif len(choices) > MAX_CHOICES:
            errors["choices"] = f"At most {MAX_CHOICES} choices are allowed"
        elif any(_is_blank(choice) for choice in choices):
            errors["choices"] = "All choices must have content"
        count = len(choices) if isinstance(choices, list) else 0

        if question_type == QuestionType.MCQ.value:
            index = question.get("answerIndex")
            if not _is_int(index) or not 0 <= index < max(count, 1):
                errors["answerIndex"] = "One answer must be selected"
        else:
            indices = question.get("answerIndices")
            if not isinstance(indices, list) or not indices:
                errors["answerIndices"] = "At least one answer must be selected"
            elif any(not _is_int(i) or not 0 <= i < count for i in indices):
                errors["answerIndices"] = "Answer index out of range"
    elif question_type == QuestionType.NUMERICAL.value:
        value_range = question.get("range")
        if (
            not isinstance(value_range, Mapping)
            or not _is_number(value_range.get("min"))
            or not _is_number(value_range.get("max"))
            or value_range["min"] > value_range["max"]
        ):
            errors["range"] = "Min value must be less than or equal to max value"
    else:
        errors["type"] = "Unknown question type"
    return errors


def validate_question(question: Mapping[str, Any]) -> dict[str, str]:
    """Return a field -> message map; empty when the question may be written."""
    errors: dict[str, str] = {}

    if _is_blank(question.get("title")):
        errors["title"] = "Title is required"
    if not question.get("skillTags"):
        errors["skillTags"] = "At least one skill tag is required"
    if _is_blank(question.get("questionText")):
        errors["questionText"] = "Question text is required"

    difficulty = question.get("difficulty")
    if not _is_int(difficulty) or not 1 <= difficulty <= 10:
        errors["difficulty"] = "Difficulty must be a whole number between 1 and 10"

    exam = question.get("exam")
    if exam is not None and exam not in {e.value for e in ExamType}:
        errors["exam"] = "Unknown exam"
    status = question.get("status")
    if status is not None and status not in {s.value for s in QuestionStatus}:
        errors["status"] = "Unknown status"

    errors.update(validate_answer(question))

    scheme = question.get("partialScheme")
    if scheme is not None:
        try:
            _partial_scheme_adapter.validate_python(scheme)
        except PydanticValidationError:
            errors["partialScheme"] = "Invalid partial marking scheme"

    return errors


def prepare_question(bank: QuestionBank, data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a question payload for `bank` and validate it.

    Raises:
        ValidationError: with the field map when any invariant fails.
    """
    question = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
    question["type"] = map_question_type(str(question.get("type") or ""))
    question.update(with_skill_tags(question))
    if bank is QuestionBank.TEST:
        question = with_computed_fields(question)
    else:
        for field in TEST_ONLY_FIELDS:
            question.pop(field, None)
        question.setdefault("status", QuestionStatus.ACTIVE.value)
    if _is_number(question.get("difficulty")):
        question["difficultyBand"] = band_from_difficulty(question["difficulty"])

    errors = validate_question(question)
    if errors:
        raise ValidationError("Invalid question", errors)
    return question


def question_collection(
    store: DocumentStore, chapter: Mapping[str, Any] | None, bank: QuestionBank
) -> ChapterCollection:
    return ChapterCollection(store, chapter, bank.suffix)


def list_questions(
    store: DocumentStore, chapter: Mapping[str, Any] | None, bank: QuestionBank
) -> list[Document]:
    items = question_collection(store, chapter, bank).list_items(order_by="createdAt")
    return [with_skill_tags(item) for item in items]


def create_question(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    bank: QuestionBank,
    data: Mapping[str, Any],
) -> str:
    collection = question_collection(store, chapter, bank)
    question = prepare_question(bank, data)
    return collection.create_item(session, question)


def update_question(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    bank: QuestionBank,
    question_id: str,
    updates: Mapping[str, Any],
) -> Document:
    collection = question_collection(store, chapter, bank)
    existing = collection.get_item(question_id)
    question = prepare_question(bank, {**existing, **updates})
    collection.update_item(session, question_id, question)
    return collection.get_item(question_id)


def delete_question(
    store: DocumentStore,
    session: AdminSession,
    chapter: Mapping[str, Any] | None,
    bank: QuestionBank,
    question_id: str,
) -> None:
    question_collection(store, chapter, bank).delete_item(session, question_id)


def backfill_test_defaults(store: DocumentStore, chapter: Mapping[str, Any]) -> int:
    """Fill derived fields on every stored Test-bank question that lacks them."""
    path = chapter_collection(str(chapter["id"]), chapter_name(chapter), QuestionBank.TEST.suffix)
    batch = store.batch()
    for question in store.list(path):
        filled = with_computed_fields(question)
        if filled != question:
            changes = {k: v for k, v in filled.items() if question.get(k) != v}
            batch.update(path, question["id"], {**changes, "updatedAt": utc_now()})
    updated = len(batch)
    batch.commit()
    if updated:
        logger.info(f"Backfilled test defaults on {updated} questions in {path}")
    return updated
