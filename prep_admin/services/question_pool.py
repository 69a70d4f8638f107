"""Candidate pool of Test-bank questions across chapters."""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from prep_admin.errors import AdminError
from prep_admin.models.questions import QuestionBank
from prep_admin.services.document_store import DocumentStore
from prep_admin.services.question_defaults import band_from_difficulty
from prep_admin.utils.paths import (
    CHAPTERS_COLLECTION,
    chapter_collection,
    chapter_name,
    question_ref_path,
)
from prep_admin.utils.skills import display_skill_tags

logger = logging.getLogger(__name__)


@dataclass
class CandidateFilters:
    """Filters composed over each chapter's Test bank; empty values match everything."""

    chapters: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    exam: str | None = None
    status: str | None = None
    search_text: str = ""


def matches_filters(question: Mapping[str, Any], filters: CandidateFilters) -> bool:
    if filters.exam and question.get("exam") != filters.exam:
        return False
    if filters.types and question.get("type") not in filters.types:
        return False
    if filters.status and question.get("status") != filters.status:
        return False

    tags = display_skill_tags(question)
    if filters.tags and not any(tag in filters.tags for tag in tags):
        return False

    needle = (filters.search_text or "").strip().lower()
    if needle:
        haystacks = [
            str(question.get("title") or "").lower(),
            str(question.get("questionText") or "").lower(),
            *(tag.lower() for tag in tags),
        ]
        if not any(needle in text for text in haystacks):
            return False
    return True


def to_candidate(chapter_id: str, name: str, question: Mapping[str, Any]) -> dict[str, Any]:
    """Lightweight projection of a Test-bank question carrying its reference path."""
    return {
        "id": question["id"],
        "chapterId": chapter_id,
        "refPath": question_ref_path(chapter_id, name, question["id"]),
        "title": question.get("title") or "",
        "questionText": question.get("questionText") or "",
        "type": question.get("type"),
        "skillTags": display_skill_tags(question),
        "difficulty": question.get("difficulty"),
        "difficultyBand": band_from_difficulty(question.get("difficulty")),
        "marksCorrect": question.get("marksCorrect"),
        "marksWrong": question.get("marksWrong"),
        "timeSuggestedSec": question.get("timeSuggestedSec"),
        "status": question.get("status"),
        "exam": question.get("exam"),
    }


def fetch_test_questions_across_chapters(
    store: DocumentStore, filters: CandidateFilters
) -> list[dict[str, Any]]:
    """Fetch and filter the Test bank of each requested chapter (all when none given).

    Unknown chapter ids are ignored; a chapter that fails to load is logged
    and skipped so the rest of the pool is still returned.
    """
    chapters = {c["id"]: c for c in store.list(CHAPTERS_COLLECTION)}
    targets = filters.chapters or list(chapters)

    results: list[dict[str, Any]] = []
    for chapter_id in targets:
        chapter = chapters.get(chapter_id)
        if chapter is None:
            continue
        name = chapter_name(chapter)
        path = chapter_collection(chapter_id, name, QuestionBank.TEST.suffix)
        try:
            questions = store.list(path)
        except AdminError as exc:
            logger.warning(f"Failed to fetch questions from chapter {chapter_id}: {exc}")
            continue
        results.extend(
            to_candidate(chapter_id, name, question)
            for question in questions
            if matches_filters(question, filters)
        )
    return results
