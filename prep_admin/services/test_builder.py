"""Server-side mock-test builder.

A builder walks three stages (basics, questions, review), holds the ordered
selection of Test-bank questions, and persists the whole test on save.
Counts are derived from the current selection on every read.
"""
import logging
import threading
import uuid
from collections.abc import Iterable, Mapping
from copy import deepcopy
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Any

from prep_admin.config import DEFAULT_TEST_DURATION_SEC
from prep_admin.errors import NotFoundError, ValidationError
from prep_admin.models.questions import ExamType, QuestionStatus
from prep_admin.models.tests import TestStatus
from prep_admin.services import mock_test_service
from prep_admin.services.document_store import DocumentStore
from prep_admin.services.mock_test_service import collect_skill_tags, compute_counts
from prep_admin.services.permission_service import AdminSession
from prep_admin.services.question_pool import (
    CandidateFilters,
    fetch_test_questions_across_chapters,
    matches_filters,
    to_candidate,
)
from prep_admin.utils.paths import TEST_QUESTIONS_SUFFIX, split_ref_path
from prep_admin.utils.time_utils import utc_datetime

logger = logging.getLogger(__name__)

ITEM_FIELDS = (
    "refPath",
    "chapterId",
    "questionId",
    "type",
    "skillTags",
    "difficulty",
    "difficultyBand",
    "marksCorrect",
    "marksWrong",
    "timeSuggestedSec",
    "title",
)

# Editable through update_basics
BASICS_FIELDS = (
    "name",
    "description",
    "exam",
    "durationSec",
    "shuffleQuestions",
    "shuffleOptions",
    "marksCorrectDefault",
    "marksWrongDefault",
    "syllabusChapters",
)


class BuilderStage(IntEnum):
    BASICS = 1
    QUESTIONS = 2
    REVIEW = 3


class MarksOutcome(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"


def default_meta() -> dict[str, Any]:
    return {
        "name": "",
        "description": "",
        "exam": ExamType.JEE_MAIN.value,
        "durationSec": DEFAULT_TEST_DURATION_SEC,
        "status": TestStatus.DRAFT.value,
        "shuffleQuestions": False,
        "shuffleOptions": False,
        "marksCorrectDefault": None,
        "marksWrongDefault": None,
        "syllabusChapters": [],
    }


def _to_item(candidate: Mapping[str, Any]) -> dict[str, Any]:
    item = {field: candidate.get(field) for field in ITEM_FIELDS}
    item["questionId"] = candidate.get("questionId") or candidate.get("id")
    item["skillTags"] = list(candidate.get("skillTags") or [])
    return item


class TestBuilder:
    """Draft of one mock test; every public method is safe to call from request threads."""

    __test__ = False

    def __init__(
        self,
        store: DocumentStore,
        test_id: str | None = None,
        meta: Mapping[str, Any] | None = None,
        items: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        self.id = uuid.uuid4().hex
        self.store = store
        self.test_id = test_id
        self.meta = default_meta()
        if meta:
            self.meta.update(meta)
        self.items: list[dict[str, Any]] = [_to_item(item) for item in items]
        self.stage = BuilderStage.BASICS
        self._lock = threading.RLock()
        self.touched_at = utc_datetime()

    @classmethod
    def from_test(cls, store: DocumentStore, test_id: str) -> "TestBuilder":
        """Load an existing test and its items (in order) into a new builder."""
        meta = mock_test_service.get_test(store, test_id)
        items = mock_test_service.get_test_items(store, test_id)
        meta = {k: v for k, v in meta.items() if k != "id"}
        return cls(store, test_id=test_id, meta=meta, items=items)

    def touch(self) -> None:
        self.touched_at = utc_datetime()

    def is_expired(self, ttl: timedelta, now: datetime | None = None) -> bool:
        now = now or utc_datetime()
        return now - self.touched_at > ttl

    # Stage one

    def update_basics(self, fields: Mapping[str, Any]) -> None:
        with self._lock:
            for key, value in fields.items():
                if key not in BASICS_FIELDS:
                    continue
                if key == "syllabusChapters":
                    value = list(dict.fromkeys(value or []))
                self.meta[key] = value
            self.touch()

    # Stage gates

    def stage_errors(self, stage: BuilderStage) -> dict[str, str]:
        with self._lock:
            errors: dict[str, str] = {}
            if stage is BuilderStage.BASICS:
                name = self.meta.get("name")
                if not isinstance(name, str) or not name.strip():
                    errors["name"] = "Test name is required"
                if not self.meta.get("syllabusChapters"):
                    errors["syllabusChapters"] = "Select at least one chapter"
            elif stage is BuilderStage.QUESTIONS:
                if not self.items:
                    errors["items"] = "Select at least one question"
            return errors

    def next(self) -> BuilderStage:
        with self._lock:
            errors = self.stage_errors(self.stage)
            if errors:
                raise ValidationError("Cannot continue", errors)
            if self.stage < BuilderStage.REVIEW:
                self.stage = BuilderStage(self.stage + 1)
            self.touch()
            return self.stage

    def previous(self) -> BuilderStage:
        with self._lock:
            if self.stage > BuilderStage.BASICS:
                self.stage = BuilderStage(self.stage - 1)
            self.touch()
            return self.stage

    # Stage two

    def added_ref_paths(self) -> set[str]:
        with self._lock:
            return {item["refPath"] for item in self.items}

    def candidates(
        self,
        chapters: list[str] | None = None,
        types: list[str] | None = None,
        tags: list[str] | None = None,
        search_text: str = "",
    ) -> list[dict[str, Any]]:
        """Candidate pool for this test's exam, ACTIVE only, flagged when already added."""
        with self._lock:
            exam = self.meta.get("exam")
        filters = CandidateFilters(
            chapters=list(chapters or []),
            tags=list(tags or []),
            types=list(types or []),
            exam=exam,
            status=QuestionStatus.ACTIVE.value,
            search_text=search_text or "",
        )
        pool = fetch_test_questions_across_chapters(self.store, filters)
        added = self.added_ref_paths()
        return [{**candidate, "added": candidate["refPath"] in added} for candidate in pool]

    def add_item(self, candidate: Mapping[str, Any]) -> bool:
        """Append a candidate; False when its refPath is already selected."""
        with self._lock:
            ref_path = candidate.get("refPath")
            if not ref_path:
                raise ValidationError("Invalid item", {"refPath": "Required"})
            if any(item["refPath"] == ref_path for item in self.items):
                return False
            self.items.append(_to_item(candidate))
            self.touch()
            return True

    def add_ref(self, ref_path: str) -> bool:
        """Resolve a Test-bank question by reference path and add it.

        Only ACTIVE questions of the test's exam are accepted, the same rule
        the candidate pool applies.
        """
        try:
            collection, question_id = split_ref_path(ref_path)
        except ValueError as exc:
            raise ValidationError("Invalid reference path", {"refPath": str(exc)}) from exc
        _, chapter_id, bank = collection.split("/")
        name = bank.removesuffix(f"-{TEST_QUESTIONS_SUFFIX}")
        if name == bank or not name:
            raise ValidationError(
                "Invalid reference path", {"refPath": "Only Test-bank questions can be added"}
            )
        question = self.store.get(collection, question_id)
        if question is None:
            raise NotFoundError(f"Question not found: {ref_path}")
        with self._lock:
            exam = self.meta.get("exam")
        rules = CandidateFilters(exam=exam, status=QuestionStatus.ACTIVE.value)
        if not matches_filters(question, rules):
            raise ValidationError(
                "Question cannot be added",
                {"refPath": f"Only ACTIVE {exam} questions can be added"},
            )
        return self.add_item(to_candidate(chapter_id, name, question))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise NotFoundError(f"No item at position {index}")

    def remove_item(self, index: int) -> dict[str, Any]:
        with self._lock:
            self._check_index(index)
            self.touch()
            return self.items.pop(index)

    def move_up(self, index: int) -> bool:
        """Swap with the predecessor; no-op at the top."""
        with self._lock:
            self._check_index(index)
            if index == 0:
                return False
            self.items[index - 1], self.items[index] = self.items[index], self.items[index - 1]
            self.touch()
            return True

    def move_down(self, index: int) -> bool:
        """Swap with the successor; no-op at the bottom."""
        with self._lock:
            self._check_index(index)
            if index == len(self.items) - 1:
                return False
            self.items[index + 1], self.items[index] = self.items[index], self.items[index + 1]
            self.touch()
            return True

    def set_item_marks(
        self, index: int, marks_correct: float | None, marks_wrong: float | None
    ) -> dict[str, Any]:
        with self._lock:
            self._check_index(index)
            self.items[index]["marksCorrect"] = marks_correct
            self.items[index]["marksWrong"] = marks_wrong
            self.touch()
            return dict(self.items[index])

    def apply_assigned_marks(self, ref_path: str) -> MarksOutcome:
        """Copy the source question's marks onto the selected item with this refPath.

        The source is read without holding the builder lock. A malformed path,
        a deleted source, or an item removed meanwhile all report NOT_FOUND.
        """
        try:
            collection, question_id = split_ref_path(ref_path)
        except ValueError:
            logger.warning(f"Cannot apply marks, malformed refPath: {ref_path!r}")
            return MarksOutcome.NOT_FOUND
        source = self.store.get(collection, question_id)
        if source is None:
            logger.warning(f"Question document not found: {ref_path}")
            return MarksOutcome.NOT_FOUND

        with self._lock:
            item = next((i for i in self.items if i["refPath"] == ref_path), None)
            if item is None:
                return MarksOutcome.NOT_FOUND
            marks_correct = source.get("marksCorrect")
            marks_wrong = source.get("marksWrong")
            item["marksCorrect"] = (
                marks_correct if marks_correct is not None else self.meta.get("marksCorrectDefault")
            )
            item["marksWrong"] = (
                marks_wrong if marks_wrong is not None else self.meta.get("marksWrongDefault")
            )
            self.touch()
        logger.info(f"Applied assigned marks from {ref_path}")
        return MarksOutcome.APPLIED

    # Stage three

    def counts(self) -> dict[str, Any]:
        with self._lock:
            return compute_counts(self.items, self.meta.get("marksCorrectDefault"))

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "id": self.id,
                "testId": self.test_id,
                "stage": self.stage.name.lower(),
                "meta": deepcopy(self.meta),
                "items": deepcopy(self.items),
                "counts": self.counts(),
                "skillTags": collect_skill_tags(self.items),
                "canAdvance": not self.stage_errors(self.stage),
            }

    def save(self, session: AdminSession, publish: bool = False) -> str:
        """Persist TestMeta and replace all TestItems; returns the test id."""
        with self._lock:
            errors = {
                **self.stage_errors(BuilderStage.BASICS),
                **self.stage_errors(BuilderStage.QUESTIONS),
            }
            if errors:
                raise ValidationError("Test is incomplete", errors)

            status = TestStatus.PUBLISHED if publish else TestStatus.DRAFT
            meta = {
                **deepcopy(self.meta),
                "status": status.value,
                "syllabusChapters": list(self.meta.get("syllabusChapters") or []),
            }
            if self.test_id is None:
                self.test_id = mock_test_service.create_test(self.store, session, meta)
                if publish:
                    mock_test_service.update_test(
                        self.store, session, self.test_id, {"status": status.value}
                    )
            else:
                mock_test_service.update_test(self.store, session, self.test_id, meta)

            # Separate commit from the meta write; it also rewrites counts and skillTags
            mock_test_service.upsert_test_items(self.store, session, self.test_id, self.items)
            self.meta["status"] = status.value
            self.touch()
            logger.info(f"Saved test {self.test_id} ({status.value}, {len(self.items)} items)")
            return self.test_id


class BuilderRegistry:
    """In-process drafts keyed by builder id."""

    def __init__(self, ttl: timedelta) -> None:
        self.ttl = ttl
        self._builders: dict[str, TestBuilder] = {}
        self._lock = threading.Lock()

    def start(self, store: DocumentStore, test_id: str | None = None) -> TestBuilder:
        if test_id:
            builder = TestBuilder.from_test(store, test_id)
        else:
            builder = TestBuilder(store)
        with self._lock:
            self._builders[builder.id] = builder
        logger.info(f"Started builder {builder.id} (test={test_id})")
        return builder

    def get(self, builder_id: str) -> TestBuilder:
        with self._lock:
            builder = self._builders.get(builder_id)
        if builder is None:
            raise NotFoundError("Builder not found or expired")
        builder.touch()
        return builder

    def discard(self, builder_id: str) -> bool:
        with self._lock:
            return self._builders.pop(builder_id, None) is not None

    def expire(self, now: datetime | None = None) -> int:
        """Drop drafts idle for longer than the TTL; returns how many were dropped."""
        with self._lock:
            stale = [bid for bid, b in self._builders.items() if b.is_expired(self.ttl, now)]
            for builder_id in stale:
                del self._builders[builder_id]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._builders)
