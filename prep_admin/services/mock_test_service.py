"""Mock tests: TestMeta documents and their ordered TestItem sub-collection.

`counts` and `skillTags` on a TestMeta are derived from its stored items and
rewritten whenever the items or the default marks change.
"""
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from prep_admin.errors import NotFoundError, ValidationError
from prep_admin.models.questions import DifficultyBand, QuestionType
from prep_admin.models.tests import TestCounts, TestStatus
from prep_admin.services.document_store import Document, DocumentStore, new_doc_id
from prep_admin.services.permission_service import (
    Action,
    AdminSession,
    require_permission,
)
from prep_admin.utils.paths import TESTS_COLLECTION, test_items_collection
from prep_admin.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_MARKS_CORRECT = 4

# Set by the service itself, never taken from a payload
_SYSTEM_FIELDS = ("id", "createdAt", "updatedAt", "createdBy", "version", "counts", "skillTags")


def compute_counts(
    items: Iterable[Mapping[str, Any]], marks_correct_default: float | None = None
) -> dict[str, Any]:
    """Tally items by type and band and sum their marks for a correct answer.

    Items without a band are left out of the band tally. Missing item marks
    fall back to `marks_correct_default`, then to 4.
    """
    counts = TestCounts(
        byType={t.value: 0 for t in QuestionType},
        byDifficulty={b.value: 0 for b in DifficultyBand},
    )
    for item in items:
        counts.totalQuestions += 1
        question_type = item.get("type")
        if question_type in counts.byType:
            counts.byType[question_type] += 1
        band = item.get("difficultyBand")
        if band in counts.byDifficulty:
            counts.byDifficulty[band] += 1
        marks = item.get("marksCorrect")
        if marks is None:
            marks = marks_correct_default
        if marks is None:
            marks = DEFAULT_MARKS_CORRECT
        counts.totalMarks += marks
    return counts.model_dump()


def collect_skill_tags(items: Iterable[Mapping[str, Any]]) -> list[str]:
    """De-duplicated union of item tags, in first-seen order."""
    tags: list[str] = []
    for item in items:
        for tag in item.get("skillTags") or []:
            if tag not in tags:
                tags.append(tag)
    return tags


def derived_fields(
    items: Sequence[Mapping[str, Any]], marks_correct_default: float | None
) -> dict[str, Any]:
    return {
        "counts": compute_counts(items, marks_correct_default),
        "skillTags": collect_skill_tags(items),
    }


def _clean_meta(meta: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in meta.items() if k not in _SYSTEM_FIELDS}


def create_test(store: DocumentStore, session: AdminSession, meta: Mapping[str, Any]) -> str:
    """Create an empty DRAFT test owned by the session's uid."""
    require_permission(session, Action.CREATE)
    now = utc_now()
    data = _clean_meta(meta)
    test_id = store.add(TESTS_COLLECTION, {
        **data,
        **derived_fields([], data.get("marksCorrectDefault")),
        "status": TestStatus.DRAFT.value,
        "createdAt": now,
        "updatedAt": now,
        "createdBy": session.uid,
        "version": 1,
    })
    logger.info(f"Created test {test_id}")
    return test_id


def update_test(
    store: DocumentStore, session: AdminSession, test_id: str, patch: Mapping[str, Any]
) -> None:
    require_permission(session, Action.UPDATE)
    data = _clean_meta(patch)
    if "marksCorrectDefault" in data:
        items = get_test_items(store, test_id)
        data.update(derived_fields(items, data["marksCorrectDefault"]))
    store.update(TESTS_COLLECTION, test_id, {**data, "updatedAt": utc_now()})
    logger.info(f"Updated test {test_id}")


def get_test(store: DocumentStore, test_id: str) -> Document:
    test = store.get(TESTS_COLLECTION, test_id)
    if test is None:
        raise NotFoundError("Test not found")
    return test


def list_tests(store: DocumentStore) -> list[Document]:
    """All tests, most recently updated first."""
    return store.list(TESTS_COLLECTION, order_by="updatedAt", descending=True)


def delete_test(store: DocumentStore, session: AdminSession, test_id: str) -> None:
    """Delete the test and every item under it in one batch."""
    require_permission(session, Action.DELETE)
    get_test(store, test_id)
    batch = store.batch()
    batch.delete_collection(test_items_collection(test_id))
    batch.delete(TESTS_COLLECTION, test_id)
    batch.commit()
    logger.info(f"Deleted test {test_id}")


def upsert_test_items(
    store: DocumentStore,
    session: AdminSession,
    test_id: str,
    items: Sequence[Mapping[str, Any]],
) -> None:
    """Replace the item sub-collection wholesale; each item's order is its index.

    The test's counts and skill tags are rewritten in the same batch.
    """
    require_permission(session, Action.UPDATE)
    meta = get_test(store, test_id)
    path = test_items_collection(test_id)
    rows = [
        {**{k: v for k, v in item.items() if k not in ("id", "order")}, "order": index}
        for index, item in enumerate(items)
    ]
    batch = store.batch()
    batch.delete_collection(path)
    for row in rows:
        batch.set(path, new_doc_id(), row)
    batch.update(TESTS_COLLECTION, test_id, {
        **derived_fields(rows, meta.get("marksCorrectDefault")),
        "updatedAt": utc_now(),
    })
    batch.commit()
    logger.info(f"Wrote {len(items)} items for test {test_id}")


def get_test_items(store: DocumentStore, test_id: str) -> list[Document]:
    return store.list(test_items_collection(test_id), order_by="order")


def set_test_status(
    store: DocumentStore, session: AdminSession, test_id: str, status: str
) -> Document:
    """Publish, unpublish (back to DRAFT) or archive a test."""
    try:
        new_status = TestStatus(status)
    except ValueError as exc:
        raise ValidationError("Invalid status", {"status": f"Unknown status {status!r}"}) from exc
    get_test(store, test_id)
    update_test(store, session, test_id, {"status": new_status.value})
    return get_test(store, test_id)
