"""Chapter-scoped collections with denormalized counters on the chapter."""
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from prep_admin.errors import NoChapterSelectedError, NotFoundError
from prep_admin.services.document_store import Document, DocumentStore, increment
from prep_admin.services.permission_service import (
    Action,
    AdminSession,
    require_permission,
)
from prep_admin.utils.paths import CHAPTERS_COLLECTION, chapter_collection, chapter_name
from prep_admin.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

# Chapter counter field per collection suffix; suffixes missing here keep no counter
COUNTER_FIELDS = {
    "Diagnostic-Questions": "questionCountDiagnostic",
    "Practice-Questions": "questionCountPractice",
    "Test-Questions": "questionCountTest",
    "Breakdowns": "questionCountBreakdowns",
}


class ChapterCollection:
    """CRUD and snapshot subscription over `Chapters/{id}/{name}-{suffix}`.

    Mutations take the caller's session and are checked against the
    permission gate. Every operation raises NoChapterSelectedError when no
    chapter is bound.
    """

    def __init__(
        self,
        store: DocumentStore,
        chapter: Mapping[str, Any] | None,
        suffix: str,
    ) -> None:
        self.store = store
        self.chapter = dict(chapter) if chapter else None
        self.suffix = suffix

    @property
    def counter_field(self) -> str | None:
        return COUNTER_FIELDS.get(self.suffix)

    def _require_chapter(self) -> dict[str, Any]:
        if not self.chapter or not self.chapter.get("id"):
            raise NoChapterSelectedError()
        return self.chapter

    @property
    def chapter_id(self) -> str:
        return str(self._require_chapter()["id"])

    @property
    def path(self) -> str:
        chapter = self._require_chapter()
        return chapter_collection(str(chapter["id"]), chapter_name(chapter), self.suffix)

    def list_items(self, order_by: str | None = None) -> list[Document]:
        return self.store.list(self.path, order_by=order_by)

    def get_item(self, item_id: str) -> Document:
        item = self.store.get(self.path, item_id)
        if item is None:
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    def create_item(self, session: AdminSession, item: Mapping[str, Any]) -> str:
        require_permission(session, Action.CREATE)
        path = self.path
        now = utc_now()
        batch = self.store.batch()
        item_id = batch.create(
            path,
            {**item, "chapterId": self.chapter_id, "createdAt": now, "updatedAt": now},
        )
        field = self.counter_field
        if field:
            batch.update(CHAPTERS_COLLECTION, self.chapter_id, {field: increment(1)})
        batch.commit()
        logger.info(f"Created {item_id} in {path}")
        return item_id

    def update_item(
        self, session: AdminSession, item_id: str, updates: Mapping[str, Any]
    ) -> None:
        require_permission(session, Action.UPDATE)
        path = self.path
        self.store.update(path, item_id, {**updates, "updatedAt": utc_now()})
        logger.info(f"Updated {item_id} in {path}")

    def delete_item(self, session: AdminSession, item_id: str) -> None:
        require_permission(session, Action.DELETE)
        path = self.path
        if self.store.get(path, item_id) is None:
            raise NotFoundError(f"Item not found: {item_id}")
        batch = self.store.batch().delete(path, item_id)
        field = self.counter_field
        if field:
            batch.update(CHAPTERS_COLLECTION, self.chapter_id, {field: increment(-1)})
        batch.commit()
        logger.info(f"Deleted {item_id} from {path}")

    def subscribe(self, listener: Callable[[list[Document]], None]) -> Callable[[], None]:
        """Push full snapshots to `listener`; returns the unsubscribe callable."""
        path = self.path
        logger.debug(f"Subscribing to collection: {path}")
        return self.store.subscribe(path, listener)

    @contextmanager
    def watch(self, listener: Callable[[list[Document]], None]) -> Iterator[None]:
        unsubscribe = self.subscribe(listener)
        try:
            yield
        finally:
            unsubscribe()
