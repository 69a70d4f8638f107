"""Hierarchical document store over the `documents` table.

Collections are addressed by slash-separated paths and hold JSON documents.
Writes are committed per call, per batch, or per transaction; after each
commit the listeners of every touched collection receive a fresh snapshot.
"""
from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from copy import deepcopy
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession, sessionmaker

from prep_admin.errors import NotFoundError, StoreError
from prep_admin.models.db.document import DocumentRecord

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Listener = Callable[[list[Document]], None]


class Increment:
    """Field value that adds `amount` to the stored number instead of replacing it."""

    def __init__(self, amount: int | float) -> None:
        self.amount = amount

    def __repr__(self) -> str:
        return f"Increment({self.amount})"


def increment(amount: int | float) -> Increment:
    return Increment(amount)


def new_doc_id() -> str:
    """Generate a document id."""
    return uuid.uuid4().hex[:20]


def _to_document(record: DocumentRecord) -> Document:
    return {**deepcopy(record.data), "id": record.doc_id}


def _strip_id(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key != "id"}


def _apply_patch(data: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    for key, value in _strip_id(patch).items():
        if isinstance(value, Increment):
            current = merged.get(key)
            if isinstance(current, bool) or not isinstance(current, (int, float)):
                current = 0
            merged[key] = current + value.amount
        else:
            merged[key] = value
    return merged


def _get_record(db: DbSession, collection: str, doc_id: str) -> DocumentRecord | None:
    stmt = select(DocumentRecord).where(
        DocumentRecord.collection == collection,
        DocumentRecord.doc_id == doc_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def _write(
    db: DbSession, collection: str, doc_id: str, data: dict[str, Any], merge: bool
) -> None:
    record = _get_record(db, collection, doc_id)
    if record is None:
        db.add(
            DocumentRecord(
                collection=collection,
                doc_id=doc_id,
                data=_apply_patch({}, data),
            )
        )
        return
    base = record.data if merge else {}
    record.data = _apply_patch(base, data)


def _update(db: DbSession, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
    record = _get_record(db, collection, doc_id)
    if record is None:
        raise NotFoundError(f"Document not found: {collection}/{doc_id}")
    record.data = _apply_patch(record.data, patch)


def _delete(db: DbSession, collection: str, doc_id: str) -> bool:
    record = _get_record(db, collection, doc_id)
    if record is None:
        return False
    db.delete(record)
    return True


def _delete_collection(db: DbSession, collection: str) -> int:
    result = db.execute(
        delete(DocumentRecord).where(DocumentRecord.collection == collection)
    )
    return result.rowcount or 0


def _sort_key(field: str):
    def key(document: Document) -> tuple[bool, Any]:
        value = document.get(field)
        return (value is None, value if value is not None else 0)

    return key


class WriteBatch:
    """Collects writes and applies them in a single commit."""

    def __init__(self, store: "DocumentStore") -> None:
        self._store = store
        self._ops: list[tuple[str, tuple[Any, ...]]] = []

    def create(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_doc_id()
        self._ops.append(("set", (collection, doc_id, data, False)))
        return doc_id

    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> "WriteBatch":
        self._ops.append(("set", (collection, doc_id, data, merge)))
        return self

    def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> "WriteBatch":
        self._ops.append(("update", (collection, doc_id, patch)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(("delete", (collection, doc_id)))
        return self

    def delete_collection(self, collection: str) -> "WriteBatch":
        self._ops.append(("delete_collection", (collection,)))
        return self

    def __len__(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        self._store._commit(self._ops)
        self._ops = []


class Transaction:
    """Read-modify-write unit; all reads and writes share one database transaction."""

    def __init__(self, db: DbSession) -> None:
        self._db = db
        self.touched: set[str] = set()

    def get(self, collection: str, doc_id: str) -> Document | None:
        record = _get_record(self._db, collection, doc_id)
        return _to_document(record) if record else None

    def list(self, collection: str) -> list[Document]:
        stmt = (
            select(DocumentRecord)
            .where(DocumentRecord.collection == collection)
            .order_by(DocumentRecord.id)
        )
        return [_to_document(r) for r in self._db.execute(stmt).scalars().all()]

    def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        _write(self._db, collection, doc_id, data, merge)
        self._db.flush()
        self.touched.add(collection)

    def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        _update(self._db, collection, doc_id, patch)
        self._db.flush()
        self.touched.add(collection)


class DocumentStore:
    """CRUD, batches, transactions and snapshot subscriptions over collections."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._listeners: dict[str, list[Listener]] = {}
        self._listeners_lock = threading.Lock()

    @contextmanager
    def _session(self) -> Iterator[DbSession]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Document store request failed: {exc}")
            raise StoreError("Document store request failed") from exc
        finally:
            db.close()

    # Reads

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._session() as db:
            record = _get_record(db, collection, doc_id)
            return _to_document(record) if record else None

    def list(
        self, collection: str, order_by: str | None = None, descending: bool = False
    ) -> list[Document]:
        with self._session() as db:
            stmt = (
                select(DocumentRecord)
                .where(DocumentRecord.collection == collection)
                .order_by(DocumentRecord.id)
            )
            documents = [_to_document(r) for r in db.execute(stmt).scalars().all()]
        if order_by:
            documents.sort(key=_sort_key(order_by), reverse=descending)
        return documents

    def count(self, collection: str) -> int:
        with self._session() as db:
            stmt = select(func.count()).where(DocumentRecord.collection == collection)
            return db.execute(stmt).scalar() or 0

    # Writes

    def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_doc_id()
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        self._commit([("set", (collection, doc_id, data, merge))])

    def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        self._commit([("update", (collection, doc_id, patch))])

    def increment(self, collection: str, doc_id: str, field: str, amount: int) -> None:
        self.update(collection, doc_id, {field: Increment(amount)})

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._session() as db:
            deleted = _delete(db, collection, doc_id)
            db.commit()
        if deleted:
            self._notify([collection])
        return deleted

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self._session() as db:
            txn = Transaction(db)
            yield txn
            db.commit()
        self._notify(txn.touched)

    def _commit(self, ops: list[tuple[str, tuple[Any, ...]]]) -> None:
        if not ops:
            return
        touched: list[str] = []
        with self._session() as db:
            for name, args in ops:
                if name == "set":
                    _write(db, *args)
                elif name == "update":
                    _update(db, *args)
                elif name == "delete":
                    _delete(db, *args)
                elif name == "delete_collection":
                    _delete_collection(db, *args)
                else:
                    raise ValueError(f"Unknown batch operation: {name}")
                db.flush()
                if args[0] not in touched:
                    touched.append(args[0])
            db.commit()
        self._notify(touched)

    # Subscriptions

    def subscribe(self, collection: str, listener: Listener) -> Callable[[], None]:
        """Register `listener` for snapshots of `collection`; returns the unsubscribe callable."""
        with self._listeners_lock:
            self._listeners.setdefault(collection, []).append(listener)
        listener(self.list(collection))

        def unsubscribe() -> None:
            with self._listeners_lock:
                listeners = self._listeners.get(collection, [])
                if listener in listeners:
                    listeners.remove(listener)
                if not listeners:
                    self._listeners.pop(collection, None)

        return unsubscribe

    def listener_count(self, collection: str) -> int:
        with self._listeners_lock:
            return len(self._listeners.get(collection, []))

    def _notify(self, collections: Iterable[str]) -> None:
        for collection in collections:
            with self._listeners_lock:
                listeners = list(self._listeners.get(collection, []))
            if not listeners:
                continue
            snapshot = self.list(collection)
            for listener in listeners:
                try:
                    listener(deepcopy(snapshot))
                except Exception:
                    logger.exception(f"Snapshot listener for {collection} failed")
