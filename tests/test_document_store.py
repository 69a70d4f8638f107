import pytest

from prep_admin.errors import NotFoundError
from prep_admin.services.document_store import increment


def test_add_get_and_list(store) -> None:
    first = store.add("Things", {"name": "a", "rank": 2})
    second = store.add("Things", {"name": "b", "rank": 1})

    assert store.get("Things", first) == {"name": "a", "rank": 2, "id": first}
    assert store.get("Things", "missing") is None
    assert [doc["id"] for doc in store.list("Things")] == [first, second]
    assert [doc["id"] for doc in store.list("Things", order_by="rank")] == [second, first]
    assert [doc["id"] for doc in store.list("Things", order_by="rank", descending=True)] == [
        first,
        second,
    ]
    assert store.count("Things") == 2
    assert store.count("Other") == 0


def test_list_puts_missing_sort_field_last(store) -> None:
    store.set("Things", "x", {"order": None})
    store.set("Things", "y", {"order": 1})
    assert [doc["id"] for doc in store.list("Things", order_by="order")] == ["y", "x"]


def test_set_replaces_unless_merge(store) -> None:
    store.set("Things", "a", {"x": 1, "y": 2})
    store.set("Things", "a", {"x": 5})
    assert store.get("Things", "a") == {"x": 5, "id": "a"}

    store.set("Things", "a", {"y": 7}, merge=True)
    assert store.get("Things", "a") == {"x": 5, "y": 7, "id": "a"}


def test_update_missing_document_raises(store) -> None:
    with pytest.raises(NotFoundError):
        store.update("Things", "nope", {"x": 1})


def test_increment_treats_missing_field_as_zero(store) -> None:
    store.set("Counters", "c", {"label": "c"})
    store.increment("Counters", "c", "hits", 1)
    store.increment("Counters", "c", "hits", 2)
    store.update("Counters", "c", {"hits": increment(-1)})
    assert store.get("Counters", "c")["hits"] == 2


def test_id_field_is_never_stored(store) -> None:
    store.set("Things", "a", {"id": "spoofed", "x": 1})
    assert store.get("Things", "a")["id"] == "a"


def test_delete(store) -> None:
    store.set("Things", "a", {"x": 1})
    assert store.delete("Things", "a") is True
    assert store.delete("Things", "a") is False
    assert store.get("Things", "a") is None


def test_batch_commits_all_operations(store) -> None:
    store.set("Things", "old", {"x": 1})
    store.set("Counters", "c", {"n": 0})

    batch = store.batch()
    new_id = batch.create("Things", {"x": 2})
    batch.delete("Things", "old")
    batch.update("Counters", "c", {"n": increment(1)})
    assert len(batch) == 3
    batch.commit()

    assert [doc["id"] for doc in store.list("Things")] == [new_id]
    assert store.get("Counters", "c")["n"] == 1


def test_batch_is_atomic(store) -> None:
    store.set("Things", "a", {"x": 1})
    batch = store.batch()
    batch.set("Things", "b", {"x": 2})
    batch.update("Things", "missing", {"x": 3})
    with pytest.raises(NotFoundError):
        batch.commit()
    assert store.get("Things", "b") is None


def test_batch_delete_collection_only_touches_that_collection(store) -> None:
    store.add("Tests/t1/Questions", {"order": 0})
    store.add("Tests/t1/Questions", {"order": 1})
    store.add("Tests/t2/Questions", {"order": 0})
    store.batch().delete_collection("Tests/t1/Questions").commit()
    assert store.count("Tests/t1/Questions") == 0
    assert store.count("Tests/t2/Questions") == 1


def test_transaction_reads_and_writes_together(store) -> None:
    store.set("Things", "a", {"order": 0})
    store.set("Things", "b", {"order": 1})

    with store.transaction() as txn:
        a = txn.get("Things", "a")
        b = txn.get("Things", "b")
        txn.update("Things", "a", {"order": b["order"]})
        txn.update("Things", "b", {"order": a["order"]})

    assert store.get("Things", "a")["order"] == 1
    assert store.get("Things", "b")["order"] == 0


def test_transaction_rolls_back_on_error(store) -> None:
    store.set("Things", "a", {"order": 0})
    with pytest.raises(RuntimeError):
        with store.transaction() as txn:
            txn.update("Things", "a", {"order": 9})
            raise RuntimeError("boom")
    assert store.get("Things", "a")["order"] == 0


def test_subscribe_delivers_initial_and_later_snapshots(store) -> None:
    snapshots = []
    unsubscribe = store.subscribe("Things", snapshots.append)
    assert snapshots == [[]]
    assert store.listener_count("Things") == 1

    doc_id = store.add("Things", {"x": 1})
    assert snapshots[-1] == [{"x": 1, "id": doc_id}]

    store.add("Other", {"x": 2})
    assert len(snapshots) == 2

    unsubscribe()
    assert store.listener_count("Things") == 0
    store.add("Things", {"x": 3})
    assert len(snapshots) == 2


def test_failing_listener_does_not_break_writes(store) -> None:
    received = []

    def broken(snapshot) -> None:
        if snapshot:
            raise RuntimeError("listener failed")

    store.subscribe("Things", broken)
    store.subscribe("Things", received.append)
    store.add("Things", {"x": 1})
    assert len(received[-1]) == 1
