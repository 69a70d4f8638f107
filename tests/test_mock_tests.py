import pytest

from prep_admin.errors import NotFoundError, PermissionDeniedError, ValidationError
from prep_admin.services import mock_test_service


def test_create_test_sets_system_fields(store, secondary) -> None:
    test_id = mock_test_service.create_test(
        store,
        secondary,
        {"name": "Mock", "status": "PUBLISHED", "createdBy": "someone", "version": 9},
    )
    test = mock_test_service.get_test(store, test_id)
    assert test["status"] == "DRAFT"
    assert test["createdBy"] == "secondary-uid"
    assert test["version"] == 1
    assert test["createdAt"] == test["updatedAt"]


def test_list_tests_newest_first(store, primary) -> None:
    first = mock_test_service.create_test(store, primary, {"name": "First"})
    second = mock_test_service.create_test(store, primary, {"name": "Second"})
    mock_test_service.update_test(store, primary, first, {"name": "First edited"})
    assert [t["id"] for t in mock_test_service.list_tests(store)] == [first, second]


def test_items_are_replaced_in_order(store, primary) -> None:
    test_id = mock_test_service.create_test(store, primary, {"name": "Mock"})
    mock_test_service.upsert_test_items(
        store, primary, test_id, [{"title": "a"}, {"title": "b"}, {"title": "c"}]
    )
    mock_test_service.upsert_test_items(
        store, primary, test_id, [{"title": "c", "id": "old"}, {"title": "a"}]
    )
    items = mock_test_service.get_test_items(store, test_id)
    assert [(i["title"], i["order"]) for i in items] == [("c", 0), ("a", 1)]
    assert all(i["id"] != "old" for i in items)


def test_set_test_status(store, primary) -> None:
    test_id = mock_test_service.create_test(store, primary, {"name": "Mock"})
    assert mock_test_service.set_test_status(store, primary, test_id, "PUBLISHED")["status"] == (
        "PUBLISHED"
    )
    assert mock_test_service.set_test_status(store, primary, test_id, "DRAFT")["status"] == "DRAFT"
    with pytest.raises(ValidationError):
        mock_test_service.set_test_status(store, primary, test_id, "LIVE")
    with pytest.raises(NotFoundError):
        mock_test_service.set_test_status(store, primary, "missing", "ARCHIVED")


def test_delete_test_removes_items(store, primary, secondary) -> None:
    test_id = mock_test_service.create_test(store, primary, {"name": "Mock"})
    mock_test_service.upsert_test_items(store, primary, test_id, [{"title": "a"}])

    with pytest.raises(PermissionDeniedError):
        mock_test_service.delete_test(store, secondary, test_id)

    mock_test_service.delete_test(store, primary, test_id)
    assert mock_test_service.list_tests(store) == []
    assert mock_test_service.get_test_items(store, test_id) == []
    with pytest.raises(NotFoundError):
        mock_test_service.delete_test(store, primary, test_id)


def test_counts_and_tags_are_derived_from_items(store, primary) -> None:
    test_id = mock_test_service.create_test(
        store, primary, {"name": "Mock", "counts": {"totalQuestions": 99}, "skillTags": ["x"]}
    )
    test = mock_test_service.get_test(store, test_id)
    assert test["counts"]["totalQuestions"] == 0
    assert test["skillTags"] == []

    items = [
        {"type": "MCQ", "difficultyBand": "easy", "marksCorrect": 5, "skillTags": ["a"]},
        {"type": "MCQ", "difficultyBand": "moderate", "skillTags": ["a", "b"]},
    ]
    mock_test_service.upsert_test_items(store, primary, test_id, items)
    test = mock_test_service.get_test(store, test_id)
    assert test["counts"]["totalQuestions"] == 2
    assert test["counts"]["byType"]["MCQ"] == 2
    assert test["counts"]["totalMarks"] == 9
    assert test["skillTags"] == ["a", "b"]

    mock_test_service.update_test(
        store, primary, test_id, {"marksCorrectDefault": 2, "counts": {"totalQuestions": 99}}
    )
    test = mock_test_service.get_test(store, test_id)
    assert test["counts"]["totalQuestions"] == 2
    assert test["counts"]["totalMarks"] == 7

    mock_test_service.upsert_test_items(store, primary, test_id, [])
    test = mock_test_service.get_test(store, test_id)
    assert test["counts"]["totalQuestions"] == 0
    assert test["counts"]["totalMarks"] == 0
    assert test["skillTags"] == []


def test_upsert_items_for_missing_test(store, primary) -> None:
    with pytest.raises(NotFoundError):
        mock_test_service.upsert_test_items(store, primary, "missing", [{"title": "a"}])
