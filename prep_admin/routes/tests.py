"""Mock-test endpoints."""
from fastapi import APIRouter, Body, status

from prep_admin.dependencies import CurrentSession, Store
from prep_admin.models.tests import StatusRequest
from prep_admin.services import mock_test_service

router = APIRouter(prefix="/api/tests", tags=["tests"])


@router.get("")
def list_tests(store: Store, session: CurrentSession) -> list[dict[str, object]]:
    """List tests, most recently updated first."""
    return mock_test_service.list_tests(store)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_test(
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    test_id = mock_test_service.create_test(store, session, payload)
    return mock_test_service.get_test(store, test_id)


@router.get("/{test_id}")
def get_test(test_id: str, store: Store, session: CurrentSession) -> dict[str, object]:
    """Test metadata with its ordered items."""
    return {
        "test": mock_test_service.get_test(store, test_id),
        "items": mock_test_service.get_test_items(store, test_id),
    }


@router.patch("/{test_id}")
def update_test(
    test_id: str,
    store: Store,
    session: CurrentSession,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    mock_test_service.update_test(store, session, test_id, payload)
    return mock_test_service.get_test(store, test_id)


@router.put("/{test_id}/items")
def replace_items(
    test_id: str,
    store: Store,
    session: CurrentSession,
    items: list[dict[str, object]] = Body(...),
) -> list[dict[str, object]]:
    """Replace every item of the test; order follows the list."""
    mock_test_service.get_test(store, test_id)
    mock_test_service.upsert_test_items(store, session, test_id, items)
    return mock_test_service.get_test_items(store, test_id)


@router.post("/{test_id}/status")
def set_status(
    test_id: str, data: StatusRequest, store: Store, session: CurrentSession
) -> dict[str, object]:
    """Publish, unpublish or archive."""
    return mock_test_service.set_test_status(store, session, test_id, data.status.value)


@router.delete("/{test_id}")
def delete_test(test_id: str, store: Store, session: CurrentSession) -> dict[str, object]:
    mock_test_service.delete_test(store, session, test_id)
    return {"deleted": test_id}
