"""Mock-test builder endpoints."""
from typing import Literal

from fastapi import APIRouter, status

from prep_admin.dependencies import CurrentSession, Registry, Store
from prep_admin.models.tests import (
    AddItemRequest,
    BuilderBasics,
    BuilderStartRequest,
    CandidateQuery,
    ItemMarksRequest,
    SaveRequest,
)

router = APIRouter(prefix="/api/builder", tags=["builder"])


@router.post("", status_code=status.HTTP_201_CREATED)
def start_builder(
    data: BuilderStartRequest, store: Store, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    """Start an empty draft, or load an existing test into one."""
    builder = registry.start(store, data.testId)
    return builder.snapshot()


@router.get("/{builder_id}")
def get_builder(
    builder_id: str, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    """Draft state with counts recomputed from the current selection."""
    return registry.get(builder_id).snapshot()


@router.delete("/{builder_id}")
def discard_builder(
    builder_id: str, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    return {"discarded": registry.discard(builder_id)}


@router.patch("/{builder_id}/basics")
def update_basics(
    builder_id: str, data: BuilderBasics, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    builder = registry.get(builder_id)
    builder.update_basics(data.model_dump(mode="json", exclude_unset=True))
    return builder.snapshot()


@router.post("/{builder_id}/next")
def next_stage(
    builder_id: str, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    builder = registry.get(builder_id)
    builder.next()
    return builder.snapshot()


@router.post("/{builder_id}/previous")
def previous_stage(
    builder_id: str, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    builder = registry.get(builder_id)
    builder.previous()
    return builder.snapshot()


@router.post("/{builder_id}/candidates")
def list_candidates(
    builder_id: str, query: CandidateQuery, registry: Registry, session: CurrentSession
) -> list[dict[str, object]]:
    """Active Test-bank questions for the draft's exam."""
    builder = registry.get(builder_id)
    return builder.candidates(
        chapters=query.chapterIds,
        types=[t.value for t in query.types or []],
        tags=query.skillTags,
        search_text=query.search or "",
    )


@router.post("/{builder_id}/items")
def add_item(
    builder_id: str, data: AddItemRequest, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    builder = registry.get(builder_id)
    added = builder.add_ref(data.refPath)
    return {"added": added, "builder": builder.snapshot()}


@router.delete("/{builder_id}/items/{index}")
def remove_item(
    builder_id: str, index: int, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    builder = registry.get(builder_id)
    builder.remove_item(index)
    return builder.snapshot()


@router.post("/{builder_id}/items/{index}/move/{direction}")
def move_item(
    builder_id: str,
    index: int,
    direction: Literal["up", "down"],
    registry: Registry,
    session: CurrentSession,
) -> dict[str, object]:
    builder = registry.get(builder_id)
    moved = builder.move_up(index) if direction == "up" else builder.move_down(index)
    return {"moved": moved, "builder": builder.snapshot()}


@router.put("/{builder_id}/items/{index}/marks")
def set_item_marks(
    builder_id: str,
    index: int,
    data: ItemMarksRequest,
    registry: Registry,
    session: CurrentSession,
) -> dict[str, object]:
    builder = registry.get(builder_id)
    builder.set_item_marks(index, data.marksCorrect, data.marksWrong)
    return builder.snapshot()


@router.post("/{builder_id}/apply-marks")
def apply_assigned_marks(
    builder_id: str, data: AddItemRequest, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    """Copy the source question's marks onto the item; reports not_found instead of failing."""
    builder = registry.get(builder_id)
    outcome = builder.apply_assigned_marks(data.refPath)
    return {"outcome": outcome.value, "builder": builder.snapshot()}


@router.post("/{builder_id}/save")
def save_builder(
    builder_id: str, data: SaveRequest, registry: Registry, session: CurrentSession
) -> dict[str, object]:
    """Persist the draft as a test (draft or published)."""
    builder = registry.get(builder_id)
    test_id = builder.save(session, publish=data.publish)
    return {"testId": test_id, "builder": builder.snapshot()}
