"""Skill-tag normalization.

Documents written before tag arrays existed carry only a scalar ``skillTag``.
Everything that reads or writes tags goes through these helpers so the
scalar field is never consulted directly elsewhere.
"""
from collections.abc import Mapping


def ensure_skill_tags(entity: Mapping[str, object] | None) -> dict[str, object]:
    """Return the canonical ``{"skillTags": [...], "skillTag": str}`` pair."""
    entity = entity or {}
    raw_tags = entity.get("skillTags")
    if isinstance(raw_tags, (list, tuple)) and raw_tags:
        tags = [str(tag) for tag in raw_tags]
    elif entity.get("skillTag"):
        tags = [str(entity["skillTag"])]
    else:
        tags = []
    return {"skillTags": tags, "skillTag": tags[0] if tags else ""}


def display_skill_tags(entity: Mapping[str, object] | None) -> list[str]:
    """Tags to show for a document, falling back to the legacy scalar."""
    return ensure_skill_tags(entity)["skillTags"]


def with_skill_tags(entity: Mapping[str, object]) -> dict[str, object]:
    """Copy of `entity` with its tag fields normalized."""
    return {**entity, **ensure_skill_tags(entity)}
