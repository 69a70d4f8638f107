"""Chapter management: chapters, their skill-tag vocabularies and counters."""
import logging
import re
from typing import Any

from prep_admin.errors import NotFoundError, ValidationError
from prep_admin.services.collection_service import COUNTER_FIELDS
from prep_admin.services.document_store import Document, DocumentStore
from prep_admin.services.permission_service import (
    Action,
    AdminSession,
    require_permission,
)
from prep_admin.utils.paths import CHAPTERS_COLLECTION, chapter_collection, chapter_name
from prep_admin.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

SAMPLE_CHAPTERS = [
    ("Kinematics", "kinematics"),
    ("Laws of Motion", "laws-of-motion"),
    ("Work, Energy and Power", "work-energy-and-power"),
    ("Thermodynamics", "thermodynamics"),
    ("Gravitation", "gravitation"),
]

# Collections whose documents may still carry only the scalar skillTag
_TAGGED_SUFFIXES = ("Practice-Questions", "Test-Questions", "Breakdowns")


def normalize_skill_tag(value: str) -> str:
    """Lower-case slug form of a tag: `Vector Addition` -> `vector-addition`."""
    return re.sub(r"\s+", "-", (value or "").strip().lower())


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower())
    return slug.strip("-")


def _empty_counters() -> dict[str, int]:
    return {field: 0 for field in COUNTER_FIELDS.values()}


def list_chapters(store: DocumentStore) -> list[Document]:
    return store.list(CHAPTERS_COLLECTION, order_by="name")


def get_chapter(store: DocumentStore, chapter_id: str) -> Document:
    chapter = store.get(CHAPTERS_COLLECTION, chapter_id)
    if chapter is None:
        raise NotFoundError(f"Chapter not found: {chapter_id}")
    return chapter


def create_chapter(
    store: DocumentStore, session: AdminSession, data: dict[str, Any]
) -> str:
    """Create a chapter keyed by its slug, with zeroed counters."""
    require_permission(session, Action.CREATE)
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationError("Chapter name is required", {"name": "Required"})
    slug = slugify(str(data.get("slug") or name))
    if not slug:
        raise ValidationError("Invalid chapter slug", {"slug": "Invalid"})
    if store.get(CHAPTERS_COLLECTION, slug) is not None:
        raise ValidationError("Chapter already exists", {"slug": "Already exists"})

    tags: list[str] = []
    for tag in data.get("skillTags") or []:
        cleaned = normalize_skill_tag(str(tag))
        if cleaned and cleaned not in tags:
            tags.append(cleaned)

    now = utc_now()
    store.set(
        CHAPTERS_COLLECTION,
        slug,
        {
            "name": name,
            "slug": slug,
            "subject": str(data.get("subject") or "").strip(),
            "skillTags": tags,
            **_empty_counters(),
            "createdAt": now,
            "updatedAt": now,
        },
    )
    logger.info(f"Created chapter {slug}")
    return slug


def seed_chapters(store: DocumentStore) -> list[str]:
    """Write the sample Physics chapters, merging into existing documents."""
    now = utc_now()
    batch = store.batch()
    for name, slug in SAMPLE_CHAPTERS:
        existing = store.get(CHAPTERS_COLLECTION, slug)
        data: dict[str, Any] = {"name": name, "slug": slug, "subject": "Physics", "updatedAt": now}
        if existing is None:
            data.update(_empty_counters(), skillTags=[], createdAt=now)
        batch.set(CHAPTERS_COLLECTION, slug, data, merge=True)
    batch.commit()
    logger.info(f"Initialized {len(SAMPLE_CHAPTERS)} chapters")
    return [slug for _, slug in SAMPLE_CHAPTERS]


def _edit_skill_tags(store: DocumentStore, chapter_id: str, edit) -> list[str]:
    with store.transaction() as txn:
        chapter = txn.get(CHAPTERS_COLLECTION, chapter_id)
        if chapter is None:
            raise NotFoundError(f"Chapter not found: {chapter_id}")
        tags = [str(tag) for tag in chapter.get("skillTags") or []]
        tags = edit(tags)
        txn.update(CHAPTERS_COLLECTION, chapter_id, {"skillTags": tags, "updatedAt": utc_now()})
    return tags


def add_skill_tag(
    store: DocumentStore, session: AdminSession, chapter_id: str, tag: str
) -> list[str]:
    require_permission(session, Action.UPDATE)
    cleaned = normalize_skill_tag(tag)
    if not cleaned:
        raise ValidationError("Skill tag is required", {"tag": "Required"})

    def edit(tags: list[str]) -> list[str]:
        if cleaned in tags:
            raise ValidationError("Skill tag already exists", {"tag": "Duplicate"})
        return [*tags, cleaned]

    tags = _edit_skill_tags(store, chapter_id, edit)
    logger.info(f"Added skill tag {cleaned} to chapter {chapter_id}")
    return tags


def rename_skill_tag(
    store: DocumentStore, session: AdminSession, chapter_id: str, old: str, new: str
) -> list[str]:
    require_permission(session, Action.UPDATE)
    cleaned = normalize_skill_tag(new)
    if not cleaned:
        raise ValidationError("Skill tag is required", {"new": "Required"})

    def edit(tags: list[str]) -> list[str]:
        if old not in tags:
            raise NotFoundError(f"Skill tag not found: {old}")
        index = tags.index(old)
        if any(tag == cleaned for i, tag in enumerate(tags) if i != index):
            raise ValidationError("Skill tag already exists", {"new": "Duplicate"})
        tags[index] = cleaned
        return tags

    tags = _edit_skill_tags(store, chapter_id, edit)
    logger.info(f"Renamed skill tag {old} -> {cleaned} in chapter {chapter_id}")
    return tags


def remove_skill_tag(
    store: DocumentStore, session: AdminSession, chapter_id: str, tag: str
) -> list[str]:
    require_permission(session, Action.UPDATE)

    def edit(tags: list[str]) -> list[str]:
        if tag not in tags:
            raise NotFoundError(f"Skill tag not found: {tag}")
        return [t for t in tags if t != tag]

    tags = _edit_skill_tags(store, chapter_id, edit)
    logger.info(f"Removed skill tag {tag} from chapter {chapter_id}")
    return tags


def all_skill_tags(store: DocumentStore) -> list[dict[str, str]]:
    """Every chapter's tags, de-duplicated by value (first chapter wins) and sorted."""
    options: dict[str, dict[str, str]] = {}
    for chapter in store.list(CHAPTERS_COLLECTION):
        tags = chapter.get("skillTags")
        if not isinstance(tags, list):
            continue
        for tag in tags:
            value = str(tag)
            if value in options:
                continue
            options[value] = {
                "value": value,
                "label": value,
                "chapterId": chapter["id"],
                "chapterName": str(chapter.get("name") or chapter["id"]),
            }
    return sorted(options.values(), key=lambda option: option["label"].lower())


def reconcile_counters(store: DocumentStore, chapter_id: str) -> dict[str, int]:
    """Recompute the chapter's counters from the actual collection sizes."""
    chapter = get_chapter(store, chapter_id)
    name = chapter_name(chapter)
    counters = {
        field: store.count(chapter_collection(chapter_id, name, suffix))
        for suffix, field in COUNTER_FIELDS.items()
    }
    stale = {k: v for k, v in counters.items() if chapter.get(k) != v}
    if stale:
        store.update(CHAPTERS_COLLECTION, chapter_id, {**counters, "updatedAt": utc_now()})
        logger.warning(f"Reconciled counters for chapter {chapter_id}: {stale}")
    return counters


def backfill_skill_tags(store: DocumentStore, chapter_id: str) -> int:
    """Give documents that only carry the scalar skillTag a one-element skillTags array."""
    chapter = get_chapter(store, chapter_id)
    name = chapter_name(chapter)
    total = 0
    for suffix in _TAGGED_SUFFIXES:
        path = chapter_collection(chapter_id, name, suffix)
        batch = store.batch()
        now = utc_now()
        for document in store.list(path):
            tags = document.get("skillTags")
            if (not isinstance(tags, list) or not tags) and document.get("skillTag"):
                batch.update(path, document["id"], {
                    "skillTags": [document["skillTag"]],
                    "updatedAt": now,
                })
        if len(batch):
            updated = len(batch)
            batch.commit()
            total += updated
            logger.info(f"Updated {updated} documents in {path}")
    return total
