"""Document paths for chapters, their collections, and tests."""
from collections.abc import Mapping

CHAPTERS_COLLECTION = "Chapters"
TESTS_COLLECTION = "Tests"
TEST_ITEMS_SUFFIX = "Questions"
SLIDES_SUFFIX = "Slides"
TEST_QUESTIONS_SUFFIX = "Test-Questions"


def chapter_name(chapter: Mapping[str, object]) -> str:
    """Name used inside collection paths: `name`, else `slug`, else the id."""
    return str(chapter.get("name") or chapter.get("slug") or chapter.get("id") or "")


def chapter_collection(chapter_id: str, name: str, suffix: str) -> str:
    """Get path of a chapter-scoped collection."""
    return f"{CHAPTERS_COLLECTION}/{chapter_id}/{name}-{suffix}"


def slides_collection(chapter_id: str, name: str, breakdown_id: str) -> str:
    """Get path of the slides sub-collection of a breakdown."""
    breakdowns = chapter_collection(chapter_id, name, "Breakdowns")
    return f"{breakdowns}/{breakdown_id}/{SLIDES_SUFFIX}"


def test_items_collection(test_id: str) -> str:
    """Get path of the item sub-collection of a test."""
    return f"{TESTS_COLLECTION}/{test_id}/{TEST_ITEMS_SUFFIX}"


def question_ref_path(chapter_id: str, name: str, question_id: str) -> str:
    """Get the full reference path of a Test-bank question."""
    return f"{chapter_collection(chapter_id, name, TEST_QUESTIONS_SUFFIX)}/{question_id}"


def split_ref_path(ref_path: str) -> tuple[str, str]:
    """Split `Chapters/{chapterId}/{collection}/{questionId}` into (collection, doc id)."""
    parts = ref_path.split("/") if isinstance(ref_path, str) else []
    if len(parts) != 4 or parts[0] != CHAPTERS_COLLECTION or not all(parts):
        raise ValueError(f"Invalid refPath format: {ref_path!r}")
    return "/".join(parts[:3]), parts[3]
