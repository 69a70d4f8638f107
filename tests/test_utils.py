import logging
from pathlib import Path

import pytest

from prep_admin.errors import ValidationError
from prep_admin.logging_setup import setup_console_logging
from prep_admin.utils import file_utils, paths, question_types, skills, time_utils, validation


def test_safe_asset_path_allows_nested(tmp_path: Path) -> None:
    base_dir = tmp_path / "assets"
    base_dir.mkdir()
    resolved = file_utils.safe_asset_path(base_dir, "images/logo.png")
    assert resolved == (base_dir / "images" / "logo.png").resolve()


def test_safe_asset_path_blocks_traversal(tmp_path: Path) -> None:
    base_dir = tmp_path / "assets"
    base_dir.mkdir()
    with pytest.raises(ValidationError):
        file_utils.safe_asset_path(base_dir, "../secret.txt")


def test_utc_now_is_timezone_aware() -> None:
    assert time_utils.utc_now().endswith("+00:00")
    assert time_utils.utc_datetime().tzinfo is not None


def test_utc_now_sorts_chronologically() -> None:
    earlier = time_utils.utc_now()
    later = time_utils.utc_now()
    assert earlier <= later


def test_collection_paths() -> None:
    assert paths.chapter_collection("abc", "Kinematics", "Test-Questions") == (
        "Chapters/abc/Kinematics-Test-Questions"
    )
    assert paths.slides_collection("abc", "Kinematics", "b1") == (
        "Chapters/abc/Kinematics-Breakdowns/b1/Slides"
    )
    assert paths.test_items_collection("t1") == "Tests/t1/Questions"
    assert paths.question_ref_path("abc", "Kinematics", "q1") == (
        "Chapters/abc/Kinematics-Test-Questions/q1"
    )


def test_chapter_name_falls_back_to_slug_then_id() -> None:
    assert paths.chapter_name({"name": "Optics", "slug": "optics", "id": "x"}) == "Optics"
    assert paths.chapter_name({"slug": "optics", "id": "x"}) == "optics"
    assert paths.chapter_name({"id": "x"}) == "x"


def test_split_ref_path() -> None:
    collection, doc_id = paths.split_ref_path("Chapters/abc/Kinematics-Test-Questions/q1")
    assert collection == "Chapters/abc/Kinematics-Test-Questions"
    assert doc_id == "q1"

    for bad in ("", "Chapters/abc/q1", "Tests/abc/Questions/q1", "Chapters//x/q1", None):
        with pytest.raises(ValueError):
            paths.split_ref_path(bad)


def test_validate_id() -> None:
    assert validation.validate_id("test", " abc ") == "abc"
    with pytest.raises(ValidationError):
        validation.validate_id("test", "")
    with pytest.raises(ValidationError):
        validation.validate_id("test", "../bad")


def test_map_question_type_accepts_labels_and_values() -> None:
    assert question_types.map_question_type("Multiple Choice (Single Answer)") == "MCQ"
    assert question_types.map_question_type("Multiple Choice (Multiple Answers)") == "MultipleAnswer"
    assert question_types.map_question_type("multiple correct") == "MultipleAnswer"
    assert question_types.map_question_type("Numerical value") == "Numerical"
    assert question_types.map_question_type("Numerical") == "Numerical"
    assert question_types.map_question_type("") == "MCQ"

    assert question_types.map_question_type_to_ui("MultipleAnswer") == (
        "Multiple Choice (Multiple Answers)"
    )
    assert question_types.map_question_type_to_ui("unknown") == "Multiple Choice (Single Answer)"


def test_ensure_skill_tags_prefers_array() -> None:
    assert skills.ensure_skill_tags({"skillTags": ["a", "b"], "skillTag": "z"}) == {
        "skillTags": ["a", "b"],
        "skillTag": "a",
    }


def test_ensure_skill_tags_falls_back_to_scalar() -> None:
    assert skills.ensure_skill_tags({"skillTag": "legacy"}) == {
        "skillTags": ["legacy"],
        "skillTag": "legacy",
    }
    assert skills.ensure_skill_tags({"skillTags": [], "skillTag": "legacy"})["skillTags"] == [
        "legacy"
    ]


def test_ensure_skill_tags_empty() -> None:
    assert skills.ensure_skill_tags(None) == {"skillTags": [], "skillTag": ""}
    assert skills.display_skill_tags({"title": "x"}) == []


def test_with_skill_tags_keeps_other_fields() -> None:
    entity = skills.with_skill_tags({"title": "Q", "skillTag": "vectors"})
    assert entity == {"title": "Q", "skillTag": "vectors", "skillTags": ["vectors"]}


def test_setup_console_logging_quiets_noisy_loggers() -> None:
    setup_console_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("PIL").level == logging.WARNING

    setup_console_logging("not-a-level")
    assert logging.getLogger().level == logging.INFO


@pytest.mark.parametrize(
    "entity",
    [
        None,
        {},
        {"skillTag": "legacy"},
        {"skillTags": ["a", "b"]},
        {"skillTags": [], "skillTag": ""},
        {"skillTags": ["a"], "skillTag": "z"},
    ],
)
def test_ensure_skill_tags_is_idempotent(entity) -> None:
    once = skills.ensure_skill_tags(entity)
    assert skills.ensure_skill_tags(once) == once
    assert once["skillTag"] == (once["skillTags"][0] if once["skillTags"] else "")
