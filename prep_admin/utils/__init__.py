"""Utility modules."""
from prep_admin.utils.file_utils import safe_asset_path
from prep_admin.utils.paths import (
    chapter_collection,
    chapter_name,
    question_ref_path,
    slides_collection,
    split_ref_path,
    test_items_collection,
)
from prep_admin.utils.question_types import map_question_type, map_question_type_to_ui
from prep_admin.utils.skills import display_skill_tags, ensure_skill_tags, with_skill_tags
from prep_admin.utils.time_utils import utc_datetime, utc_now
from prep_admin.utils.validation import validate_id

__all__ = [
    "safe_asset_path",
    "chapter_collection",
    "chapter_name",
    "question_ref_path",
    "slides_collection",
    "split_ref_path",
    "test_items_collection",
    "map_question_type",
    "map_question_type_to_ui",
    "display_skill_tags",
    "ensure_skill_tags",
    "with_skill_tags",
    "utc_datetime",
    "utc_now",
    "validate_id",
]
