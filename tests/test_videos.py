import pytest

from prep_admin.errors import PermissionDeniedError, ValidationError
from prep_admin.services import video_service


def _video(**overrides):
    video = {
        "title": "Projectile motion",
        "description": "Horizontal and vertical components",
        "storagePath": "videos/projectile.mp4",
        "thumbnailPath": "videos/projectile.png",
        "skillTag": "projectile",
        "durationSec": 420,
    }
    video.update(overrides)
    return video


def test_validate_video_reports_fields() -> None:
    errors = video_service.validate_video(
        {"title": "", "durationSec": 0, "difficulty": 12, "order": -1}
    )
    assert set(errors) == {
        "title",
        "description",
        "storagePath",
        "thumbnailPath",
        "skillTag",
        "durationSec",
        "difficulty",
        "order",
    }


def test_prepare_video_defaults() -> None:
    video = video_service.prepare_video(_video(id="x"))
    assert video["difficulty"] == 5
    assert video["order"] == 0
    assert video["prereq"] == ""
    assert "id" not in video


def test_video_crud_sorted_by_order(store, chapter, primary, secondary) -> None:
    later = video_service.create_video(store, secondary, chapter, _video(title="Later", order=2))
    first = video_service.create_video(store, secondary, chapter, _video(title="First", order=1))
    assert [v["id"] for v in video_service.list_videos(store, chapter)] == [first, later]

    updated = video_service.update_video(store, secondary, chapter, later, {"order": 0})
    assert updated["order"] == 0
    assert [v["id"] for v in video_service.list_videos(store, chapter)] == [later, first]

    with pytest.raises(ValidationError):
        video_service.update_video(store, secondary, chapter, later, {"durationSec": -5})
    with pytest.raises(PermissionDeniedError):
        video_service.delete_video(store, secondary, chapter, later)

    video_service.delete_video(store, primary, chapter, later)
    assert [v["id"] for v in video_service.list_videos(store, chapter)] == [first]
