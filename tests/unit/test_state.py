from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from comicstop.domain.entities import Comic, FileReference
from comicstop.domain.state import transition

NOW = datetime(2026, 5, 1, 9, 30, tzinfo=UTC)


def make_comic(**overrides) -> Comic:
    fields = {
        "title": "Origin",
        "linkage_mode": "single_file",
        "primary_file": FileReference(key="comics/k-abc.pdf", name="k-abc.pdf"),
        "owner_id": uuid4(),
    }
    fields.update(overrides)
    return Comic(**fields)


STATUSES = ["draft", "scheduled", "published", "archived"]
LATER = NOW + timedelta(days=1)


@pytest.mark.parametrize("current", STATUSES)
@pytest.mark.parametrize("new", STATUSES)
def test_any_status_can_move_to_any_other(current, new):
    moved = transition(make_comic(publish_status=current), new, NOW, scheduled_at=LATER)
    assert moved.publish_status == new


def test_archived_comic_can_be_published():
    published = transition(make_comic(publish_status="archived"), "published", NOW)
    assert published.publish_status == "published"
    assert published.published_at == NOW


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError, match="Unknown publish status"):
        transition(make_comic(), "deleted", NOW)


def test_publish_stamps_published_at_and_returns_copy():
    comic = make_comic()
    published = transition(comic, "published", NOW)

    assert published is not comic
    assert comic.publish_status == "draft"
    assert published.publish_status == "published"
    assert published.published_at == NOW
    assert published.updated_at == NOW


def test_republish_restamps_published_at():
    first = transition(make_comic(), "published", NOW)
    later = NOW + timedelta(hours=2)
    second = transition(first, "published", later)

    assert second.publish_status == "published"
    assert second.published_at == later


def test_publish_does_not_touch_coarse_status():
    published = transition(make_comic(), "published", NOW)
    assert published.status == "draft"


def test_schedule_requires_time_and_keeps_published_at():
    with pytest.raises(ValueError, match="scheduled time"):
        transition(make_comic(), "scheduled", NOW)

    earlier = NOW - timedelta(days=1)
    when = NOW + timedelta(days=3)
    scheduled = transition(
        make_comic(published_at=earlier), "scheduled", NOW, scheduled_at=when
    )
    assert scheduled.scheduled_at == when
    assert scheduled.published_at == earlier


def test_draft_clears_both_stamps():
    comic = make_comic(
        publish_status="published",
        published_at=NOW - timedelta(days=2),
        scheduled_at=NOW - timedelta(days=3),
    )
    drafted = transition(comic, "draft", NOW)

    assert drafted.publish_status == "draft"
    assert drafted.published_at is None
    assert drafted.scheduled_at is None


def test_unarchive_to_draft():
    restored = transition(make_comic(publish_status="archived"), "draft", NOW)
    assert restored.publish_status == "draft"
