from datetime import datetime
from typing import Any, get_args

from comicstop.domain.entities import Comic, PublishStatus

PUBLISH_STATUSES: frozenset[str] = frozenset(get_args(PublishStatus))


def transition(
    comic: Comic,
    new_status: PublishStatus,
    now: datetime,
    scheduled_at: datetime | None = None,
) -> Comic:
    """
    Return a NEW Comic with the updated publish status and timestamps.

    Any status may move to any other; ownership is checked by the caller.
    Publishing stamps published_at every time, including a re-publish.
    Scheduling leaves published_at untouched. Drafting clears both stamps.
    The coarse ``status`` field is never touched here.

    Raises ValueError for an unknown status or a schedule without a time.
    """
    if new_status not in PUBLISH_STATUSES:
        raise ValueError(f"Unknown publish status: {new_status}")

    updates: dict[str, Any] = {
        "publish_status": new_status,
        "updated_at": now,
    }

    if new_status == "published":
        updates["published_at"] = now

    if new_status == "scheduled":
        if scheduled_at is None:
            raise ValueError("Cannot schedule without a scheduled time")
        updates["scheduled_at"] = scheduled_at

    if new_status == "draft":
        updates["published_at"] = None
        updates["scheduled_at"] = None

    return comic.model_copy(update=updates)
