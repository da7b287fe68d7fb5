"""Even spread of briefs across a publishing horizon."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from briefplanner.schemas.brief import ContentBrief


def schedule_offsets(count: int, horizon: timedelta) -> list[timedelta]:
    """Offsets `i * (horizon / count)` for `i` in `range(count)`."""
    if count <= 0:
        return []
    step = horizon / count
    return [step * index for index in range(count)]


def schedule_briefs(
    briefs: Sequence[ContentBrief],
    *,
    now: datetime | None = None,
    horizon_days: int = 7,
) -> list[ContentBrief]:
    """Assign `scheduled_for` and `sort_index` to briefs in their final order.

    Deterministic for a given `now` and brief count.
    """
    start = now or datetime.now(timezone.utc)
    offsets = schedule_offsets(len(briefs), timedelta(days=horizon_days))
    return [
        brief.model_copy(update={"scheduled_for": start + offset, "sort_index": position})
        for position, (brief, offset) in enumerate(zip(briefs, offsets))
    ]
