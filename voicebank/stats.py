"""Sample collection progress summary for the dashboard."""

from __future__ import annotations

import math
from typing import Sequence

from .models.datatypes import Phrase, ProgressStats, Recording


_GOOD_QUALITY_THRESHOLD = 0.7
_PERCENTAGE_FLOOR_TOTAL = 100


def summarize_quality(recordings: Sequence[Recording]) -> str:
    """Return `Good` when most recordings are good, `Fair` otherwise."""

    if not recordings:
        return "No Data"
    good_count = sum(1 for recording in recordings if recording.quality == "good")
    if good_count / len(recordings) > _GOOD_QUALITY_THRESHOLD:
        return "Good"
    return "Fair"


def compute_progress(
    recordings: Sequence[Recording],
    phrases: Sequence[Phrase],
) -> ProgressStats:
    """Aggregate recording counts, duration, and quality into dashboard stats.

    The percentage is measured against at least 100 phrases so that a small
    phrase library never reports completion early.
    """

    recorded = len(recordings)
    total = len(phrases)
    ratio = recorded / max(total, _PERCENTAGE_FLOOR_TOTAL)
    return ProgressStats(
        recorded=recorded,
        total=total,
        duration=sum(recording.duration for recording in recordings),
        quality=summarize_quality(recordings),
        percentage=math.floor(ratio * 100 + 0.5),
    )
