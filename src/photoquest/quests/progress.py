"""Reward progress computation.

Locates the global point total between the nearest reward tier below it and
the first tier above it, and expresses the position as a percentage of that
segment. Crossing a threshold starts a new segment at 0%.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class TierLike(Protocol):
    points_required: int


def compute_reward_progress(total: int, tiers: Sequence[TierLike]) -> dict[str, Any]:
    """Compute the progress bar state for ``total`` points.

    Returns a dict with ``total``, ``percent`` (0-100), ``label`` (the
    "reached/target" text), and ``prev``/``next`` tiers (None when absent).
    """
    if not tiers:
        return {"total": total, "percent": 0.0, "label": str(total), "prev": None, "next": None}

    ordered = sorted(tiers, key=lambda t: t.points_required)

    prev = None
    next_tier = None
    for i, tier in enumerate(ordered):
        if total < tier.points_required:
            next_tier = tier
            prev = ordered[i - 1] if i > 0 else None
            break

    # Every threshold reached: the bar is full on the last tier
    if next_tier is None:
        prev = ordered[-1]
        next_tier = ordered[-1]

    start_points = prev.points_required if prev is not None else 0
    end_points = next_tier.points_required

    if end_points > start_points:
        percent = (total - start_points) / (end_points - start_points) * 100
    else:
        percent = 100.0
    percent = max(0.0, min(100.0, percent))

    return {
        "total": total,
        "percent": percent,
        "label": f"{min(total, end_points)}/{end_points}",
        "prev": prev,
        "next": next_tier,
    }
