"""Classify how a category's assigned amount lines up with its target."""

from __future__ import annotations

from src.models.results import AlignmentStatus

DEFAULT_TOLERANCE_MILLIUNITS = 1000


def classify_alignment(
    assigned: int,
    target: int | None,
    tolerance_milliunits: int = DEFAULT_TOLERANCE_MILLIUNITS,
) -> AlignmentStatus:
    """Four-state classification of ``assigned - target``.

    A missing or zero target is ``NO_TARGET``. Anything within
    *tolerance_milliunits* of the target (inclusive) is ``ON_TARGET``.
    """
    if target is None or target == 0:
        return AlignmentStatus.NO_TARGET

    variance = assigned - target
    if abs(variance) <= tolerance_milliunits:
        return AlignmentStatus.ON_TARGET
    return AlignmentStatus.OVER_TARGET if variance > 0 else AlignmentStatus.UNDER_TARGET


def target_percentage(assigned: int, target: int | None) -> float | None:
    """``assigned / target * 100``, or ``None`` when there is nothing to divide by."""
    if not target:
        return None
    return assigned / target * 100


def variance_percentage(variance: int, target: int | None) -> float | None:
    if not target:
        return None
    return variance / target * 100
