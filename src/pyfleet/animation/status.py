"""State-of-charge classification."""

from __future__ import annotations

from pyfleet._constants import HIGH_STATUS_THRESHOLD, MEDIUM_STATUS_THRESHOLD
from pyfleet.models.animation import StatusTier


def classify_status(status: float) -> StatusTier:
    """Map a state-of-charge percentage to its display tier.

    ``HIGH`` above 90, ``MEDIUM`` above 70 up to and including 90, ``LOW``
    otherwise.  Any float classifies, including values outside 0-100;
    NaN is ``LOW``.
    """
    if status > HIGH_STATUS_THRESHOLD:
        return StatusTier.HIGH
    if status > MEDIUM_STATUS_THRESHOLD:
        return StatusTier.MEDIUM
    return StatusTier.LOW
