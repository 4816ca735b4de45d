"""
Review routing for detections.

The engine only scores. Whether a detection is accepted automatically or
queued for a human is the caller's decision; this module holds the default
rule callers share.
"""

from enum import Enum
from typing import Optional

from subtracker.config import settings
from subtracker.models.detection import DetectedSubscription


class ReviewStatus(str, Enum):
    AUTO_ADDED = "auto_added"
    PENDING = "pending"


def review_status(
    detection: DetectedSubscription,
    threshold: Optional[float] = None,
) -> ReviewStatus:
    """
    Route a detection to auto-accept or manual review.

    Args:
        detection: Scored detection
        threshold: Confidence that must be exceeded (default AUTO_ADD_THRESHOLD)

    Returns:
        AUTO_ADDED when confidence is strictly above the threshold, else PENDING
    """
    if threshold is None:
        threshold = settings.AUTO_ADD_THRESHOLD
    if detection.confidence > threshold:
        return ReviewStatus.AUTO_ADDED
    return ReviewStatus.PENDING
