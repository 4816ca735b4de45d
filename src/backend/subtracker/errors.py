"""
Exceptions raised by the detection engine.

Only InvalidMessageError ever reaches the caller. Unresolved services and
extraction misses are soft outcomes reported through DetectionOutcome.
"""


class SubTrackerError(Exception):
    """Base class for engine errors."""


class InvalidMessageError(SubTrackerError):
    """Message has no usable sender, subject or body."""
