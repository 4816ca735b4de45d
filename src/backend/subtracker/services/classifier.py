"""
Pattern classifier: which detection types does a message look like?
"""

from dataclasses import dataclass
from typing import List, Tuple

from subtracker.models.detection import DetectionType
from subtracker.utils.patterns import PatternTables


@dataclass(frozen=True)
class Classification:
    """A candidate detection type with the evidence that produced it."""
    detection_type: DetectionType
    pattern_names: Tuple[str, ...]
    snippet: str  # text matched by the first pattern

    @property
    def hit_count(self) -> int:
        return len(self.pattern_names)


def classify(text: str, tables: PatternTables) -> List[Classification]:
    """
    Test every pattern set against the normalized content.

    A message can be a candidate for several types at once (a renewal can
    read as both billing confirmation and subscription start); all of them
    are returned, in DetectionType order.

    Args:
        text: Normalized content
        tables: Pattern tables

    Returns:
        One Classification per type with at least one matching pattern
    """
    candidates: List[Classification] = []
    for detection_type in DetectionType:
        hits = tables.pattern_set(detection_type).search(text)
        if not hits:
            continue
        candidates.append(Classification(
            detection_type=detection_type,
            pattern_names=tuple(spec.name for spec, _ in hits),
            snippet=hits[0][1].group(0),
        ))
    return candidates
