"""
Confidence scoring for detections.

Each scorer returns a score from 0.0 to 1.0 built purely from presence
signals, so adding a signal can only raise the score.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = ['ScoringSignals', 'Scorer', 'AdditiveScorer', 'PatternDensityScorer']


@dataclass(frozen=True)
class ScoringSignals:
    """What the pipeline found for one candidate detection type."""
    known_type: bool = True
    service_resolved: bool = False
    date_found: bool = False
    amount_found: bool = False
    pattern_hits: int = 0
    billing_cycle_found: bool = False
    date_mentioned: bool = False  # a date token appears anywhere in the content


def _clamp(score: float) -> float:
    return round(max(0.0, min(1.0, score)), 2)


class Scorer(ABC):
    """Turns scoring signals into a confidence in [0, 1]."""

    name: str = ''

    @abstractmethod
    def score(self, signals: ScoringSignals) -> float:
        ...


class AdditiveScorer(Scorer):
    """
    Default scorer.

    Weights (sum to 1.0):
    - Known detection type: 0.3
    - Service name resolved: 0.2
    - Date extracted: 0.2
    - Amount extracted: 0.2
    - Two or more patterns of the type matched: 0.1
    """

    name = 'additive'

    def score(self, signals: ScoringSignals) -> float:
        score = 0.0
        if signals.known_type:
            score += 0.3
        if signals.service_resolved:
            score += 0.2
        if signals.date_found:
            score += 0.2
        if signals.amount_found:
            score += 0.2
        if signals.pattern_hits >= 2:
            score += 0.1
        return _clamp(score)


class PatternDensityScorer(Scorer):
    """
    Older class-level formula, kept for callers that depend on its numbers.

    Starts at 0.5 and adds 0.1 per matching pattern, 0.2 for an amount,
    0.1 for a billing cycle and 0.1 when the content mentions a date.
    Saturates at 1.0 quickly, so it separates weak detections poorly.
    """

    name = 'pattern_density'

    def score(self, signals: ScoringSignals) -> float:
        score = 0.5
        score += 0.1 * max(0, signals.pattern_hits)
        if signals.amount_found:
            score += 0.2
        if signals.billing_cycle_found:
            score += 0.1
        if signals.date_mentioned:
            score += 0.1
        return _clamp(score)
