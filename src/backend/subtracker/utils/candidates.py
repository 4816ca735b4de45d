"""
Candidate dataclasses for entity extraction.

Each candidate is one value found in the normalized content, together with
the pattern that produced it and where it was found. Extractors return the
winning candidate, which doubles as audit evidence in extracted_data.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from subtracker.models.detection import BillingCycle


@dataclass(frozen=True)
class Candidate:
    """Base class for extraction candidates."""
    pattern_name: str
    match_span: tuple[int, int]  # (start, end) character positions
    raw_text: str


@dataclass(frozen=True)
class AmountCandidate(Candidate):
    """Amount with the currency implied by its adjacent symbol or code."""
    value: Decimal
    currency: str

    def evidence(self) -> Dict[str, Any]:
        return {'amountText': self.raw_text, 'amountPattern': self.pattern_name}


@dataclass(frozen=True)
class DateCandidate(Candidate):
    """
    Calendar date parsed from the content.

    source is 'trial_window' when found next to trial end/expiry wording,
    'future_date' when chosen as the earliest date after the message arrived.
    """
    value: date
    source: str = ''

    def evidence(self) -> Dict[str, Any]:
        return {'dateText': self.raw_text, 'dateSource': self.source}


@dataclass(frozen=True)
class BillingCycleCandidate(Candidate):
    """Billing cadence keyword."""
    value: BillingCycle

    def evidence(self) -> Dict[str, Any]:
        return {'billingCycleText': self.raw_text}
