"""
Entity extraction: amount, currency, billing cycle and the relevant date.

Every extractor returns the winning candidate or None. A miss is a normal
outcome; extractors never raise.
"""

import logging
import re
from collections import Counter
from datetime import datetime
from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from subtracker.models.detection import BillingCycle
from subtracker.utils.candidates import AmountCandidate, BillingCycleCandidate, DateCandidate
from subtracker.utils.dates import find_dates
from subtracker.utils.money import CURRENCY_SYMBOLS, MoneyFormat, parse_money
from subtracker.utils.patterns import PatternSpec

logger = logging.getLogger(__name__)

# Thousands separators are commas, decimals are exactly two digits.
# The lookarounds reject partial reads of other number styles ("9,99", "1.5").
_NUMBER = r'(?<![\d.,])(\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:\.\d{2})?)(?![.,]?\d)'

AMOUNT_PATTERNS: Tuple[Tuple[PatternSpec, str], ...] = (
    (PatternSpec(
        name='dollar_symbol',
        pattern=rf'(?<![A-Za-z])\$\s*{_NUMBER}',
        example='$15.99',
        notes='A letter before $ marks another dollar (CA$, A$), not USD',
    ), CURRENCY_SYMBOLS['$']),
    (PatternSpec(
        name='usd_code_prefix',
        pattern=rf'\bUSD\s*{_NUMBER}',
        example='USD 15.99',
    ), CURRENCY_SYMBOLS['$']),
    (PatternSpec(
        name='usd_code_suffix',
        pattern=rf'{_NUMBER}\s*USD\b',
        example='15.99 USD',
    ), CURRENCY_SYMBOLS['$']),
    (PatternSpec(
        name='euro_symbol',
        pattern=rf'€\s*{_NUMBER}',
        example='€9.99',
    ), CURRENCY_SYMBOLS['€']),
    (PatternSpec(
        name='eur_code_suffix',
        pattern=rf'{_NUMBER}\s*EUR\b',
        example='9.99 EUR',
    ), CURRENCY_SYMBOLS['€']),
    (PatternSpec(
        name='pound_symbol',
        pattern=rf'£\s*{_NUMBER}',
        example='£5.00',
    ), CURRENCY_SYMBOLS['£']),
    (PatternSpec(
        name='gbp_code_suffix',
        pattern=rf'{_NUMBER}\s*GBP\b',
        example='5.00 GBP',
    ), CURRENCY_SYMBOLS['£']),
)

# Checked in order; the first cycle with a match wins. semi_annual must stay
# ahead of annual, which also matches inside "semi-annually".
BILLING_CYCLE_PATTERNS: Tuple[Tuple[PatternSpec, BillingCycle], ...] = (
    (PatternSpec(
        name='monthly',
        pattern=(
            r'\bmonthly\b|\bper\s+month\b|\bevery\s+month\b|\d\s+a\s+month\b|'
            r'/\s*(?:mo|month)\b|\bmonth[-\s]to[-\s]month\b'
        ),
        example='$15.99/month',
        notes='Bare "month" is not enough ("this month", "last month")',
    ), BillingCycle.MONTHLY),
    (PatternSpec(
        name='quarterly',
        pattern=r'\bquarterly\b|\bper\s+quarter\b|\bevery\s+quarter\b|\bevery\s+(?:3|three)\s+months\b',
        example='billed quarterly',
    ), BillingCycle.QUARTERLY),
    (PatternSpec(
        name='semi_annual',
        pattern=(
            r'\bsemi[-\s]?annual(?:ly)?\b|\bbi[-\s]?annual(?:ly)?\b|'
            r'\bevery\s+(?:6|six)\s+months\b|\btwice\s+a\s+year\b|\bhalf[-\s]?year(?:ly)?\b'
        ),
        example='billed semi-annually',
    ), BillingCycle.SEMI_ANNUALLY),
    (PatternSpec(
        name='annual',
        pattern=(
            r'\bannual(?:ly)?\b|\byearly\b|\bper\s+(?:year|annum)\b|\bevery\s+year\b|'
            r'\d\s+a\s+year\b|/\s*(?:yr|year)\b'
        ),
        example='$99.99/year',
    ), BillingCycle.ANNUALLY),
    (PatternSpec(
        name='weekly',
        pattern=r'\bweekly\b|\bper\s+week\b|\bevery\s+week\b|\d\s+a\s+week\b|/\s*(?:wk|week)\b',
        example='$2.99/week',
    ), BillingCycle.WEEKLY),
)


def extract_amount(
    text: str,
    min_amount: Decimal = Decimal("0"),
    max_amount: Decimal = Decimal("10000"),
    default_currency: str = "USD",
) -> Optional[AmountCandidate]:
    """
    Extract the subscription price from the content.

    Every currency-marked number strictly between min_amount and max_amount is
    an occurrence. The most frequent value wins (smallest on ties); when every
    value appears once, the middle of the distinct sorted values wins, taking
    the upper one of an even-sized set. The result is always a value that
    appears in the text, never an average.

    Currency comes from the markers around the winning value. When those
    disagree, default_currency is used.

    Args:
        text: Normalized content
        min_amount: Exclusive lower bound
        max_amount: Exclusive upper bound
        default_currency: Currency for ambiguous markers

    Returns:
        AmountCandidate or None if no plausible amount is present
    """
    try:
        occurrences = _amount_occurrences(text, min_amount, max_amount)
        if not occurrences:
            return None

        counts = Counter(candidate.value for candidate in occurrences)
        top = max(counts.values())
        if top > 1:
            winner = min(value for value, count in counts.items() if count == top)
        else:
            distinct = sorted(counts)
            winner = distinct[len(distinct) // 2]

        matching = [candidate for candidate in occurrences if candidate.value == winner]
        currencies = {candidate.currency for candidate in matching}
        currency = currencies.pop() if len(currencies) == 1 else default_currency

        first = matching[0]
        logger.debug(
            "Amount selected",
            extra={"amount": str(first.value), "currency": currency, "occurrences": len(occurrences)},
        )
        return AmountCandidate(
            pattern_name=first.pattern_name,
            match_span=first.match_span,
            raw_text=first.raw_text,
            value=first.value,
            currency=currency,
        )
    except (re.error, ArithmeticError, ValueError):
        logger.warning("Error extracting amount", exc_info=True)
        return None


def _amount_occurrences(
    text: str,
    min_amount: Decimal,
    max_amount: Decimal,
) -> List[AmountCandidate]:
    """One candidate per distinct number span, in order of appearance."""
    by_span: Dict[Tuple[int, int], AmountCandidate] = {}
    for spec, currency in AMOUNT_PATTERNS:
        for match in spec.compiled.finditer(text):
            span = match.span(1)
            if span in by_span:
                continue
            value = parse_money(match.group(1), format_hint=MoneyFormat.US)
            if value is None or not (min_amount < value < max_amount):
                continue
            by_span[span] = AmountCandidate(
                pattern_name=spec.name,
                match_span=span,
                raw_text=match.group(0),
                value=value,
                currency=currency,
            )
    return [by_span[span] for span in sorted(by_span)]


def extract_billing_cycle(text: str) -> Optional[BillingCycleCandidate]:
    """
    Detect the billing cadence.

    Args:
        text: Normalized content

    Returns:
        BillingCycleCandidate for the first cycle whose keywords match, or None
    """
    for spec, cycle in BILLING_CYCLE_PATTERNS:
        match = spec.compiled.search(text)
        if match:
            return BillingCycleCandidate(
                pattern_name=spec.name,
                match_span=match.span(),
                raw_text=match.group(0),
                value=cycle,
            )
    return None


@lru_cache(maxsize=8)
def _trial_window_pattern(window_chars: int) -> re.Pattern:
    return re.compile(
        rf'\btrial\b.{{0,{window_chars}}}\b(?:end|expir)\w*.{{0,{window_chars}}}',
        re.IGNORECASE,
    )


def extract_date(
    text: str,
    received_at: datetime,
    window_chars: int = 100,
) -> Optional[DateCandidate]:
    """
    Pick the one date a detection should carry.

    1. The first date inside the trial end/expiry window
       ("trial ... ends ... March 1, 2025"), source 'trial_window'.
    2. Otherwise the earliest date strictly after the day the message was
       received, source 'future_date'. Past dates (order dates, signup dates)
       are ignored.

    Dates written without a year take the year that puts them closest to
    received_at. Relative phrases ("tomorrow", "in 3 days") count from the
    day received_at falls on.

    Args:
        text: Normalized content
        received_at: Message receive time
        window_chars: Characters allowed on either side of the end/expiry word

    Returns:
        DateCandidate or None
    """
    window = _trial_window_pattern(window_chars).search(text)
    if window:
        in_window = find_dates(window.group(0), received_at)
        if in_window:
            first = in_window[0]
            offset = window.start()
            return DateCandidate(
                pattern_name=first.pattern_name,
                match_span=(first.match_span[0] + offset, first.match_span[1] + offset),
                raw_text=first.raw_text,
                value=first.value,
                source='trial_window',
            )

    today = received_at.date()
    future = [candidate for candidate in find_dates(text, received_at) if candidate.value > today]
    if not future:
        return None

    earliest = min(future, key=lambda candidate: (candidate.value, candidate.match_span))
    return DateCandidate(
        pattern_name=earliest.pattern_name,
        match_span=earliest.match_span,
        raw_text=earliest.raw_text,
        value=earliest.value,
        source='future_date',
    )
