"""
Calendar date discovery in free text.

Regex patterns locate date-like spans; python-dateutil turns each span into a
date. Spans that dateutil rejects (e.g. "February 30") are skipped. Relative
phrases ("tomorrow", "in 3 days") are resolved against the message date.
"""

import logging
import re
from datetime import date, datetime
from typing import List, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from subtracker.utils.candidates import DateCandidate
from subtracker.utils.patterns import PatternSpec

logger = logging.getLogger(__name__)

_MONTH = (
    r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|'
    r'aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?'
)
_DAY = r'\d{1,2}(?:st|nd|rd|th)?'

_NUMBER_WORDS = {
    'a': 1, 'an': 1, 'one': 1, 'two': 2, 'three': 3, 'four': 4, 'five': 5,
    'six': 6, 'seven': 7, 'eight': 8, 'nine': 9, 'ten': 10,
    'eleven': 11, 'twelve': 12, 'fourteen': 14, 'thirty': 30,
}
_COUNT = r'(\d{1,3}|' + '|'.join(_NUMBER_WORDS) + r')'

DATE_PATTERNS = (
    PatternSpec(
        name='iso_date',
        pattern=r'\b\d{4}-\d{2}-\d{2}\b',
        example='2025-03-01',
    ),
    PatternSpec(
        name='numeric_date',
        pattern=r'\b\d{1,2}/\d{1,2}/\d{4}\b',
        example='03/01/2025',
        notes='Read as month/day/year',
    ),
    PatternSpec(
        name='month_day_year',
        pattern=rf'\b{_MONTH}\s+{_DAY},?\s+\d{{4}}\b',
        example='January 27, 2025',
    ),
    PatternSpec(
        name='day_month_year',
        pattern=rf'\b{_DAY}\s+(?:of\s+)?{_MONTH},?\s+\d{{4}}\b',
        example='1st March 2025',
    ),
    PatternSpec(
        name='month_day',
        pattern=rf'\b{_MONTH}\s+{_DAY}\b',
        example='March 1',
        notes='Yearless; the year nearest the message date is used',
    ),
    PatternSpec(
        name='day_month',
        pattern=rf'\b{_DAY}\s+(?:of\s+)?{_MONTH}(?!\w)',
        example='1 March',
        notes='Yearless; the year nearest the message date is used',
    ),
)

_YEARLESS = frozenset({'month_day', 'day_month'})

RELATIVE_DATE_PATTERNS = (
    PatternSpec(
        name='today',
        pattern=r'\btoday\b',
        example='Your trial ends today',
    ),
    PatternSpec(
        name='tomorrow',
        pattern=r'\btomorrow\b',
        example='Your trial expires tomorrow',
    ),
    PatternSpec(
        name='in_days',
        pattern=rf'\bin\s+{_COUNT}\s+days?\b',
        example='renews in 3 days',
    ),
    PatternSpec(
        name='in_weeks',
        pattern=rf'\bin\s+{_COUNT}\s+weeks?\b',
        example='ends in two weeks',
    ),
    PatternSpec(
        name='in_months',
        pattern=rf'\bin\s+{_COUNT}\s+months?\b',
        example='renews in 1 month',
    ),
)


def find_dates(text: str, reference: datetime) -> List[DateCandidate]:
    """
    Find every calendar date mentioned in text.

    Overlapping matches are resolved in favour of the earliest, then longest
    span, so "January 27, 2025" is never also read as "January 27".

    Args:
        text: Text to scan
        reference: The message date. Anchors relative phrases and picks the
            year for dates written without one

    Returns:
        Date candidates in order of appearance
    """
    spans = []
    for spec in DATE_PATTERNS + RELATIVE_DATE_PATTERNS:
        for match in spec.compiled.finditer(text):
            spans.append((match.start(), -(match.end() - match.start()), spec.name, match))
    spans.sort(key=lambda span: span[:3])

    anchor = reference.date() if isinstance(reference, datetime) else reference
    candidates: List[DateCandidate] = []
    last_end = -1
    for start, neg_length, pattern_name, match in spans:
        end = start - neg_length
        if start < last_end:
            continue
        if pattern_name in _RESOLVERS:
            parsed = _RESOLVERS[pattern_name](match, anchor)
        elif pattern_name in _YEARLESS:
            parsed = _nearest_year(match.group(0), anchor)
        else:
            parsed = parse_date(match.group(0), datetime(anchor.year, anchor.month, anchor.day))
        if parsed is None:
            continue
        candidates.append(DateCandidate(
            pattern_name=pattern_name,
            match_span=(start, end),
            raw_text=match.group(0),
            value=parsed,
        ))
        last_end = end
    return candidates


def parse_date(date_str: str, default: datetime) -> Optional[date]:
    """Parse one date span; None when dateutil cannot make sense of it."""
    cleaned = re.sub(r'(\d+)(?:st|nd|rd|th)\b', r'\1', date_str)
    cleaned = re.sub(r'\bof\b', ' ', cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r'(?<=[A-Za-z])\.', '', cleaned)
    try:
        return date_parser.parse(cleaned, default=default).date()
    except (ValueError, OverflowError, TypeError):
        logger.debug("Unparseable date span", extra={"date_text": date_str})
        return None


def _nearest_year(date_str: str, anchor: date) -> Optional[date]:
    """
    Resolve a month and day with no year to the occurrence closest to anchor.

    A December message that says "January 5" means the coming January.
    Ties go to the later year.
    """
    options = []
    for year in (anchor.year + 1, anchor.year, anchor.year - 1):
        # Day 1 keeps dateutil from rejecting Feb 29 in the default itself
        parsed = parse_date(date_str, datetime(year, 1, 1))
        if parsed is not None and parsed.year == year:
            options.append(parsed)
    if not options:
        return None
    return min(options, key=lambda value: abs((value - anchor).days))


def _count(word: str) -> int:
    word = word.lower()
    return int(word) if word.isdigit() else _NUMBER_WORDS[word]


_RESOLVERS = {
    'today': lambda match, anchor: anchor,
    'tomorrow': lambda match, anchor: anchor + relativedelta(days=1),
    'in_days': lambda match, anchor: anchor + relativedelta(days=_count(match.group(1))),
    'in_weeks': lambda match, anchor: anchor + relativedelta(weeks=_count(match.group(1))),
    'in_months': lambda match, anchor: anchor + relativedelta(months=_count(match.group(1))),
}
