"""
Money parsing and formatting helpers.

Handles:
- US: 1,234.56
- European: 1.234,56
- Symbols and codes: $15.99, 15.99 USD, €9.99, £5
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional
import re


CURRENCY_SYMBOLS = {
    '$': 'USD',
    '€': 'EUR',
    '£': 'GBP',
}

SYMBOL_FOR_CURRENCY = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
}


class MoneyFormat(Enum):
    """Money format locale hints."""
    US = "US"  # 1,234.56
    EUROPEAN = "EUROPEAN"  # 1.234,56
    AUTO = "AUTO"


def parse_money(amount_str: str, format_hint: Optional[MoneyFormat] = None) -> Optional[Decimal]:
    """
    Parse a money string into a Decimal.

    Args:
        amount_str: String containing an amount (e.g., "$1,234.56", "9.99 USD")
        format_hint: Optional locale hint (US, EUROPEAN, AUTO)

    Returns:
        Decimal amount or None if parsing fails

    Examples:
        >>> parse_money("$1,234.56")
        Decimal('1234.56')
        >>> parse_money("1.234,56", format_hint=MoneyFormat.EUROPEAN)
        Decimal('1234.56')
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    # Strip currency symbols and codes
    cleaned = re.sub(r'[$£€]\s*|[A-Z]{3}\s*', '', amount_str.strip(), flags=re.IGNORECASE)
    cleaned = cleaned.strip()
    if not cleaned:
        return None

    detected_format = format_hint or MoneyFormat.AUTO
    if detected_format == MoneyFormat.AUTO:
        detected_format = _detect_money_format(cleaned)

    if detected_format == MoneyFormat.EUROPEAN:
        cleaned = cleaned.replace('.', '').replace(' ', '').replace(',', '.')
    else:
        cleaned = cleaned.replace(',', '').replace(' ', '')

    try:
        return Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None


def _detect_money_format(amount_str: str) -> MoneyFormat:
    """European when the string ends in ",dd" or a dot precedes the last comma."""
    if re.search(r',\d{2}$', amount_str):
        return MoneyFormat.EUROPEAN
    if '.' in amount_str and ',' in amount_str:
        if amount_str.index('.') < amount_str.rindex(','):
            return MoneyFormat.EUROPEAN
    return MoneyFormat.US


def format_money(amount: Optional[Decimal], currency: str = 'USD') -> str:
    """
    Format Decimal amount as money string.

    Examples:
        >>> format_money(Decimal('1234.56'))
        '$1,234.56'
        >>> format_money(Decimal('9.99'), 'EUR')
        '€9.99'
    """
    if amount is None:
        return 'N/A'

    symbol = SYMBOL_FOR_CURRENCY.get(currency.upper(), currency.upper() + ' ')
    return f"{symbol}{amount:,.2f}"
