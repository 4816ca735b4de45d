"""
Billing calendar helpers.
"""

from datetime import date
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from subtracker.config import settings
from subtracker.models.detection import BillingCycle

_CYCLE_STEPS = {
    BillingCycle.WEEKLY: relativedelta(weeks=1),
    BillingCycle.MONTHLY: relativedelta(months=1),
    BillingCycle.QUARTERLY: relativedelta(months=3),
    BillingCycle.SEMI_ANNUALLY: relativedelta(months=6),
    BillingCycle.ANNUALLY: relativedelta(years=1),
}


def calculate_renewal_date(start: date, cycle: Union[BillingCycle, str, None]) -> date:
    """
    Next renewal after start for a billing cycle.

    Month arithmetic clamps to the end of shorter months (Jan 31 + 1 month is
    Feb 28/29). Unknown or missing cycles are treated as monthly; "yearly" is
    accepted for annually.

    Examples:
        >>> calculate_renewal_date(date(2025, 1, 31), BillingCycle.MONTHLY)
        datetime.date(2025, 2, 28)
    """
    if cycle == 'yearly':
        cycle = BillingCycle.ANNUALLY
    try:
        step = _CYCLE_STEPS[BillingCycle(cycle)]
    except ValueError:
        step = _CYCLE_STEPS[BillingCycle.MONTHLY]
    return start + step


def is_trial_expiring_soon(
    trial_end: Optional[date],
    today: date,
    threshold_days: Optional[int] = None,
) -> bool:
    """
    True when the trial ends between 1 and threshold_days days after today.

    threshold_days defaults to TRIAL_EXPIRY_WARNING_DAYS.
    """
    if threshold_days is None:
        threshold_days = settings.TRIAL_EXPIRY_WARNING_DAYS
    if trial_end is None:
        return False
    days_left = (trial_end - today).days
    return 0 < days_left <= threshold_days
