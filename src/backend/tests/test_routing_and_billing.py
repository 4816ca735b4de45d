"""
Tests for review routing and billing calendar helpers.
"""

from datetime import date

import pytest

from subtracker.config import Settings
from subtracker.models.detection import BillingCycle, DetectedSubscription, DetectionType
from subtracker.services.routing import ReviewStatus, review_status
from subtracker.utils import billing
from subtracker.utils.billing import calculate_renewal_date, is_trial_expiring_soon


def _detection(confidence):
    return DetectedSubscription(
        service_name="Netflix",
        detection_type=DetectionType.BILLING_CONFIRMATION,
        confidence=confidence,
    )


class TestReviewStatus:

    def test_above_threshold_auto_added(self):
        assert review_status(_detection(0.9)) == ReviewStatus.AUTO_ADDED

    def test_threshold_itself_is_pending(self):
        assert review_status(_detection(0.8)) == ReviewStatus.PENDING

    def test_custom_threshold(self):
        assert review_status(_detection(0.6), threshold=0.5) == ReviewStatus.AUTO_ADDED
        assert review_status(_detection(1.0), threshold=1.0) == ReviewStatus.PENDING

    def test_status_values(self):
        assert ReviewStatus.AUTO_ADDED.value == "auto_added"
        assert ReviewStatus.PENDING.value == "pending"


class TestCalculateRenewalDate:

    @pytest.mark.parametrize("cycle,expected", [
        (BillingCycle.WEEKLY, date(2025, 1, 22)),
        (BillingCycle.MONTHLY, date(2025, 2, 15)),
        (BillingCycle.QUARTERLY, date(2025, 4, 15)),
        (BillingCycle.SEMI_ANNUALLY, date(2025, 7, 15)),
        (BillingCycle.ANNUALLY, date(2026, 1, 15)),
        ("yearly", date(2026, 1, 15)),
        ("monthly", date(2025, 2, 15)),
        (None, date(2025, 2, 15)),
        ("fortnightly", date(2025, 2, 15)),
    ])
    def test_cycles(self, cycle, expected):
        assert calculate_renewal_date(date(2025, 1, 15), cycle) == expected

    def test_month_end_clamped(self):
        assert calculate_renewal_date(date(2024, 1, 31), BillingCycle.MONTHLY) == date(2024, 2, 29)


class TestTrialExpiringSoon:
    TODAY = date(2025, 3, 1)

    @pytest.mark.parametrize("trial_end,expected", [
        (date(2025, 3, 2), True),
        (date(2025, 3, 8), True),
        (date(2025, 3, 9), False),
        (date(2025, 3, 1), False),
        (date(2025, 2, 20), False),
        (None, False),
    ])
    def test_window(self, trial_end, expected):
        assert is_trial_expiring_soon(trial_end, self.TODAY) is expected

    def test_custom_threshold(self):
        assert is_trial_expiring_soon(date(2025, 3, 11), self.TODAY, threshold_days=10)

    def test_threshold_from_settings(self, monkeypatch):
        monkeypatch.setattr(billing, "settings", Settings(TRIAL_EXPIRY_WARNING_DAYS=10))
        assert is_trial_expiring_soon(date(2025, 3, 11), self.TODAY)
        assert not is_trial_expiring_soon(date(2025, 3, 12), self.TODAY)
