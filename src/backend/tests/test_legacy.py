"""
Tests for the single-result adapter.
"""

from decimal import Decimal

import pytest

from subtracker.errors import InvalidMessageError
from subtracker.models.detection import DetectedSubscription, DetectionType
from subtracker.models.email import EmailMessage
from subtracker.services.legacy import (
    normalize_detection_type,
    parse_multiple_emails,
    parse_subscription_email,
    select_best,
)


def _detection(detection_type, confidence):
    return DetectedSubscription(
        service_name="Acme",
        detection_type=detection_type,
        confidence=confidence,
    )


class TestNormalizeDetectionType:

    @pytest.mark.parametrize("name,expected", [
        ("trialStart", DetectionType.TRIAL_SIGNUP),
        ("trialEnd", DetectionType.TRIAL_REMINDER),
        ("billing", DetectionType.BILLING_CONFIRMATION),
        ("priceChange", DetectionType.PRICE_CHANGE),
        ("subscription_start", DetectionType.SUBSCRIPTION_START),
        ("TRIAL_REMINDER", DetectionType.TRIAL_REMINDER),
        ("cancellation", None),
        ("unknown", None),
        ("bogus", None),
        (None, None),
    ])
    def test_mapping(self, name, expected):
        assert normalize_detection_type(name) == expected


class TestSelectBest:

    def test_highest_confidence(self):
        best = select_best([
            _detection(DetectionType.BILLING_CONFIRMATION, 0.7),
            _detection(DetectionType.SUBSCRIPTION_START, 0.9),
        ])
        assert best.detection_type == DetectionType.SUBSCRIPTION_START

    def test_tie_goes_to_earlier_type(self):
        best = select_best([
            _detection(DetectionType.SUBSCRIPTION_START, 0.8),
            _detection(DetectionType.BILLING_CONFIRMATION, 0.8),
        ])
        assert best.detection_type == DetectionType.BILLING_CONFIRMATION

    def test_empty(self):
        assert select_best([]) is None


class TestParseSubscriptionEmail:

    def test_best_detection(self, netflix_renewal):
        best = parse_subscription_email(EmailMessage.from_payload(netflix_renewal))
        assert best.service_name == "Netflix"
        assert best.cost == Decimal("15.99")

    def test_nothing_detected(self, relay_receipt):
        assert parse_subscription_email(EmailMessage.from_payload(relay_receipt)) is None

    def test_invalid_message(self, make_message):
        with pytest.raises(InvalidMessageError):
            parse_subscription_email(make_message(subject=""))


class TestParseMultipleEmails:

    def test_envelopes(self, netflix_renewal, promo_spam):
        bad = {"subject": "missing sender"}
        results = parse_multiple_emails([netflix_renewal, promo_spam, bad])

        assert results[0]["success"] is True
        assert results[0]["data"]["serviceName"] == "Netflix"
        assert results[0]["data"]["detectionType"] == "billing_confirmation"

        assert results[1] == {"success": True, "data": None}

        assert results[2]["success"] is False
        assert results[2]["email"] is bad
        assert results[2]["error"]
