"""
Shared fixtures for the detection engine tests.
"""

from datetime import datetime

import pytest

from subtracker.models.email import EmailMessage
from subtracker.services.detector import SubscriptionDetector


NETFLIX_RENEWAL = {
    "from": "billing@netflix.com",
    "to": "me@example.com",
    "subject": "Your Netflix subscription has been renewed",
    "bodyText": (
        "Your Netflix subscription has been renewed for $15.99/month. "
        "Next billing date is January 27, 2025."
    ),
    "receivedAt": "2024-12-27T09:00:00",
}

ACME_TRIAL_REMINDER = {
    "from": "trial@acmeapp.io",
    "to": "me@example.com",
    "subject": "Your free trial ends in 3 days",
    "bodyText": "Your trial ends on March 1, 2025. After that you'll be billed $9.99 monthly.",
    "receivedAt": "2025-02-26T12:00:00",
}

PROMO_SPAM = {
    "from": "promo@dealsnow.biz",
    "to": "me@example.com",
    "subject": "Congratulations you won a free trial!! Act now!",
    "receivedAt": "2025-01-10T08:00:00",
}

RELAY_RECEIPT = {
    "from": "unknown@privaterelay.appleid.com",
    "to": "me@example.com",
    "subject": "Receipt",
    "bodyText": "Thanks for your payment.",
    "receivedAt": "2025-01-10T08:00:00",
}


@pytest.fixture
def detector():
    return SubscriptionDetector()


@pytest.fixture
def make_message():
    """Build an EmailMessage from keyword overrides on a neutral base."""
    def _make(**overrides) -> EmailMessage:
        fields = {
            "sender": "billing@netflix.com",
            "to": "me@example.com",
            "subject": "",
            "body_text": None,
            "body_html": None,
            "received_at": datetime(2025, 1, 10, 8, 0, 0),
        }
        fields.update(overrides)
        return EmailMessage(**fields)
    return _make


@pytest.fixture
def netflix_renewal():
    return dict(NETFLIX_RENEWAL)


@pytest.fixture
def acme_trial_reminder():
    return dict(ACME_TRIAL_REMINDER)


@pytest.fixture
def promo_spam():
    return dict(PROMO_SPAM)


@pytest.fixture
def relay_receipt():
    return dict(RELAY_RECEIPT)
