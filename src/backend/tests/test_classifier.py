"""
Tests for pattern classification and the pattern tables.
"""

import pytest

from subtracker.models.detection import DetectionType
from subtracker.services.classifier import classify
from subtracker.utils.patterns import DEFAULT_TABLES, PatternSet, PatternSpec, PatternTables


NETFLIX_TEXT = (
    "Your Netflix subscription has been renewed "
    "Your Netflix subscription has been renewed for $15.99/month. "
    "Next billing date is January 27, 2025."
)

ACTIVATION_TEXT = (
    "Your subscription has been activated. Payment successful, "
    "next billing date March 5."
)

PRICE_TEXT = "Heads up: the price of your plan is changing. See our new pricing page."


class TestClassify:

    def test_renewal_is_billing_confirmation(self):
        candidates = classify(NETFLIX_TEXT, DEFAULT_TABLES)
        assert [c.detection_type for c in candidates] == [DetectionType.BILLING_CONFIRMATION]
        assert candidates[0].pattern_names == (
            'subscription_renewed', 'next_billing', 'billing_date_cycle',
        )
        assert candidates[0].hit_count == 3
        assert "renewed" in candidates[0].snippet

    def test_multiple_types_in_enum_order(self):
        candidates = classify(ACTIVATION_TEXT, DEFAULT_TABLES)
        assert [c.detection_type for c in candidates] == [
            DetectionType.BILLING_CONFIRMATION,
            DetectionType.SUBSCRIPTION_START,
        ]

    def test_trial_reminder(self):
        candidates = classify("Your free trial ends in 3 days", DEFAULT_TABLES)
        assert [c.detection_type for c in candidates] == [DetectionType.TRIAL_REMINDER]

    def test_trial_signup(self):
        candidates = classify("Welcome to your free trial of Acme", DEFAULT_TABLES)
        assert [c.detection_type for c in candidates] == [DetectionType.TRIAL_SIGNUP]

    def test_price_change(self):
        candidates = classify(PRICE_TEXT, DEFAULT_TABLES)
        assert [c.detection_type for c in candidates] == [DetectionType.PRICE_CHANGE]
        assert candidates[0].pattern_names == ('price_change', 'new_pricing')

    def test_case_insensitive(self):
        assert classify("PAYMENT SUCCESSFUL", DEFAULT_TABLES)

    def test_unrelated_mail(self):
        assert classify("Lunch on Friday?", DEFAULT_TABLES) == []


class TestPatternTables:
    """Table construction guards."""

    def test_every_type_has_patterns(self):
        for detection_type in DetectionType:
            pattern_set = DEFAULT_TABLES.pattern_set(detection_type)
            assert pattern_set.detection_type == detection_type
            assert pattern_set.patterns

    def test_pattern_examples_match(self):
        for detection_type in DetectionType:
            for spec in DEFAULT_TABLES.pattern_set(detection_type).patterns:
                assert spec.compiled.search(spec.example), spec.name

    def test_missing_type_rejected(self):
        patterns = dict(DEFAULT_TABLES.detection_patterns)
        del patterns[DetectionType.PRICE_CHANGE]
        with pytest.raises(ValueError):
            PatternTables(detection_patterns=patterns, spam_patterns=(), disposable_domains=())

    def test_mistagged_set_rejected(self):
        patterns = dict(DEFAULT_TABLES.detection_patterns)
        patterns[DetectionType.PRICE_CHANGE] = PatternSet(DetectionType.TRIAL_SIGNUP, (
            PatternSpec(name='x', pattern=r'x', example='x'),
        ))
        with pytest.raises(ValueError):
            PatternTables(detection_patterns=patterns, spam_patterns=(), disposable_domains=())

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_TABLES.detection_patterns[DetectionType.PRICE_CHANGE] = None
