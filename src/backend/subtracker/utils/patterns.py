"""
Static pattern tables for classification and noise filtering.

Tables are built once at import time and never mutated. Pass a different
PatternTables instance into the detector to substitute vocabularies in tests.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from subtracker.models.detection import DetectionType


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


@dataclass(frozen=True)
class PatternSet:
    """Ordered patterns that all indicate one detection type."""
    detection_type: DetectionType
    patterns: Tuple[PatternSpec, ...]

    def search(self, text: str) -> List[Tuple[PatternSpec, re.Match]]:
        """Return (spec, first match) for every pattern that matches, in table order."""
        hits = []
        for spec in self.patterns:
            match = spec.compiled.search(text)
            if match:
                hits.append((spec, match))
        return hits


@dataclass(frozen=True)
class PatternTables:
    """Immutable bundle of every pattern table the engine consults."""
    detection_patterns: Mapping[DetectionType, PatternSet]
    spam_patterns: Tuple[PatternSpec, ...]
    disposable_domains: Tuple[str, ...]

    def __post_init__(self):
        missing = [t.value for t in DetectionType if t not in self.detection_patterns]
        if missing:
            raise ValueError(f"No pattern set for detection types: {', '.join(missing)}")
        for detection_type, pattern_set in self.detection_patterns.items():
            if pattern_set.detection_type != detection_type:
                raise ValueError(
                    f"Pattern set for {detection_type.value} is tagged {pattern_set.detection_type.value}"
                )
        object.__setattr__(
            self, 'detection_patterns', MappingProxyType(dict(self.detection_patterns))
        )

    def pattern_set(self, detection_type: DetectionType) -> PatternSet:
        return self.detection_patterns[detection_type]


TRIAL_SIGNUP_PATTERNS = PatternSet(DetectionType.TRIAL_SIGNUP, (
    PatternSpec(
        name='welcome_trial',
        pattern=r'\bwelcome\b.{0,40}\btrial\b',
        example='Welcome to your free trial',
    ),
    PatternSpec(
        name='trial_started',
        pattern=r'\btrial\b.{0,40}\b(?:started|starts|begins|activated|is\s+live)\b',
        example='Your trial has started',
    ),
    PatternSpec(
        name='free_trial_activated',
        pattern=r'\bfree\b.{0,20}\btrial\b.{0,40}\bactivated\b',
        example='Free trial activated',
    ),
    PatternSpec(
        name='trial_period_begins',
        pattern=r'\btrial\s+period\b.{0,40}\bbegins?\b',
        example='Your trial period begins today',
    ),
    PatternSpec(
        name='start_your_trial',
        pattern=r'\bstart\b.{0,20}\byour\b.{0,20}\btrial\b',
        example='Start your 14-day trial',
    ),
    PatternSpec(
        name='trial_subscription_created',
        pattern=r'\btrial\b.{0,40}\bsubscription\b.{0,40}\bcreated\b',
        example='Trial subscription created',
    ),
    PatternSpec(
        name='days_free',
        pattern=r'\b\d+[-\s]*days?\b.{0,20}\bfree\b',
        example='30 days free',
        notes='Also matches "14-day free trial"',
    ),
))

TRIAL_REMINDER_PATTERNS = PatternSet(DetectionType.TRIAL_REMINDER, (
    PatternSpec(
        name='trial_ending',
        pattern=r'\btrial\b.{0,40}\bend(?:s|ing)\b',
        example='Your free trial ends in 3 days',
    ),
    PatternSpec(
        name='trial_expiring',
        pattern=r'\btrial\b.{0,40}\bexpir(?:es|ing)\b',
        example='Your trial expires tomorrow',
    ),
    PatternSpec(
        name='days_left_in_trial',
        pattern=r'\b\d+\b.{0,20}\bdays?\b.{0,20}\bleft\b.{0,20}\btrial\b',
        example='3 days left in your trial',
    ),
    PatternSpec(
        name='trial_will_end',
        pattern=r'\btrial\b.{0,40}\bwill\b.{0,20}\b(?:end|expire)\b',
        example='Your trial will end on March 1',
    ),
    PatternSpec(
        name='subscription_will_begin',
        pattern=r'\bsubscription\b.{0,40}\bwill\b.{0,20}\bbegin\b',
        example='Your paid subscription will begin on March 1',
    ),
    PatternSpec(
        name='trial_period_ending',
        pattern=r'\btrial\s+period\b.{0,40}\bending\b',
        example='Your trial period is ending',
    ),
))

BILLING_CONFIRMATION_PATTERNS = PatternSet(DetectionType.BILLING_CONFIRMATION, (
    PatternSpec(
        name='payment_successful',
        pattern=r'\bpayment\b.{0,40}\bsuccessful\b',
        example='Your payment was successful',
    ),
    PatternSpec(
        name='subscription_renewed',
        pattern=r'\bsubscription\b.{0,40}\brenewed\b',
        example='Your Netflix subscription has been renewed',
    ),
    PatternSpec(
        name='billing_confirmation',
        pattern=r'\bbilling\b.{0,20}\bconfirm(?:ation|ed)\b',
        example='Billing confirmation',
    ),
    PatternSpec(
        name='receipt_for_subscription',
        pattern=r'\breceipt\b.{0,40}\bfor\b.{0,40}\bsubscription\b',
        example='Your receipt for your Spotify subscription',
    ),
    PatternSpec(
        name='charged_for_subscription',
        pattern=r'\bcharged\b.{0,40}\bfor\b.{0,40}\bsubscription\b',
        example='You were charged $9.99 for your subscription',
    ),
    PatternSpec(
        name='payment_processed',
        pattern=r'\bpayment\b.{0,40}\bprocessed\b',
        example='Your payment has been processed',
    ),
    PatternSpec(
        name='invoice_for_subscription',
        pattern=r'\binvoice\b.{0,40}\bfor\b.{0,40}\bsubscription\b',
        example='Invoice for your subscription',
    ),
    PatternSpec(
        name='next_billing',
        pattern=r'\bnext\b.{0,20}\b(?:billing|payment|charge|bill)\b',
        example='Next billing date is January 27, 2025',
    ),
    PatternSpec(
        name='billing_date_cycle',
        pattern=r'\bbill(?:ing)?\b.{0,20}\b(?:date|cycle|period)\b',
        example='Your billing cycle',
    ),
    PatternSpec(
        name='auto_renew',
        pattern=r'\bauto[-\s]?renew(?:s|ed|al)?\b',
        example='Your plan will auto-renew',
    ),
    PatternSpec(
        name='recurring_payment',
        pattern=r'\brecurring\b.{0,20}\b(?:payment|charge)\b',
        example='Recurring payment received',
    ),
))

SUBSCRIPTION_START_PATTERNS = PatternSet(DetectionType.SUBSCRIPTION_START, (
    PatternSpec(
        name='subscription_activated',
        pattern=r'\bsubscription\b.{0,40}\bactivated\b',
        example='Your subscription is activated',
    ),
    PatternSpec(
        name='welcome_subscriber',
        pattern=r'\bwelcome\b.{0,40}\bsubscriber\b',
        example='Welcome, new subscriber!',
    ),
    PatternSpec(
        name='subscription_started',
        pattern=r'\bsubscription\b.{0,40}\b(?:started|has\s+begun)\b',
        example='Your subscription has started',
    ),
    PatternSpec(
        name='membership_activated',
        pattern=r'\bmembership\b.{0,40}\bactivated\b',
        example='Your Prime membership is activated',
    ),
    PatternSpec(
        name='account_upgraded',
        pattern=r'\baccount\b.{0,40}\bupgraded\b',
        example='Your account has been upgraded',
    ),
    PatternSpec(
        name='premium_activated',
        pattern=r'\bpremium\b.{0,40}\bactivated\b',
        example='Premium activated',
    ),
    PatternSpec(
        name='thanks_for_subscribing',
        pattern=r'\bthank(?:s|\s+you)\s+for\s+subscribing\b',
        example='Thank you for subscribing to Notion Plus',
    ),
))

PRICE_CHANGE_PATTERNS = PatternSet(DetectionType.PRICE_CHANGE, (
    PatternSpec(
        name='price_change',
        pattern=r'\bprice\b.{0,20}\b(?:chang|increas|updat)(?:e|es|ed|ing)\b',
        example='An update on your price change',
    ),
    PatternSpec(
        name='pricing_update',
        pattern=r'\bpricing\b.{0,20}\bupdat(?:e|es|ed)\b',
        example='Pricing update',
    ),
    PatternSpec(
        name='subscription_cost_change',
        pattern=r'\bsubscription\b.{0,20}\bcost\b.{0,20}\bchang(?:e|es|ed|ing)\b',
        example='Your subscription cost is changing',
    ),
    PatternSpec(
        name='new_pricing',
        pattern=r'\bnew\b.{0,20}\bpricing\b',
        example='Our new pricing takes effect',
    ),
    PatternSpec(
        name='rate_increase',
        pattern=r'\brate\b.{0,20}\b(?:increas|chang)(?:e|es|ed|ing)\b',
        example='Rate increase notice',
    ),
    PatternSpec(
        name='billing_amount_change',
        pattern=r'\bbilling\b.{0,20}\bamount\b.{0,20}\b(?:chang|updat)(?:e|es|ed|ing)\b',
        example='Your billing amount will change',
    ),
))

SPAM_PATTERNS = (
    PatternSpec(
        name='unsubscribe_here',
        pattern=r'\bunsubscribe\b.{0,20}\bhere\b',
        example='Unsubscribe here',
    ),
    PatternSpec(
        name='click_here_now',
        pattern=r'\bclick\b.{0,20}\bhere\b.{0,20}\bnow\b',
        example='Click here now',
    ),
    PatternSpec(
        name='limited_time_offer',
        pattern=r'\blimited\b.{0,20}\btime\b.{0,20}\boffer\b',
        example='Limited time offer',
    ),
    PatternSpec(
        name='act_now',
        pattern=r'\bact\s+now\b',
        example='Act now!',
    ),
    PatternSpec(
        name='congratulations_you_won',
        pattern=r'\bcongratulations\b.{0,40}\byou\b.{0,20}\bwon\b',
        example='Congratulations you won a free trial',
    ),
    PatternSpec(
        name='claim_your_prize',
        pattern=r'\bclaim\b.{0,20}\byour\b.{0,20}\bprize\b',
        example='Claim your prize',
    ),
)

DISPOSABLE_DOMAINS = (
    'tempmail', 'guerrillamail', '10minutemail', 'mailinator', 'yopmail',
    'trashmail', 'throwawaymail', 'sharklasers', 'dispostable',
)

DEFAULT_TABLES = PatternTables(
    detection_patterns={
        DetectionType.TRIAL_SIGNUP: TRIAL_SIGNUP_PATTERNS,
        DetectionType.TRIAL_REMINDER: TRIAL_REMINDER_PATTERNS,
        DetectionType.BILLING_CONFIRMATION: BILLING_CONFIRMATION_PATTERNS,
        DetectionType.SUBSCRIPTION_START: SUBSCRIPTION_START_PATTERNS,
        DetectionType.PRICE_CHANGE: PRICE_CHANGE_PATTERNS,
    },
    spam_patterns=SPAM_PATTERNS,
    disposable_domains=DISPOSABLE_DOMAINS,
)
