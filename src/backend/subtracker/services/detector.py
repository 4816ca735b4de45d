"""
Subscription detection pipeline.

preprocess -> noise filter -> service resolution -> classification ->
entity extraction -> scoring -> one DetectedSubscription per candidate type.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from subtracker.config import Settings, settings as default_settings
from subtracker.errors import InvalidMessageError
from subtracker.models.detection import (
    BatchItem,
    DetectedSubscription,
    DetectionOutcome,
    DetectionResult,
)
from subtracker.models.email import EmailMessage
from subtracker.services.classifier import Classification, classify
from subtracker.services.extractors import extract_amount, extract_billing_cycle, extract_date
from subtracker.services.preprocessor import NormalizedContent, preprocess
from subtracker.services.scoring import AdditiveScorer, Scorer, ScoringSignals
from subtracker.services.service_resolver import ResolvedService, resolve_service
from subtracker.services.spam_filter import is_noise
from subtracker.utils.candidates import AmountCandidate, BillingCycleCandidate, DateCandidate
from subtracker.utils.patterns import DEFAULT_TABLES, PatternTables
from subtracker.utils.registry import DEFAULT_REGISTRY, ServiceRegistry

logger = logging.getLogger(__name__)

# Numeric dates or a month name anywhere in the content
_DATE_MENTION = re.compile(
    r'\b\d{1,2}/\d{1,2}/\d{4}\b|\b\d{4}-\d{2}-\d{2}\b|'
    r'\b(?:january|february|march|april|may|june|july|august|september|october|november|december)\b',
    re.IGNORECASE,
)

MessageInput = Union[EmailMessage, Mapping[str, Any]]


class SubscriptionDetector:
    """
    Detects subscription lifecycle events in inbound email.

    Holds only immutable tables and configuration, so one instance can serve
    any number of threads.
    """

    def __init__(
        self,
        tables: PatternTables = DEFAULT_TABLES,
        registry: ServiceRegistry = DEFAULT_REGISTRY,
        scorer: Optional[Scorer] = None,
        settings: Optional[Settings] = None,
    ):
        self.tables = tables
        self.registry = registry
        self.scorer = scorer or AdditiveScorer()
        self.settings = settings or default_settings

    def detect(self, message: EmailMessage) -> List[DetectedSubscription]:
        """
        Detect subscriptions in one message.

        Args:
            message: Inbound email

        Returns:
            One detection per matching detection type, in DetectionType order.
            Empty for noise, unattributable or non-subscription mail.

        Raises:
            InvalidMessageError: If the message has no sender or no content
        """
        return self.analyze(message).detections

    def analyze(self, message: EmailMessage) -> DetectionResult:
        """
        Run the pipeline and report how it ended.

        Same as detect(), but the result also carries the outcome so callers
        can tell noise from unattributable mail from plain non-matches.

        Raises:
            InvalidMessageError: If the message has no sender or no content
        """
        content = preprocess(message)
        log_extra = {"sender_domain": content.sender_domain}

        if is_noise(content.text, content.sender_domain, self.tables):
            logger.info("Message filtered as noise", extra=log_extra)
            return DetectionResult(outcome=DetectionOutcome.NOISE)

        service = resolve_service(content.sender_domain, content.text, self.registry)
        if service is None:
            logger.info("Service name unresolved, no detections emitted", extra=log_extra)
            return DetectionResult(outcome=DetectionOutcome.UNRESOLVED_SERVICE)

        candidates = classify(content.text, self.tables)
        if not candidates:
            logger.debug("No subscription phrasing matched", extra=log_extra)
            return DetectionResult(outcome=DetectionOutcome.NO_MATCH, service_name=service.name)

        # Entities do not depend on the detection type; extract them once.
        amount = extract_amount(
            content.text,
            min_amount=self.settings.MIN_AMOUNT,
            max_amount=self.settings.MAX_AMOUNT,
            default_currency=self.settings.DEFAULT_CURRENCY,
        )
        billing_cycle = extract_billing_cycle(content.text)
        found_date = extract_date(
            content.text,
            message.received_at,
            window_chars=self.settings.TRIAL_WINDOW_CHARS,
        )
        date_mentioned = bool(_DATE_MENTION.search(content.text))

        detections = [
            self._build_detection(
                message, content, service, candidate,
                amount, billing_cycle, found_date, date_mentioned,
            )
            for candidate in candidates
        ]

        logger.info(
            "Detections produced",
            extra={
                **log_extra,
                "service_name": service.name,
                "detection_types": [d.detection_type.value for d in detections],
            },
        )
        return DetectionResult(
            outcome=DetectionOutcome.DETECTED,
            detections=detections,
            service_name=service.name,
        )

    def detect_many(self, messages: Iterable[MessageInput]) -> List[BatchItem]:
        """
        Detect subscriptions across a batch.

        Raw payload mappings are validated here. An invalid message fails its
        own item only; the rest of the batch still runs.

        Args:
            messages: EmailMessage instances or webhook payload mappings

        Returns:
            One BatchItem per input, in input order
        """
        items: List[BatchItem] = []
        for index, raw in enumerate(messages):
            try:
                message = raw if isinstance(raw, EmailMessage) else EmailMessage.from_payload(raw)
                detections = self.detect(message)
            except InvalidMessageError as exc:
                logger.warning("Skipping invalid message", extra={"index": index, "error": str(exc)})
                items.append(BatchItem(index=index, success=False, error=str(exc)))
                continue
            items.append(BatchItem(index=index, success=True, detections=detections))
        return items

    def _build_detection(
        self,
        message: EmailMessage,
        content: NormalizedContent,
        service: ResolvedService,
        candidate: Classification,
        amount: Optional[AmountCandidate],
        billing_cycle: Optional[BillingCycleCandidate],
        found_date: Optional[DateCandidate],
        date_mentioned: bool,
    ) -> DetectedSubscription:
        signals = ScoringSignals(
            known_type=True,
            service_resolved=True,
            date_found=found_date is not None,
            amount_found=amount is not None,
            pattern_hits=candidate.hit_count,
            billing_cycle_found=billing_cycle is not None,
            date_mentioned=date_mentioned,
        )

        dates: Dict[str, Any] = {}
        if found_date is not None:
            field_name = (
                'trial_end_date' if found_date.source == 'trial_window'
                else candidate.detection_type.date_field
            )
            dates[field_name] = found_date.value

        return DetectedSubscription(
            service_name=service.name,
            detection_type=candidate.detection_type,
            confidence=self.scorer.score(signals),
            cost=amount.value if amount else None,
            currency=amount.currency if amount else None,
            billing_cycle=billing_cycle.value if billing_cycle else None,
            extracted_data=self._extracted_data(
                message, content, service, candidate, amount, billing_cycle, found_date,
            ),
            **dates,
        )

    def _extracted_data(
        self,
        message: EmailMessage,
        content: NormalizedContent,
        service: ResolvedService,
        candidate: Classification,
        amount: Optional[AmountCandidate],
        billing_cycle: Optional[BillingCycleCandidate],
        found_date: Optional[DateCandidate],
    ) -> Dict[str, Any]:
        """Audit trail: raw content, matched snippet and per-entity evidence."""
        data: Dict[str, Any] = {
            'rawContent': content.text[:self.settings.RAW_CONTENT_CHARS],
            'matchedSnippet': candidate.snippet,
            'matchedPatterns': list(candidate.pattern_names),
            'serviceSource': service.source,
            'senderDomain': content.sender_domain,
            'scorer': self.scorer.name,
        }
        for found in (amount, billing_cycle, found_date):
            if found is not None:
                data.update(found.evidence())

        message_id = message.resolved_message_id
        if message_id:
            data['messageId'] = message_id
        return data


default_detector = SubscriptionDetector()


def detect(message: EmailMessage) -> List[DetectedSubscription]:
    """Detect subscriptions with the shared default detector."""
    return default_detector.detect(message)
