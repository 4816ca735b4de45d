"""
Single-result adapter for callers written against the older parser.

The older parser returned one best guess per email and used its own type
names. These helpers translate those names and collapse the multi-detection
output to one record.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from subtracker.errors import InvalidMessageError
from subtracker.models.detection import DetectedSubscription, DetectionType
from subtracker.models.email import EmailMessage
from subtracker.services.detector import SubscriptionDetector, default_detector

logger = logging.getLogger(__name__)

# Older names -> canonical type. None means the older parser had the type
# but there is no canonical counterpart, so nothing is emitted for it.
LEGACY_TYPE_ALIASES: Dict[str, Optional[DetectionType]] = {
    'trialStart': DetectionType.TRIAL_SIGNUP,
    'trialEnd': DetectionType.TRIAL_REMINDER,
    'billing': DetectionType.BILLING_CONFIRMATION,
    'priceChange': DetectionType.PRICE_CHANGE,
    'cancellation': None,
    'unknown': None,
}

_TYPE_ORDER = {detection_type: position for position, detection_type in enumerate(DetectionType)}


def normalize_detection_type(name: Optional[str]) -> Optional[DetectionType]:
    """
    Map an old or canonical type name to DetectionType.

    Examples:
        >>> normalize_detection_type('trialEnd')
        <DetectionType.TRIAL_REMINDER: 'trial_reminder'>
        >>> normalize_detection_type('billing_confirmation')
        <DetectionType.BILLING_CONFIRMATION: 'billing_confirmation'>
        >>> normalize_detection_type('cancellation') is None
        True
    """
    if not name:
        return None
    if name in LEGACY_TYPE_ALIASES:
        return LEGACY_TYPE_ALIASES[name]
    try:
        return DetectionType(name.strip().lower())
    except ValueError:
        return None


def select_best(detections: Iterable[DetectedSubscription]) -> Optional[DetectedSubscription]:
    """Highest confidence wins; ties go to the earlier DetectionType."""
    best = None
    for detection in detections:
        if best is None or (
            detection.confidence,
            -_TYPE_ORDER[detection.detection_type],
        ) > (
            best.confidence,
            -_TYPE_ORDER[best.detection_type],
        ):
            best = detection
    return best


def parse_subscription_email(
    message: EmailMessage,
    detector: Optional[SubscriptionDetector] = None,
) -> Optional[DetectedSubscription]:
    """
    Best single detection for a message, or None.

    Raises:
        InvalidMessageError: If the message has no sender or no content
    """
    detector = detector or default_detector
    return select_best(detector.detect(message))


def parse_multiple_emails(
    messages: Iterable[Union[EmailMessage, Mapping[str, Any]]],
    detector: Optional[SubscriptionDetector] = None,
) -> List[Dict[str, Any]]:
    """
    Parse a batch into the older result envelope.

    Each entry is {"success": True, "data": record-or-None} or
    {"success": False, "error": message, "email": original input}.
    """
    results: List[Dict[str, Any]] = []
    for raw in messages:
        try:
            message = raw if isinstance(raw, EmailMessage) else EmailMessage.from_payload(raw)
            best = parse_subscription_email(message, detector)
        except InvalidMessageError as exc:
            logger.warning("Could not parse email", extra={"error": str(exc)})
            results.append({'success': False, 'error': str(exc), 'email': raw})
            continue
        results.append({'success': True, 'data': best.to_record() if best else None})
    return results
