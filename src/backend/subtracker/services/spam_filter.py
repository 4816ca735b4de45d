"""
Noise filter for promotional and throwaway-mailbox messages.
"""

import logging

from subtracker.utils.patterns import PatternTables

logger = logging.getLogger(__name__)


def is_noise(text: str, sender_domain: str, tables: PatternTables) -> bool:
    """
    Decide whether a message is marketing or phishing noise.

    Args:
        text: Normalized content
        sender_domain: Lowercase sender domain (may be empty)
        tables: Pattern tables holding spam phrasing and disposable domains

    Returns:
        True if the message should produce no detections
    """
    for spec in tables.spam_patterns:
        if spec.compiled.search(text):
            logger.debug("Spam phrasing matched", extra={"pattern": spec.name})
            return True

    domain = (sender_domain or '').lower()
    for marker in tables.disposable_domains:
        if marker in domain:
            logger.debug("Disposable sender domain", extra={"sender_domain": domain})
            return True

    return False
