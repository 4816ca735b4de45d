"""
Service name resolution from sender domain and body phrasing.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from subtracker.utils.patterns import PatternSpec
from subtracker.utils.registry import ServiceRegistry, normalize_service_name

logger = logging.getLogger(__name__)

_GENERIC_PREFIX = re.compile(r'^(?:mail\.|noreply\.|no-reply\.)')

_NAME = r'([A-Za-z0-9]+(?:\s+[A-Za-z0-9]+){0,2}?)'

BODY_NAME_PATTERNS = (
    PatternSpec(
        name='thank_you_for_subscribing',
        pattern=rf'\bthank\s+you\s+for\s+subscribing\s+to\s+{_NAME}(?=[^A-Za-z0-9 ]|$)',
        example='Thank you for subscribing to Acme Weekly!',
    ),
    PatternSpec(
        name='welcome_to',
        pattern=rf'\bwelcome\s+to\s+{_NAME}(?=[^A-Za-z0-9 ]|$)',
        example='Welcome to Acme Cloud.',
    ),
    PatternSpec(
        name='your_subscription',
        pattern=rf'\byour\s+{_NAME}\s+subscription\b',
        example='Your Acme Plus subscription',
    ),
    PatternSpec(
        name='membership',
        pattern=rf'\b{_NAME}\s+membership\b',
        example='Amazon Prime membership',
    ),
)

_EDGE_STOPWORDS = {
    'your', 'the', 'our', 'a', 'an', 'my', 'this', 'for', 'to', 'and',
    'free', 'trial', 'plan',
}


@dataclass(frozen=True)
class ResolvedService:
    """Service name and how it was found ('registry', 'domain' or 'body')."""
    name: str
    source: str


def resolve_service(
    sender_domain: str,
    text: str,
    registry: ServiceRegistry,
) -> Optional[ResolvedService]:
    """
    Derive the service a message is about.

    Priority:
    1. Known service identifier inside the sender domain
    2. First meaningful label of the sender domain, capitalized
    3. Body phrasing ("welcome to X", "your X subscription", ...)

    Generic webmail and relay domains never identify a service, so their
    mail falls through to the body phrasing.

    Args:
        sender_domain: Lowercase sender domain (may be empty)
        text: Normalized content
        registry: Known services and generic domains

    Returns:
        ResolvedService or None when nothing attributable was found
    """
    domain = _GENERIC_PREFIX.sub('', (sender_domain or '').lower())

    if domain and not registry.is_generic_domain(domain):
        known = registry.lookup(domain)
        if known:
            return ResolvedService(name=known, source='registry')

        company = _company_from_domain(domain, registry)
        if company:
            return ResolvedService(name=company, source='domain')

    body_name = _name_from_body(text)
    if body_name:
        return ResolvedService(name=body_name, source='body')

    logger.debug("No service name found", extra={"sender_domain": sender_domain})
    return None


def _company_from_domain(domain: str, registry: ServiceRegistry) -> Optional[str]:
    """First non-generic label longer than two characters, TLD excluded."""
    labels = domain.split('.')[:-1]
    for label in labels:
        if len(label) > 2 and not registry.is_generic_label(label):
            return label[:1].upper() + label[1:]
    return None


def _name_from_body(text: str) -> Optional[str]:
    for spec in BODY_NAME_PATTERNS:
        for match in spec.compiled.finditer(text):
            name = _trim_stopwords(match.group(1))
            if name:
                return normalize_service_name(name)
    return None


def _trim_stopwords(name: str) -> str:
    words = name.split()
    while words and words[0].lower() in _EDGE_STOPWORDS:
        words.pop(0)
    while words and words[-1].lower() in _EDGE_STOPWORDS:
        words.pop()
    return ' '.join(words)
