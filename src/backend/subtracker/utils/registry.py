"""
Static registry of known subscription services and generic mail domains.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class ServiceRegistry:
    """
    Known service identifiers and mail domains to ignore.

    services maps a lowercase identifier (matched as a substring of the
    sender domain) to its display name. generic_domains lists full provider
    domains whose mail never identifies a service (webmail, relays).
    generic_labels lists single domain labels skipped when a company name is
    taken from the domain itself.
    """
    services: Mapping[str, str]
    generic_domains: Tuple[str, ...]
    generic_labels: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'services', MappingProxyType(dict(self.services)))

    def lookup(self, domain_root: str) -> Optional[str]:
        """
        Find the known service whose identifier appears in a domain.

        The longest contained identifier wins; ties keep registry order.

        Args:
            domain_root: Sender domain with generic prefixes removed

        Returns:
            Display name or None
        """
        root = domain_root.lower()
        best = None
        for identifier in self.services:
            if identifier in root and (best is None or len(identifier) > len(best)):
                best = identifier
        return self.services[best] if best else None

    def is_generic_domain(self, domain: str) -> bool:
        domain = domain.lower()
        return any(
            domain == generic or domain.endswith('.' + generic)
            for generic in self.generic_domains
        )

    def is_generic_label(self, label: str) -> bool:
        return label.lower() in self.generic_labels


DEFAULT_REGISTRY = ServiceRegistry(
    services={
        'netflix': 'Netflix',
        'spotify': 'Spotify',
        'amazon': 'Amazon',
        'apple': 'Apple',
        'google': 'Google',
        'microsoft': 'Microsoft',
        'adobe': 'Adobe',
        'dropbox': 'Dropbox',
        'slack': 'Slack',
        'zoom': 'Zoom',
        'salesforce': 'Salesforce',
        'hubspot': 'HubSpot',
        'mailchimp': 'Mailchimp',
        'canva': 'Canva',
        'figma': 'Figma',
        'notion': 'Notion',
        'airtable': 'Airtable',
        'calendly': 'Calendly',
        'loom': 'Loom',
        'discord': 'Discord',
        'twitch': 'Twitch',
        'youtube': 'YouTube',
        'hulu': 'Hulu',
        'disney': 'Disney',
        'hbo': 'HBO',
        'paramount': 'Paramount',
        'peacock': 'Peacock',
        'github': 'GitHub',
        'gitlab': 'GitLab',
        'vercel': 'Vercel',
        'netlify': 'Netlify',
        'heroku': 'Heroku',
        'digitalocean': 'DigitalOcean',
    },
    generic_domains=(
        'gmail.com', 'googlemail.com', 'yahoo.com', 'outlook.com', 'hotmail.com',
        'live.com', 'msn.com', 'icloud.com', 'me.com', 'mac.com', 'aol.com',
        'protonmail.com', 'proton.me', 'gmx.com', 'zoho.com',
        'privaterelay.appleid.com',
    ),
    generic_labels=(
        'gmail', 'yahoo', 'outlook', 'hotmail', 'mail', 'email', 'e', 'em',
        'mailer', 'noreply', 'no-reply', 'notifications', 'info', 'news', 'www',
        'billing', 'account', 'accounts', 'receipts', 'support', 'updates',
        'hello', 'team', 'members',
    ),
)


_ABBREVIATIONS = {
    'aws': 'Amazon Web Services',
    'gcp': 'Google Cloud Platform',
    'ms': 'Microsoft',
    'fb': 'Facebook',
    'ig': 'Instagram',
}


def normalize_service_name(name: Optional[str]) -> str:
    """
    Normalize a free-text service name for display.

    Examples:
        >>> normalize_service_name("  netflix premium!! ")
        'Netflix Premium'
        >>> normalize_service_name("aws")
        'Amazon Web Services'
    """
    if not name or not isinstance(name, str):
        return 'Unknown'

    normalized = re.sub(r'[^A-Za-z0-9\s]', '', name.strip())
    normalized = ' '.join(normalized.split())
    if not normalized:
        return 'Unknown'

    expanded = _ABBREVIATIONS.get(normalized.lower())
    if expanded:
        return expanded

    return ' '.join(_capitalize(word) for word in normalized.split(' '))


def _capitalize(word: str) -> str:
    """Title-case single-case words; mixed case ("YouTube") is kept."""
    if word.islower() or word.isupper():
        return word[:1].upper() + word[1:].lower()
    return word
