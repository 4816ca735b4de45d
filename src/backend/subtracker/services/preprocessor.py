"""
Email preprocessing: one searchable text blob per message.
"""

import re
from dataclasses import dataclass
from email.utils import parseaddr

from subtracker.errors import InvalidMessageError
from subtracker.models.email import EmailMessage

_ENTITIES = (
    ('&nbsp;', ' '),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&amp;', '&'),  # last, so "&amp;lt;" stays "&lt;"
)


@dataclass(frozen=True)
class NormalizedContent:
    """
    Derived, per-call view of a message.

    text keeps the original casing; matchers run case-insensitively.
    """
    text: str
    sender_address: str
    sender_domain: str


def strip_html(html: str) -> str:
    """
    Reduce HTML markup to plain text without an HTML parser.

    Drops script/style blocks and comments, replaces every tag with a space
    and decodes &nbsp; &lt; &gt; &quot; &amp;.
    """
    if not html:
        return ''
    text = re.sub(r'<(script|style)\b[^>]*>.*?</\1\s*>', ' ', html, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r'<!--.*?-->', ' ', text, flags=re.DOTALL)
    text = re.sub(r'<[^>]+>', ' ', text)
    for entity, replacement in _ENTITIES:
        text = re.sub(re.escape(entity), replacement, text, flags=re.IGNORECASE)
    return text


def collapse_whitespace(text: str) -> str:
    return ' '.join(text.split())


def split_sender(sender: str) -> tuple[str, str]:
    """
    Extract (address, domain) from a From header value.

    Examples:
        >>> split_sender('Netflix <info@mailer.netflix.com>')
        ('info@mailer.netflix.com', 'mailer.netflix.com')
    """
    _, address = parseaddr(sender or '')
    address = address.strip().lower()
    if '@' not in address:
        return address, ''
    return address, address.rsplit('@', 1)[1]


def preprocess(message: EmailMessage) -> NormalizedContent:
    """
    Build the normalized content every downstream matcher reads.

    Args:
        message: Inbound email

    Returns:
        NormalizedContent with subject, text body and de-markuped HTML body
        joined by single spaces

    Raises:
        InvalidMessageError: If the sender is blank or subject, text body and
            HTML body are all empty
    """
    if not message.sender or not message.sender.strip():
        raise InvalidMessageError("Message has no sender")

    parts = [
        message.subject or '',
        message.body_text or '',
        strip_html(message.body_html or ''),
    ]
    text = collapse_whitespace(' '.join(parts))
    if not text:
        raise InvalidMessageError("Message has no subject or body")

    address, domain = split_sender(message.sender)
    return NormalizedContent(text=text, sender_address=address, sender_domain=domain)
