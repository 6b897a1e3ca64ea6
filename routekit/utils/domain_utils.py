"""Domain name utilities for lookup input."""

import re
from typing import List, Optional, Tuple

import dns.exception
import dns.name

from routekit.exceptions import InvalidDomainError


SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)

WWW_PREFIX = "www."

WWW_TAG = "A (www)"
WWW_FALLBACK_TAG = "A (fallback for www)"


def clean_domain(raw: Optional[str]) -> str:
    """Reduce user input to a bare host name.

    Strips surrounding whitespace, a URL scheme, any path, query, port or
    credentials, and a trailing dot, then lower-cases. A leading ``www.`` is
    kept.

    Args:
        raw: Raw domain or URL as typed by the user.

    Returns:
        str: Cleaned host name (empty when nothing usable remains).

    Examples:
        >>> clean_domain("  https://Example.COM/path?q=1 ")
        'example.com'
        >>> clean_domain("www.example.com.")
        'www.example.com'
    """
    if not raw:
        return ""
    host = SCHEME_PATTERN.sub("", raw.strip())
    host = re.split(r"[/?#]", host, maxsplit=1)[0]
    host = host.rsplit("@", 1)[-1]
    if not host.startswith("["):
        host = host.split(":", 1)[0]
    return host.rstrip(".").lower()


def validate_domain(domain: Optional[str]) -> str:
    """Validate that a cleaned domain is a usable DNS name.

    Args:
        domain: Domain to validate.

    Returns:
        str: The domain, unchanged.

    Raises:
        InvalidDomainError: If the domain is empty or not a valid DNS name.
    """
    if not domain or not domain.strip():
        raise InvalidDomainError("Domain name is required")
    if "[" in domain or "]" in domain:
        raise InvalidDomainError(
            f"Invalid domain name {domain!r}: IP address literals are not domain names"
        )
    try:
        dns.name.from_text(domain)
    except dns.exception.DNSException as e:
        raise InvalidDomainError(f"Invalid domain name {domain!r}: {e}") from e
    if " " in domain:
        raise InvalidDomainError(f"Invalid domain name {domain!r}: contains spaces")
    return domain


def parse_record_types(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated record type list.

    Examples:
        >>> parse_record_types("a, mx,,TXT,a")
        ['A', 'MX', 'TXT']
        >>> parse_record_types(None)
        []
    """
    if not raw:
        return []
    types: List[str] = []
    for item in raw.split(","):
        record_type = item.strip().upper()
        if record_type and record_type not in types:
            types.append(record_type)
    return types


def www_variant(domain: str) -> Tuple[str, str]:
    """Return the www/bare counterpart of a domain and its record tag.

    Examples:
        >>> www_variant("example.com")
        ('www.example.com', 'A (www)')
        >>> www_variant("www.example.com")
        ('example.com', 'A (fallback for www)')
    """
    if domain.lower().startswith(WWW_PREFIX):
        return domain[len(WWW_PREFIX):], WWW_FALLBACK_TAG
    return f"{WWW_PREFIX}{domain}", WWW_TAG
