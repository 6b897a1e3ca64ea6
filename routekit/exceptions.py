"""Exception taxonomy for DoH queries and DNS lookups."""

from typing import List, Optional, Tuple

import dns.rcode


class InvalidDomainError(ValueError):
    """Raised when the domain input is missing or not a valid DNS name."""


class RecordsNotFoundError(LookupError):
    """Raised when a lookup finishes with no records of the requested types."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"No DNS records found for {domain}")
        self.domain = domain


class DoHError(RuntimeError):
    """Base class for a failed DNS-over-HTTPS query.

    Attributes:
        provider: Name of the provider that failed, when known.
    """

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class DoHTimeoutError(DoHError):
    """Raised when a provider does not answer within the timeout."""

    def __init__(self, timeout_ms: int, provider: Optional[str] = None) -> None:
        super().__init__(f"DNS query timed out after {timeout_ms}ms", provider)
        self.timeout_ms = timeout_ms


class DoHHttpError(DoHError):
    """Raised when the DoH endpoint answers with a non-2xx HTTP status."""

    def __init__(
        self, status: int, status_text: str, provider: Optional[str] = None
    ) -> None:
        super().__init__(f"HTTP {status}: {status_text}", provider)
        self.status = status
        self.status_text = status_text


class DoHDnsError(DoHError):
    """Raised when the JSON answer carries a non-zero DNS RCODE.

    Attributes:
        rcode: Numeric RCODE from the ``Status`` field.
        rcode_name: Mnemonic such as NXDOMAIN or SERVFAIL.
    """

    def __init__(self, rcode: int, provider: Optional[str] = None) -> None:
        self.rcode = rcode
        self.rcode_name = _rcode_text(rcode)
        super().__init__(
            f"DNS query failed with RCODE {rcode} ({self.rcode_name})", provider
        )


class DoHNetworkError(DoHError):
    """Raised on transport failures and unreadable response bodies."""


class AllProvidersFailedError(DoHError):
    """Raised by the fallback resolver when every provider failed.

    The message is the last provider's error; ``errors`` keeps every
    ``(provider_name, error)`` pair in the order they were tried.
    """

    def __init__(self, errors: List[Tuple[str, DoHError]]) -> None:
        last_provider, last_error = errors[-1]
        super().__init__(str(last_error), last_provider)
        self.errors = errors
        self.last_error = last_error


def _rcode_text(rcode: int) -> str:
    try:
        return dns.rcode.to_text(rcode)
    except ValueError:
        return f"RCODE{rcode}"
