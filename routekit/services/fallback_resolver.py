"""Ordered-fallback DoH resolution."""

import logging
from typing import List, Optional, Sequence, Tuple

from routekit.exceptions import AllProvidersFailedError, DoHError
from routekit.models.doh_provider import FALLBACK_PROVIDERS, DoHProvider
from routekit.models.query_outcome import DoHResult
from routekit.services.doh_client import DEFAULT_TIMEOUT_MS, query_doh


logger = logging.getLogger(__name__)


def resolve_with_fallback(
    domain: str,
    record_type: str,
    providers: Optional[Sequence[DoHProvider]] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> DoHResult:
    """Query providers in order and return the first successful answer.

    Each provider gets exactly one attempt. A successful empty answer
    (RCODE 0, no records) counts as success and stops the iteration.

    Args:
        domain: Name to resolve.
        record_type: Record type name or numeral.
        providers: Primary first, then alternates (default: Cloudflare, Google).
        timeout_ms: Per-attempt timeout in milliseconds.

    Returns:
        DoHResult: The first provider's successful result.

    Raises:
        ValueError: If the provider list is empty.
        AllProvidersFailedError: If every provider failed; chained from and
            named after the last provider's error.
    """
    if providers is None:
        providers = FALLBACK_PROVIDERS
    if not providers:
        raise ValueError("At least one DoH provider is required")

    errors: List[Tuple[str, DoHError]] = []
    for provider in providers:
        try:
            return query_doh(
                provider.endpoint_url,
                domain,
                record_type,
                timeout_ms,
                provider=provider.name,
            )
        except DoHError as e:
            logger.info(
                f"{provider.name} failed {record_type} lookup for {domain}: {e}"
            )
            errors.append((provider.name, e))

    raise AllProvidersFailedError(errors) from errors[-1][1]
