"""DNS propagation checks across a panel of DoH providers."""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from routekit.exceptions import (
    DoHDnsError,
    DoHError,
    DoHHttpError,
    DoHTimeoutError,
    InvalidDomainError,
)
from routekit.models.dns_record import DNSRecord, canonical_type
from routekit.models.doh_provider import PROPAGATION_PROVIDERS, DoHProvider
from routekit.models.query_outcome import QueryOutcome, QueryStatus
from routekit.models.reports import PropagationReport
from routekit.services.doh_client import DEFAULT_TIMEOUT_MS, query_doh
from routekit.services.logger import log_propagation_check, log_provider_query
from routekit.utils.txt_normalization import normalize_txt_records


logger = logging.getLogger(__name__)

# Slack on top of the per-provider timeout before a query is abandoned
DEADLINE_GRACE_MS = 500


def categorize_failure(exception: DoHError) -> QueryStatus:
    """Map a DoH exception to the outcome status recorded for it.

    Args:
        exception: The error raised by the query client.

    Returns:
        QueryStatus: TIMED_OUT, HTTP_ERROR, DNS_ERROR or NETWORK_ERROR.
    """
    if isinstance(exception, DoHTimeoutError):
        return QueryStatus.TIMED_OUT
    elif isinstance(exception, DoHHttpError):
        return QueryStatus.HTTP_ERROR
    elif isinstance(exception, DoHDnsError):
        return QueryStatus.DNS_ERROR
    else:
        return QueryStatus.NETWORK_ERROR


def query_provider(
    provider: DoHProvider,
    domain: str,
    record_type: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> QueryOutcome:
    """Query a single provider, turning failures into a failed outcome.

    Args:
        provider: Provider to query.
        domain: Name to resolve.
        record_type: Record type name.
        timeout_ms: Per-query timeout in milliseconds.

    Returns:
        QueryOutcome: Success with records (possibly empty) or a failure.
    """
    start = time.monotonic()
    try:
        result = query_doh(
            provider.endpoint_url, domain, record_type, timeout_ms, provider=provider.name
        )
    except DoHError as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        outcome = QueryOutcome.failure(
            provider, categorize_failure(e), str(e), elapsed_ms=elapsed_ms
        )
    else:
        outcome = QueryOutcome(
            provider=provider,
            records=result.records,
            succeeded=True,
            elapsed_ms=result.elapsed_ms,
        )

    log_provider_query(
        provider=provider.name,
        domain=domain,
        record_type=record_type,
        status=outcome.status.value,
        record_count=len(outcome.records),
        elapsed_ms=outcome.elapsed_ms,
        error=outcome.error,
    )
    return outcome


def calculate_propagation_percentage(outcomes: Sequence[QueryOutcome]) -> float:
    """Percentage of providers that returned at least one record.

    Returns:
        float: 0.0 to 100.0 (0.0 for an empty sequence).
    """
    if not outcomes:
        return 0.0
    propagated = sum(1 for outcome in outcomes if outcome.is_propagated())
    return propagated / len(outcomes) * 100


def comparison_values(records: Sequence[DNSRecord]) -> List[str]:
    """Sorted values used to compare record sets across providers.

    TXT values are normalized; other types compare on the value verbatim.
    Duplicates are kept, so the comparison is a multiset comparison.
    """
    txt_values = normalize_txt_records(
        [record.value for record in records if record.type == "TXT"]
    )
    other_values = [record.value for record in records if record.type != "TXT"]
    return sorted(txt_values + other_values)


def check_consistency(outcomes: Sequence[QueryOutcome]) -> bool:
    """Check whether every provider that returned records agrees.

    Only providers with at least one record take part. With one or none
    the result is trivially consistent. Otherwise each record set must have
    the same size as the first one and the same sorted comparison values.

    Args:
        outcomes: Per-provider outcomes.

    Returns:
        bool: True if all participating record sets match.
    """
    propagated = [outcome for outcome in outcomes if outcome.is_propagated()]
    if len(propagated) <= 1:
        return True

    reference_records = propagated[0].records
    reference_values = comparison_values(reference_records)

    for outcome in propagated[1:]:
        if len(outcome.records) != len(reference_records):
            return False
        if comparison_values(outcome.records) != reference_values:
            return False
    return True


def check_propagation(
    domain: str,
    record_type: str = "A",
    providers: Optional[Sequence[DoHProvider]] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    concurrency: Optional[int] = None,
) -> PropagationReport:
    """Query every provider in the panel and build a propagation report.

    Queries run concurrently on a thread pool. A provider that is still
    running when the batch deadline passes is abandoned and recorded as
    timed out; the pool is shut down without waiting for it.

    Args:
        domain: Domain to check.
        record_type: Record type name (default "A").
        providers: Provider panel (default: the built-in propagation panel).
        timeout_ms: Per-provider timeout in milliseconds.
        concurrency: Max simultaneous queries (default: one per provider).

    Returns:
        PropagationReport: Always produced, even when every provider fails.

    Raises:
        InvalidDomainError: If domain is empty.
        ValueError: If the panel is empty or timeout_ms is not positive.
    """
    if not domain or not domain.strip():
        raise InvalidDomainError("Domain name is required")
    if providers is None:
        providers = PROPAGATION_PROVIDERS
    if not providers:
        raise ValueError("At least one DoH provider is required")
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be a positive number")

    domain = domain.strip()
    record_type = canonical_type(record_type or "A")
    workers = max(1, min(concurrency or len(providers), len(providers)))
    waves = math.ceil(len(providers) / workers)
    deadline_s = (timeout_ms * waves + DEADLINE_GRACE_MS) / 1000

    logger.info(
        f"Checking propagation of {record_type} {domain} across {len(providers)} providers"
    )
    start = time.monotonic()

    outcomes: List[Optional[QueryOutcome]] = [None] * len(providers)
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = {
            executor.submit(query_provider, provider, domain, record_type, timeout_ms): index
            for index, provider in enumerate(providers)
        }
        done, not_done = wait(futures, timeout=deadline_s)

        for future in done:
            index = futures[future]
            try:
                outcomes[index] = future.result()
            except Exception as e:
                # Unexpected error - record as a network failure
                provider = providers[index]
                logger.error(
                    f"Unexpected error querying {provider.name} for {domain}: {e}"
                )
                outcomes[index] = QueryOutcome.failure(
                    provider, QueryStatus.NETWORK_ERROR, f"Unexpected error: {e}"
                )

        for future in not_done:
            future.cancel()
            index = futures[future]
            provider = providers[index]
            logger.warning(f"Abandoning {provider.name}: no answer before deadline")
            outcomes[index] = QueryOutcome.failure(
                provider,
                QueryStatus.TIMED_OUT,
                f"DNS query timed out after {timeout_ms}ms",
                elapsed_ms=timeout_ms,
            )
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    collected = [outcome for outcome in outcomes if outcome is not None]
    report = PropagationReport(
        domain=domain,
        record_type=record_type,
        outcomes=collected,
        propagation_percentage=calculate_propagation_percentage(collected),
        is_consistent=check_consistency(collected),
        timestamp=datetime.now(timezone.utc),
    )

    log_propagation_check(
        domain=domain,
        record_type=record_type,
        propagated=report.propagated_count,
        total=len(collected),
        is_consistent=report.is_consistent,
        failed_providers=report.failed_providers,
        duration_ms=int((time.monotonic() - start) * 1000),
    )
    return report
