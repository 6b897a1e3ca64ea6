"""Multi-type DNS lookup with derived email-security records.

Queries the standard record types one after another through the fallback
resolver, then derives SPF from TXT, queries DMARC at ``_dmarc.<domain>``
and probes a fixed list of DKIM selectors. A failure for one type never
stops the others.
"""

import logging
import time
from typing import Iterable, List, Optional, Sequence

from routekit.exceptions import AllProvidersFailedError, InvalidDomainError, RecordsNotFoundError
from routekit.models.dns_record import STANDARD_TYPES, DNSRecord, RecordType
from routekit.models.doh_provider import FALLBACK_PROVIDERS, DoHProvider
from routekit.models.reports import DNSLookupResult
from routekit.services.doh_client import DEFAULT_TIMEOUT_MS
from routekit.services.fallback_resolver import resolve_with_fallback
from routekit.services.logger import log_lookup_summary
from routekit.utils.domain_utils import WWW_FALLBACK_TAG, WWW_TAG, www_variant


logger = logging.getLogger(__name__)

DKIM_SELECTORS = ["default", "google", "selector1", "selector2", "k1", "dkim"]

SPF_PREFIX = "v=spf1"

CNAME_FALLBACK_TAGS = (WWW_TAG, WWW_FALLBACK_TAG)


class DNSAggregator:
    """Runs the per-type queries for one lookup.

    Attributes:
        domain: Domain being looked up.
        requested: Upper-cased requested types (empty means all).
        records: Records collected so far.
        messages: Advisory notes for the user.
        failed_types: Query labels that failed on every provider.
    """

    def __init__(
        self,
        domain: str,
        record_types: Optional[Iterable[str]] = None,
        providers: Optional[Sequence[DoHProvider]] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        if not domain or not domain.strip():
            raise InvalidDomainError("Domain name is required")

        self.domain = domain.strip()
        self.requested: List[str] = []
        for record_type in record_types or []:
            upper = record_type.strip().upper()
            if upper and upper not in self.requested:
                self.requested.append(upper)
        self.providers = list(providers) if providers is not None else FALLBACK_PROVIDERS
        self.timeout_ms = timeout_ms
        self.records: List[DNSRecord] = []
        self.messages: List[str] = []
        self.failed_types: List[str] = []

    def wants(self, record_type: str) -> bool:
        """Check if a type was requested (everything is, with no filter)."""
        return not self.requested or record_type in self.requested

    def _query(self, name: str, record_type: str, label: str) -> List[DNSRecord]:
        try:
            result = resolve_with_fallback(
                name, record_type, providers=self.providers, timeout_ms=self.timeout_ms
            )
        except AllProvidersFailedError as e:
            logger.info(f"No {label} records found for {name}: {e}")
            self.failed_types.append(label)
            return []
        return result.records

    def lookup_standard_types(self) -> None:
        """Query each requested standard type; TXT also backs SPF."""
        for record_type in STANDARD_TYPES:
            needed = self.wants(record_type) or (
                record_type == RecordType.TXT.value and self.wants(RecordType.SPF.value)
            )
            if not needed:
                continue
            self.records.extend(self._query(self.domain, record_type, record_type))

        if self.wants(RecordType.CNAME.value):
            self.lookup_cname_fallback()

    def lookup_cname_fallback(self) -> None:
        """Look at the www/bare counterpart when the domain has no CNAME.

        Many sites point ``www`` at direct A records instead of a CNAME alias,
        so an empty CNAME answer is reported with the counterpart's A records
        and an advisory rather than as an error.
        """
        if any(record.type == RecordType.CNAME.value for record in self.records):
            return

        variant, tag = www_variant(self.domain)
        found = self._query(variant, RecordType.A.value, tag)
        if not found:
            return

        self.records.extend(record.retag(tag) for record in found)
        self.messages.append(
            f"No CNAME record found for {self.domain}; {variant} resolves "
            f"with direct A records instead of a CNAME alias."
        )

    def derive_spf(self) -> None:
        """Re-tag TXT records that hold an SPF policy."""
        spf_records = [
            record.retag(RecordType.SPF.value)
            for record in self.records
            if record.type == RecordType.TXT.value
            and record.value.lower().startswith(SPF_PREFIX)
        ]
        self.records.extend(spf_records)

    def lookup_dmarc(self) -> None:
        """Query TXT at ``_dmarc.<domain>``."""
        found = self._query(f"_dmarc.{self.domain}", RecordType.TXT.value, RecordType.DMARC.value)
        self.records.extend(record.retag(RecordType.DMARC.value) for record in found)

    def lookup_dkim(self) -> None:
        """Probe the common DKIM selectors; missing selectors are expected."""
        for selector in DKIM_SELECTORS:
            name = f"{selector}._domainkey.{self.domain}"
            try:
                result = resolve_with_fallback(
                    name,
                    RecordType.TXT.value,
                    providers=self.providers,
                    timeout_ms=self.timeout_ms,
                )
            except AllProvidersFailedError:
                logger.debug(f"No DKIM record for selector {selector} on {self.domain}")
                continue
            self.records.extend(
                record.retag(RecordType.DKIM.value, f"{selector}: {record.value}")
                for record in result.records
            )

    def filtered_records(self) -> List[DNSRecord]:
        """Records of the requested types, keeping CNAME fallback A records."""
        if not self.requested:
            return list(self.records)
        return [
            record
            for record in self.records
            if record.type in self.requested
            or (record.type in CNAME_FALLBACK_TAGS and RecordType.CNAME.value in self.requested)
        ]

    def run(self) -> DNSLookupResult:
        """Run every requested lookup and merge the results.

        Raises:
            RecordsNotFoundError: If nothing was found after filtering.
        """
        self.lookup_standard_types()
        if self.wants(RecordType.SPF.value):
            self.derive_spf()
        if self.wants(RecordType.DMARC.value):
            self.lookup_dmarc()
        if self.wants(RecordType.DKIM.value):
            self.lookup_dkim()

        records = self.filtered_records()
        if not records:
            raise RecordsNotFoundError(self.domain)
        return DNSLookupResult(domain=self.domain, records=records, messages=list(self.messages))


def lookup_records(
    domain: str,
    record_types: Optional[Iterable[str]] = None,
    providers: Optional[Sequence[DoHProvider]] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> DNSLookupResult:
    """Look up several record types for a domain.

    Args:
        domain: Cleaned domain name.
        record_types: Requested types; empty or None means all standard types
            plus SPF, DMARC and DKIM.
        providers: Fallback provider order (default: Cloudflare, Google).
        timeout_ms: Per-attempt timeout in milliseconds.

    Returns:
        DNSLookupResult: Merged records and advisory messages.

    Raises:
        InvalidDomainError: If domain is empty.
        RecordsNotFoundError: If no records of the requested types exist.
    """
    start = time.monotonic()
    aggregator = DNSAggregator(domain, record_types, providers, timeout_ms)
    try:
        result = aggregator.run()
    finally:
        log_lookup_summary(
            domain=aggregator.domain,
            requested_types=aggregator.requested,
            record_count=len(aggregator.filtered_records()),
            failed_types=aggregator.failed_types,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
    return result
