"""DoH query result models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from routekit.models.dns_record import DNSRecord
from routekit.models.doh_provider import DoHProvider


class QueryStatus(Enum):
    """Terminal state of a single DoH query."""

    SUCCEEDED = "SUCCEEDED"
    TIMED_OUT = "TIMED_OUT"
    HTTP_ERROR = "HTTP_ERROR"
    DNS_ERROR = "DNS_ERROR"  # non-zero RCODE, e.g. NXDOMAIN or SERVFAIL
    NETWORK_ERROR = "NETWORK_ERROR"


@dataclass
class DoHResult:
    """Successful answer from one DoH endpoint.

    Attributes:
        records: Mapped records matching the requested type (may be empty).
        elapsed_ms: Wall-clock time of the HTTPS exchange.
        rcode: DNS RCODE of the answer, always 0 for a result.
        provider: Name of the provider that answered, when known.
    """

    records: List[DNSRecord]
    elapsed_ms: int
    rcode: int = 0
    provider: Optional[str] = None


@dataclass
class QueryOutcome:
    """Per-provider result of one propagation query.

    Attributes:
        provider: Provider that was queried.
        records: Records returned (empty on failure).
        succeeded: True when the provider answered with RCODE 0.
        elapsed_ms: Time spent on the query in milliseconds.
        error: Failure description (None on success).
        status: Classification of the query result.

    Invariants:
        - succeeded implies error is None
        - not succeeded implies records is empty and error is set
    """

    provider: DoHProvider
    records: List[DNSRecord] = field(default_factory=list)
    succeeded: bool = True
    elapsed_ms: int = 0
    error: Optional[str] = None
    status: QueryStatus = QueryStatus.SUCCEEDED

    def __post_init__(self) -> None:
        if self.elapsed_ms < 0:
            raise ValueError("elapsed_ms must be non-negative")
        if self.succeeded:
            if self.error is not None:
                raise ValueError("a successful outcome cannot carry an error")
            if self.status != QueryStatus.SUCCEEDED:
                raise ValueError(f"a successful outcome cannot have status {self.status.value}")
        else:
            if self.records:
                raise ValueError("a failed outcome cannot carry records")
            if not self.error:
                raise ValueError("error is required when succeeded=False")
            if self.status == QueryStatus.SUCCEEDED:
                raise ValueError("a failed outcome needs a failure status")

    @classmethod
    def failure(
        cls,
        provider: DoHProvider,
        status: QueryStatus,
        error: str,
        elapsed_ms: int = 0,
    ) -> "QueryOutcome":
        """Build a failed outcome."""
        return cls(
            provider=provider,
            records=[],
            succeeded=False,
            elapsed_ms=elapsed_ms,
            error=error,
            status=status,
        )

    def is_propagated(self) -> bool:
        """Check if this provider returned at least one record.

        Returns:
            bool: True if succeeded with non-empty records.
        """
        return self.succeeded and len(self.records) > 0

    def to_json(self) -> dict:
        """Serialize to JSON-compatible dict.

        Returns:
            dict: JSON-serializable representation.
        """
        return {
            "provider": self.provider.to_json(),
            "records": [record.to_json() for record in self.records],
            "succeeded": self.succeeded,
            "propagated": self.is_propagated(),
            "status": self.status.value,
            "elapsed_ms": self.elapsed_ms,
            "error": self.error,
        }
