"""Aggregate report models for propagation checks and record lookups.

These are the shapes handed to the presentation layer; each has a
``to_json()`` that the report formatter and the contract tests rely on.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from routekit.models.dns_record import DNSRecord
from routekit.models.query_outcome import QueryOutcome


@dataclass
class PropagationReport:
    """Cross-provider view of one domain/type query.

    Attributes:
        domain: Domain that was queried.
        record_type: Requested record type name.
        outcomes: One QueryOutcome per provider, in panel order.
        propagation_percentage: Share of providers returning records (0-100).
        is_consistent: True when every provider with records agrees.
        timestamp: When the report was produced (UTC).

    Invariants:
        - propagation_percentage == 100 * propagated_count / len(outcomes)
        - is_consistent is True when propagated_count <= 1
    """

    domain: str
    record_type: str
    outcomes: List[QueryOutcome]
    propagation_percentage: float
    is_consistent: bool
    timestamp: datetime

    @property
    def propagated_count(self) -> int:
        """Number of providers that returned at least one record."""
        return sum(1 for outcome in self.outcomes if outcome.is_propagated())

    @property
    def failed_providers(self) -> List[str]:
        """Names of providers whose query failed."""
        return [o.provider.name for o in self.outcomes if not o.succeeded]

    def to_json(self) -> dict:
        """Serialize to JSON-compatible dict.

        Returns:
            dict: JSON-serializable representation matching
            contracts/propagation-report-schema.json.
        """
        return {
            "domain": self.domain,
            "record_type": self.record_type,
            "timestamp": self.timestamp.isoformat(),
            "propagation_percentage": self.propagation_percentage,
            "is_consistent": self.is_consistent,
            "propagated_count": self.propagated_count,
            "total_providers": len(self.outcomes),
            "outcomes": [outcome.to_json() for outcome in self.outcomes],
        }


@dataclass
class DNSLookupResult:
    """Merged records for one domain across several record types.

    Attributes:
        domain: Domain that was looked up.
        records: Records in query order (standard types, then SPF, DMARC, DKIM).
        messages: Advisory notes for the user, never errors.
    """

    domain: str
    records: List[DNSRecord]
    messages: List[str] = field(default_factory=list)

    def to_json(self) -> dict:
        """Serialize to JSON-compatible dict.

        Returns:
            dict: JSON-serializable representation matching
            contracts/lookup-result-schema.json.
        """
        return {
            "domain": self.domain,
            "records": [record.to_json() for record in self.records],
            "messages": list(self.messages),
        }
