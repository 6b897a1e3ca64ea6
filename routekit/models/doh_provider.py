"""DoH provider configuration entries."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class DoHProvider:
    """A public DNS-over-HTTPS service answering the JSON DNS profile.

    Attributes:
        name: Display name (e.g., "Cloudflare (Mozilla)").
        endpoint_url: JSON DoH endpoint, without query string.
        location: Coarse service region shown in reports.
        organization: Operator of the service.
    """

    name: str
    endpoint_url: str
    location: str
    organization: str

    def to_json(self) -> dict:
        """Serialize to JSON-compatible dict.

        Returns:
            dict: JSON-serializable representation.
        """
        return {
            "name": self.name,
            "endpoint_url": self.endpoint_url,
            "location": self.location,
            "organization": self.organization,
        }


CLOUDFLARE = DoHProvider(
    name="Cloudflare",
    endpoint_url="https://cloudflare-dns.com/dns-query",
    location="Global",
    organization="Cloudflare",
)

GOOGLE = DoHProvider(
    name="Google",
    endpoint_url="https://dns.google/resolve",
    location="Global",
    organization="Google",
)

# Primary first, then alternates
FALLBACK_PROVIDERS: List[DoHProvider] = [CLOUDFLARE, GOOGLE]

PROPAGATION_PROVIDERS: List[DoHProvider] = [
    GOOGLE,
    CLOUDFLARE,
    DoHProvider(
        name="Cloudflare (Mozilla)",
        endpoint_url="https://mozilla.cloudflare-dns.com/dns-query",
        location="Global",
        organization="Cloudflare",
    ),
    DoHProvider(
        name="NextDNS",
        endpoint_url="https://dns.nextdns.io/dns-query",
        location="Global",
        organization="NextDNS",
    ),
    DoHProvider(
        name="AliDNS",
        endpoint_url="https://dns.alidns.com/resolve",
        location="Asia",
        organization="Alibaba",
    ),
    DoHProvider(
        name="DNS.SB",
        endpoint_url="https://doh.sb/dns-query",
        location="Global",
        organization="DNS.SB",
    ),
]
