"""DNS record models and the RR type table."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class RecordType(str, Enum):
    """Record type tags shown to users.

    SPF, DMARC and DKIM are derived from TXT lookups and have no wire code.
    """

    A = "A"
    AAAA = "AAAA"
    MX = "MX"
    TXT = "TXT"
    NS = "NS"
    CNAME = "CNAME"
    SOA = "SOA"
    CAA = "CAA"
    SPF = "SPF"
    DMARC = "DMARC"
    DKIM = "DKIM"


# IANA RR type codes, the only name <-> code table in the package
RR_TYPE_CODES: Dict[str, int] = {
    RecordType.A.value: 1,
    RecordType.NS.value: 2,
    RecordType.CNAME.value: 5,
    RecordType.SOA.value: 6,
    RecordType.MX.value: 15,
    RecordType.TXT.value: 16,
    RecordType.AAAA.value: 28,
    RecordType.CAA.value: 257,
}

RR_TYPE_NAMES: Dict[int, str] = {code: name for name, code in RR_TYPE_CODES.items()}

STANDARD_TYPES = ["A", "AAAA", "MX", "TXT", "NS", "CNAME", "SOA", "CAA"]


def type_name(code: int) -> str:
    """Map a numeric RR type code to its name.

    Args:
        code: IANA RR type code.

    Returns:
        str: Type name, or ``TYPE<n>`` for codes outside the table.

    Examples:
        >>> type_name(15)
        'MX'
        >>> type_name(999)
        'TYPE999'
    """
    return RR_TYPE_NAMES.get(code, f"TYPE{code}")


def type_code(name: str) -> Optional[int]:
    """Map a type name (or ``TYPE<n>`` / bare numeral) to its numeric code.

    Returns:
        Optional[int]: RR code, or None when the name is not a wire type.
    """
    upper = name.strip().upper()
    if upper in RR_TYPE_CODES:
        return RR_TYPE_CODES[upper]
    if upper.startswith("TYPE") and upper[4:].isdigit():
        return int(upper[4:])
    if upper.isdigit():
        return int(upper)
    return None


def canonical_type(record_type: str) -> str:
    """Return the canonical upper-case name for a requested record type.

    Numerals are resolved through the type table so that ``"16"`` and
    ``"txt"`` both become ``"TXT"``.
    """
    upper = record_type.strip().upper()
    if upper.isdigit():
        return type_name(int(upper))
    if upper.startswith("TYPE") and upper[4:].isdigit():
        return type_name(int(upper[4:]))
    return upper


def query_type_param(record_type: str) -> str:
    """Value for the DoH ``type`` query parameter.

    Known names are sent as their numeric code; anything else is passed
    through upper-cased.
    """
    code = type_code(record_type)
    if code is not None:
        return str(code)
    return record_type.strip().upper()


@dataclass(frozen=True)
class DNSRecord:
    """A single normalized DNS record.

    Attributes:
        type: Record type tag (``A``, ``TXT``, ``SPF``, ``TYPE99``...).
        value: Human-readable payload. TXT values are always fully joined.
        ttl: Time to live in seconds, when the provider reported one.
        priority: MX preference, split out of the raw payload.
    """

    type: str
    value: str
    ttl: Optional[int] = None
    priority: Optional[int] = None

    def retag(self, new_type: str, value: Optional[str] = None) -> "DNSRecord":
        """Copy this record under another type tag, optionally with a new value."""
        return DNSRecord(
            type=new_type,
            value=self.value if value is None else value,
            ttl=self.ttl,
            priority=self.priority,
        )

    def to_json(self) -> dict:
        """Serialize to a JSON-compatible dict, omitting absent fields.

        Returns:
            dict: ``{"type", "value"}`` plus ``ttl``/``priority`` when set.
        """
        data: dict = {"type": self.type, "value": self.value}
        if self.ttl is not None:
            data["ttl"] = self.ttl
        if self.priority is not None:
            data["priority"] = self.priority
        return data
