"""Map JSON DoH answer entries to DNSRecord objects."""

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from routekit.models.dns_record import DNSRecord, canonical_type, type_name
from routekit.utils.txt_normalization import normalize_txt_record


logger = logging.getLogger(__name__)

MX_PATTERN = re.compile(r"^(\d+)\s+(\S.*)$")

CAA_CRITICAL_FLAG = 0x80


def format_mx(data: str) -> tuple[str, Optional[int]]:
    """Split ``"<priority> <exchange>"`` into exchange and priority.

    Args:
        data: Raw MX payload.

    Returns:
        tuple[str, Optional[int]]: (value, priority); priority is None when the
        payload does not start with an integer.

    Examples:
        >>> format_mx("10 mail.example.com.")
        ('mail.example.com.', 10)
        >>> format_mx("mail.example.com.")
        ('mail.example.com.', None)
    """
    match = MX_PATTERN.match(data)
    if not match:
        return data, None
    return match.group(2), int(match.group(1))


def format_caa(data: str) -> str:
    """Format ``"<flags> <tag> <value>"`` as ``"<tag>: <value>[ (critical)]"``.

    Examples:
        >>> format_caa('0 issue "letsencrypt.org"')
        'issue: letsencrypt.org'
        >>> format_caa('128 iodef "mailto:security@example.com"')
        'iodef: mailto:security@example.com (critical)'
    """
    tokens = data.split(None, 2)
    if len(tokens) < 3:
        return data
    flags_text, tag, value = tokens
    try:
        flags = int(flags_text)
    except ValueError:
        return data
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    critical = " (critical)" if flags & CAA_CRITICAL_FLAG else ""
    return f"{tag}: {value}{critical}"


def format_soa(data: str) -> str:
    """Format a 7-field SOA payload as ``"<nsname> <hostmaster> (Serial: <n>)"``.

    Examples:
        >>> format_soa("ns1.example.com. hostmaster.example.com. 2024010101 7200 3600 1209600 300")
        'ns1.example.com. hostmaster.example.com. (Serial: 2024010101)'
    """
    tokens = data.split()
    if len(tokens) < 7 or not tokens[2].isdigit():
        return data
    nsname, hostmaster, serial = tokens[:3]
    return f"{nsname} {hostmaster} (Serial: {serial})"


def _parse_ttl(raw_ttl: Any) -> Optional[int]:
    if isinstance(raw_ttl, bool) or not isinstance(raw_ttl, int):
        return None
    return raw_ttl if raw_ttl >= 0 else None


def _type_matches(resolved: str, requested: str) -> bool:
    if resolved == requested:
        return True
    return requested.upper() == "TXT" and resolved.upper() == "TXT"


def map_answer(answer: Mapping[str, Any], requested_type: str) -> Optional[DNSRecord]:
    """Convert one ``Answer`` entry into a DNSRecord.

    Args:
        answer: Entry shaped ``{name, type, TTL, data}``.
        requested_type: Record type the query asked for.

    Returns:
        Optional[DNSRecord]: The mapped record, or None when the entry's type
        differs from the requested one (resolvers include CNAME chains) or
        its numeric type cannot be read.
    """
    try:
        code = int(answer.get("type"))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.debug(f"Skipping answer with unreadable type: {answer!r}")
        return None

    rr_type = type_name(code)
    if not _type_matches(rr_type, canonical_type(requested_type)):
        return None

    raw_data = answer.get("data", "")
    ttl = _parse_ttl(answer.get("TTL"))

    if rr_type == "TXT":
        if isinstance(raw_data, (list, tuple)):
            value = normalize_txt_record([str(chunk) for chunk in raw_data])
        else:
            value = normalize_txt_record(str(raw_data))
        return DNSRecord(type=rr_type, value=value, ttl=ttl)

    data = str(raw_data)

    if rr_type == "MX":
        value, priority = format_mx(data)
        return DNSRecord(type=rr_type, value=value, ttl=ttl, priority=priority)

    if rr_type == "CAA":
        return DNSRecord(type=rr_type, value=format_caa(data), ttl=ttl)

    if rr_type == "SOA":
        return DNSRecord(type=rr_type, value=format_soa(data), ttl=ttl)

    return DNSRecord(type=rr_type, value=data, ttl=ttl)


def map_answers(
    answers: Iterable[Mapping[str, Any]], requested_type: str
) -> List[DNSRecord]:
    """Map an ``Answer`` array, dropping entries of other types.

    Args:
        answers: Provider answer entries.
        requested_type: Record type the query asked for.

    Returns:
        List[DNSRecord]: Records in answer order.
    """
    records: List[DNSRecord] = []
    for answer in answers:
        if not isinstance(answer, Mapping):
            continue
        record = map_answer(answer, requested_type)
        if record is not None:
            records.append(record)
    return records
