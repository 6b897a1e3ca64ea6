"""DNS-over-HTTPS client for JSON DoH endpoints.

Speaks the JSON DNS profile shared by Google and Cloudflare:
``GET <endpoint>?name=<domain>&type=<code>&cd=true`` with
``Accept: application/dns-json``, answered by ``{"Status": <rcode>,
"Answer": [{"name", "type", "TTL", "data"}]}``.
"""

import json
import logging
import threading
import time
from typing import Any, Dict, Optional

import requests

from routekit.exceptions import (
    DoHDnsError,
    DoHHttpError,
    DoHNetworkError,
    DoHTimeoutError,
    InvalidDomainError,
)
from routekit.models.query_outcome import DoHResult
from routekit.models.dns_record import query_type_param
from routekit.utils.record_mapper import map_answers


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 2000

# Body read size; the deadline is checked between reads
READ_CHUNK_BYTES = 64

USER_AGENT = "RouteKit-DoH/1.0"

DOH_HEADERS = {
    "Accept": "application/dns-json",
    "User-Agent": USER_AGENT,
}


def build_query_params(domain: str, record_type: str) -> dict:
    """Build DoH query-string parameters.

    ``cd=true`` (Checking Disabled) asks the resolver to skip DNSSEC
    validation so that broken signatures still return data.

    Examples:
        >>> build_query_params("example.com", "A")
        {'name': 'example.com', 'type': '1', 'cd': 'true'}
    """
    return {"name": domain, "type": query_type_param(record_type), "cd": "true"}


def _fetch_body(
    endpoint_url: str,
    params: dict,
    timeout_ms: int,
    deadline: float,
    provider: Optional[str],
) -> bytes:
    """GET the endpoint and read the body, giving up once the deadline passes.

    The body is streamed in small chunks so that an endpoint trickling its
    answer cannot hold the connection open past the deadline.
    """
    timeout_s = timeout_ms / 1000
    try:
        response = requests.get(
            endpoint_url,
            params=params,
            headers=DOH_HEADERS,
            timeout=(timeout_s, timeout_s),
            stream=True,
        )
    except requests.exceptions.Timeout as e:
        raise DoHTimeoutError(timeout_ms, provider) from e
    except requests.exceptions.RequestException as e:
        raise DoHNetworkError(f"Network error: {e}", provider) from e

    try:
        if not response.ok:
            raise DoHHttpError(response.status_code, response.reason or "", provider)

        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=READ_CHUNK_BYTES):
                if time.monotonic() > deadline:
                    raise DoHTimeoutError(timeout_ms, provider)
                chunks.append(chunk)
        except requests.exceptions.Timeout as e:
            raise DoHTimeoutError(timeout_ms, provider) from e
        except requests.exceptions.RequestException as e:
            raise DoHNetworkError(f"Network error: {e}", provider) from e
        return b"".join(chunks)
    finally:
        response.close()


def query_doh(
    endpoint_url: str,
    domain: str,
    record_type: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    provider: Optional[str] = None,
) -> DoHResult:
    """Send one DoH query and map its answer.

    The whole exchange (connect, headers and body) races a single deadline of
    ``timeout_ms``. The request runs on a daemon thread; when the deadline
    passes first the query is abandoned and reported as timed out, and the
    thread drops the connection at its next read.

    Args:
        endpoint_url: JSON DoH endpoint URL.
        domain: Name to resolve.
        record_type: Record type name (``"MX"``) or numeral (``"15"``).
        timeout_ms: Overall deadline in milliseconds.
        provider: Provider name attached to raised errors and the result.

    Returns:
        DoHResult: Records of the requested type (possibly empty) and elapsed time.

    Raises:
        InvalidDomainError: If domain is empty.
        ValueError: If timeout_ms is not positive.
        DoHTimeoutError: If the provider did not answer in time.
        DoHHttpError: If the HTTP status is outside 2xx.
        DoHDnsError: If the answer carries a non-zero RCODE.
        DoHNetworkError: On transport failures or an unreadable body.
    """
    if not domain:
        raise InvalidDomainError("Domain name is required")
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be a positive number")

    params = build_query_params(domain, record_type)
    start = time.monotonic()
    deadline = start + timeout_ms / 1000
    outcome: Dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["body"] = _fetch_body(endpoint_url, params, timeout_ms, deadline, provider)
        except Exception as e:
            outcome["error"] = e

    worker = threading.Thread(
        target=target, name=f"doh-{provider or endpoint_url}", daemon=True
    )
    worker.start()
    worker.join(max(0.0, deadline - time.monotonic()))

    if worker.is_alive():
        logger.debug(f"Abandoning DoH {record_type} {domain} via {provider or endpoint_url}")
        raise DoHTimeoutError(timeout_ms, provider)
    if "error" in outcome:
        raise outcome["error"]

    elapsed_ms = int((time.monotonic() - start) * 1000)

    try:
        body = json.loads(outcome["body"])
    except ValueError as e:
        raise DoHNetworkError(f"Invalid JSON in DoH response: {e}", provider) from e

    if not isinstance(body, dict):
        raise DoHNetworkError("Malformed DoH response: expected a JSON object", provider)

    try:
        rcode = int(body.get("Status", 0))
    except (TypeError, ValueError) as e:
        raise DoHNetworkError("Malformed DoH response: unreadable Status", provider) from e
    if rcode != 0:
        raise DoHDnsError(rcode, provider)

    answers = body.get("Answer")
    if not isinstance(answers, list):
        answers = []

    records = map_answers(answers, record_type)
    logger.debug(
        f"DoH {record_type} {domain} via {provider or endpoint_url}: "
        f"{len(records)} records in {elapsed_ms}ms"
    )
    return DoHResult(records=records, elapsed_ms=elapsed_ms, rcode=0, provider=provider)
