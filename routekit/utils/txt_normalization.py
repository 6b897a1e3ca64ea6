"""TXT record normalization utilities.

RFC 1035 allows a TXT record to be split into several <character-string>
chunks. Some providers return the chunks already joined, others return them
as a list. Joining with the empty string makes both shapes comparable.
"""

from typing import List, Sequence, Union

TxtValue = Union[str, Sequence[str]]


def normalize_txt_record(txt_value: TxtValue) -> str:
    """Normalize a TXT record value for comparison.

    Args:
        txt_value: A single string or a sequence of chunk strings.

    Returns:
        str: Chunks joined with "" in order; a string is returned unchanged.

    Examples:
        >>> normalize_txt_record(["v=spf1 ", "~all"])
        'v=spf1 ~all'
        >>> normalize_txt_record("v=spf1 ~all")
        'v=spf1 ~all'
        >>> normalize_txt_record([])
        ''
    """
    if isinstance(txt_value, str):
        return txt_value
    return "".join(txt_value)


def normalize_txt_records(txt_values: Sequence[TxtValue]) -> List[str]:
    """Normalize each of several TXT record values.

    Args:
        txt_values: TXT values, each a string or a chunk sequence.

    Returns:
        List[str]: Normalized values in input order.
    """
    return [normalize_txt_record(value) for value in txt_values]


def are_txt_records_equivalent(value1: TxtValue, value2: TxtValue) -> bool:
    """Check if two TXT values are identical after normalization.

    Examples:
        >>> are_txt_records_equivalent("v=spf1 ~all", ["v=spf1 ", "~all"])
        True
    """
    return normalize_txt_record(value1) == normalize_txt_record(value2)
