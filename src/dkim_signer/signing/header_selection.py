"""
Selection of the header field instances covered by a signature

Each requested name consumes the last not-yet-consumed instance of that name,
scanning from the bottom of the header block upward. A name with no instance
left contributes nothing to the signed data but stays in h=, so a header
added later under that name breaks the signature.
"""

from typing import List, Sequence

from .canonicalization import CanonicalizationMode, canonicalize_headers
from .types import HeaderField
from .utils import normalize_header_name


def select_headers(headers: Sequence[HeaderField], names: Sequence[str]) -> List[HeaderField]:
    """
    Select header fields to be signed.

    Args:
        headers: Parsed header fields in wire order
        names: Requested header names in signing order, repeats allowed

    Returns:
        list: Selected header fields in the order of the requested names

    >>> h = [HeaderField('From', ' biz'), HeaderField('Foo', ' bar'),
    ...      HeaderField('from', ' baz'), HeaderField('Subject', ' boring')]
    >>> [(f.name, f.value) for f in select_headers(h, ['from', 'subject', 'to', 'from'])]
    [('from', ' baz'), ('Subject', ' boring'), ('From', ' biz')]
    """
    consumed = [False] * len(headers)
    selected: List[HeaderField] = []

    for name in names:
        wanted = normalize_header_name(name)
        for index in range(len(headers) - 1, -1, -1):
            if not consumed[index] and headers[index].normalized_name == wanted:
                consumed[index] = True
                selected.append(headers[index])
                break

    return selected


def canonicalize_selected(
    headers: Sequence[HeaderField],
    names: Sequence[str],
    mode: CanonicalizationMode
) -> str:
    """
    Build the canonical header block covered by a signature.

    Args:
        headers: Parsed header fields in wire order
        names: Requested header names in signing order
        mode: Header canonicalization

    Returns:
        str: Canonical lines of the selected headers, each ending in CRLF
    """
    return canonicalize_headers(select_headers(headers, names), mode)
