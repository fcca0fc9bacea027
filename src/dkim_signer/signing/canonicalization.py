"""
Header and body canonicalization for DKIM signatures

Implements the "simple" and "relaxed" algorithms of RFC 6376 section 3.4.
All functions are pure and operate on CRLF-normalized text.
"""

import re
from typing import Iterable, List, Union

from .message import CRLF
from .types import Canonicalization, HeaderField


_WSP_RUN = re.compile(r'[ \t]+')
_TRAILING_WSP = re.compile(r'[ \t]+$')

CanonicalizationMode = Union[Canonicalization, str]


def relaxed_header_name(name: str) -> str:
    """Lowercase a header name and drop whitespace before the colon."""
    return name.strip().lower()


def relaxed_header_value(value: str) -> str:
    """
    Unfold a header value, collapse whitespace runs and strip both ends.

    Args:
        value: Raw header value as it follows the colon

    Returns:
        str: Relaxed header value
    """
    unfolded = value.replace(CRLF, '')
    return _WSP_RUN.sub(' ', unfolded).strip(' \t')


def canonicalize_header(header: HeaderField, mode: CanonicalizationMode) -> str:
    """
    Canonicalize one header field.

    Args:
        header: Header field to canonicalize
        mode: "simple" or "relaxed"

    Returns:
        str: Canonical header line terminated by CRLF

    Raises:
        UnsupportedAlgorithmError: If the mode is unknown
    """
    mode = Canonicalization.coerce(mode)

    if mode is Canonicalization.SIMPLE:
        return f"{header.name}:{header.value}{CRLF}"

    return f"{relaxed_header_name(header.name)}:{relaxed_header_value(header.value)}{CRLF}"


def canonicalize_headers(headers: Iterable[HeaderField], mode: CanonicalizationMode) -> str:
    """
    Canonicalize header fields in the order given.

    Args:
        headers: Header fields
        mode: "simple" or "relaxed"

    Returns:
        str: Concatenated canonical header lines
    """
    mode = Canonicalization.coerce(mode)
    return ''.join(canonicalize_header(header, mode) for header in headers)


def _strip_trailing_empty_lines(lines: List[str]) -> List[str]:
    end = len(lines)
    while end and not lines[end - 1]:
        end -= 1
    return lines[:end]


def canonicalize_body(body: str, mode: CanonicalizationMode) -> str:
    """
    Canonicalize a message body.

    Trailing empty lines are removed in both modes. A body with nothing left
    canonicalizes to the empty string, and is hashed as such.

    Args:
        body: Body text with CRLF line endings
        mode: "simple" or "relaxed"

    Returns:
        str: Canonical body, every line terminated by CRLF, or ""

    Raises:
        UnsupportedAlgorithmError: If the mode is unknown
    """
    mode = Canonicalization.coerce(mode)

    lines = body.split(CRLF)
    if mode is Canonicalization.RELAXED:
        lines = [_TRAILING_WSP.sub('', _WSP_RUN.sub(' ', line)) for line in lines]

    lines = _strip_trailing_empty_lines(lines)
    if not lines:
        return ''

    return CRLF.join(lines) + CRLF
