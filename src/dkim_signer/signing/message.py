"""
Message splitting and header parsing

Splits a raw RFC 5322 message into its header block and body and parses the
header block into an ordered list of HeaderField records. Folding is kept in
the raw values; unfolding belongs to canonicalization.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from ..exceptions import MalformedMessageError
from .types import HeaderField, RawMessage


CRLF = '\r\n'

_LINE_ENDING = re.compile(r'\r?\n')


@dataclass
class ParsedMessage:
    """
    A message split into header fields and body

    Attributes:
        headers: Header fields in wire order
        body: Body text with CRLF line endings
        original: Whole message with CRLF line endings
    """
    headers: List[HeaderField]
    body: str
    original: str


def decode_message(message: RawMessage) -> str:
    """
    Decode a raw message to text.

    Args:
        message: Message as str, or UTF-8 bytes

    Returns:
        str: Message text

    Raises:
        MalformedMessageError: If the message cannot be decoded
    """
    if isinstance(message, str):
        return message

    if isinstance(message, (bytes, bytearray)):
        try:
            return bytes(message).decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedMessageError(
                f"Message is not valid UTF-8 text: {e}",
                {"position": e.start}
            ) from e

    raise MalformedMessageError(
        f"Message must be str or bytes, got {type(message).__name__}",
        {"message_type": type(message).__name__}
    )


def normalize_line_endings(text: str) -> str:
    """Replace every bare LF or CRLF with CRLF."""
    return _LINE_ENDING.sub(CRLF, text)


def split_message(message: RawMessage) -> Tuple[str, str, str]:
    """
    Split a message at the first empty line.

    Args:
        message: Raw message

    Returns:
        tuple: (header block, body, normalized message). The header block has
        no trailing CRLF. The body is empty if there is no empty line.

    Raises:
        MalformedMessageError: If the message cannot be decoded
    """
    normalized = normalize_line_endings(decode_message(message))

    if normalized.startswith(CRLF):
        return '', normalized[len(CRLF):], normalized

    headers, sep, body = normalized.partition(CRLF + CRLF)
    if not sep and headers.endswith(CRLF):
        headers = headers[:-len(CRLF)]

    return headers, body, normalized


def parse_headers(header_block: str) -> List[HeaderField]:
    """
    Parse a header block into header fields.

    Continuation lines are appended to the previous field with their CRLF so
    that simple canonicalization can reproduce them exactly.

    Args:
        header_block: CRLF-separated header lines

    Returns:
        list: HeaderField records in wire order

    Raises:
        MalformedMessageError: If a line is neither a field nor a continuation
    """
    headers: List[HeaderField] = []
    if not header_block:
        return headers

    for number, line in enumerate(header_block.split(CRLF), start=1):
        if line[:1] in (' ', '\t'):
            if not headers:
                raise MalformedMessageError(
                    "Continuation line without a preceding header field",
                    {"line": number}
                )
            previous = headers[-1]
            headers[-1] = HeaderField(previous.name, previous.value + CRLF + line)
            continue

        name, sep, value = line.partition(':')
        if number == 1 and line.startswith('From ') and (not sep or ' ' in name.strip()):
            # mbox envelope line
            continue
        if sep and name.strip():
            headers.append(HeaderField(name, value))
        else:
            raise MalformedMessageError(
                f"Unexpected characters in header block: {line!r}",
                {"line": number}
            )

    return headers


def parse_message(message: RawMessage) -> ParsedMessage:
    """
    Split and parse a raw message.

    Args:
        message: Raw message as str or UTF-8 bytes, LF or CRLF line endings

    Returns:
        ParsedMessage: Header fields, body and normalized original

    Raises:
        MalformedMessageError: If the message cannot be decoded or parsed
    """
    header_block, body, normalized = split_message(message)
    return ParsedMessage(
        headers=parse_headers(header_block),
        body=body,
        original=normalized
    )
