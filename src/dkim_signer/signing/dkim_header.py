"""
DKIM-Signature tag list

The tag list is serialized in insertion order. That order is part of the
signed data, so tags are never reordered once added.
"""

from collections import OrderedDict
from typing import Iterator, Optional, Tuple

from ..exceptions import MalformedMessageError
from .canonicalization import CanonicalizationMode, canonicalize_header
from .message import CRLF
from .types import HeaderField


DKIM_SIGNATURE_HEADER = 'DKIM-Signature'

TAG_SEPARATOR = '; '


class SignatureTags:
    """
    Ordered tag=value mapping of a DKIM-Signature header field
    """

    def __init__(self, tags: Optional[Tuple[Tuple[str, str], ...]] = None):
        self._tags: 'OrderedDict[str, str]' = OrderedDict()
        for key, value in tags or ():
            self[key] = value

    def __setitem__(self, key: str, value) -> None:
        # Existing tags keep their position
        self._tags[key] = str(value)

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __contains__(self, key: object) -> bool:
        return key in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignatureTags):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self) -> str:
        return f"SignatureTags({self})"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._tags.get(key, default)

    def keys(self):
        return self._tags.keys()

    def items(self):
        return self._tags.items()

    def copy(self) -> 'SignatureTags':
        return SignatureTags(tuple(self.items()))

    def __str__(self) -> str:
        return TAG_SEPARATOR.join(f"{key}={value}" for key, value in self._tags.items())

    def as_header_field(self) -> HeaderField:
        """Header field as it is written in front of the message"""
        return HeaderField(DKIM_SIGNATURE_HEADER, f" {self}")

    def to_header(self) -> str:
        """Complete header line terminated by CRLF"""
        field = self.as_header_field()
        return f"{field.name}:{field.value}{CRLF}"

    def canonical_form(self, mode: CanonicalizationMode) -> str:
        """
        Canonical form of this header field as it enters the signed data.

        The DKIM-Signature field is hashed without its trailing CRLF
        (RFC 6376 section 3.7).
        """
        return canonicalize_header(self.as_header_field(), mode)[:-len(CRLF)]


def parse_tag_list(value: str) -> SignatureTags:
    """
    Parse a tag=value list such as the value of a DKIM-Signature field.

    Whitespace around tags and values, including folding, is removed.

    Args:
        value: Tag list text

    Returns:
        SignatureTags: Parsed tags in their original order

    Raises:
        MalformedMessageError: If an entry has no "=" or a tag repeats
    """
    tags = SignatureTags()
    entries = value.split(';')

    for index, entry in enumerate(entries):
        if not entry.strip():
            if index == len(entries) - 1:
                break
            raise MalformedMessageError("Empty tag in tag list", {"position": index})

        key, sep, tag_value = entry.partition('=')
        key = key.strip()
        if not sep or not key:
            raise MalformedMessageError(f"Invalid tag entry: {entry.strip()!r}", {"position": index})
        if key in tags:
            raise MalformedMessageError(f"Duplicate tag: {key}", {"tag": key})

        tags[key] = tag_value.replace(CRLF, '').strip(' \t')

    return tags


def build_signing_input(canonical_headers: str, tags: SignatureTags, mode: CanonicalizationMode) -> str:
    """
    Build the exact text signed for b=.

    Args:
        canonical_headers: Canonical block of the selected headers
        tags: Signature tags with b= empty
        mode: Header canonicalization

    Returns:
        str: Canonical headers followed by the canonical DKIM-Signature field
    """
    return canonical_headers + tags.canonical_form(mode)
