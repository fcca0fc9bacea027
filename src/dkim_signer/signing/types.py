"""
Type definitions for DKIM signing

This module provides type definitions and data classes for producing
RFC 6376 DKIM-Signature header fields with RSA keys.
"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple, Union, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import UnsupportedAlgorithmError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
    from .dkim_header import SignatureTags


class SignatureAlgorithm(str, Enum):
    """Signing algorithms accepted in the a= tag"""
    RSA_SHA1 = "rsa-sha1"
    RSA_SHA256 = "rsa-sha256"

    @classmethod
    def coerce(cls, value: Union['SignatureAlgorithm', str]) -> 'SignatureAlgorithm':
        """
        Convert a string or enum member to a SignatureAlgorithm.

        Raises:
            UnsupportedAlgorithmError: If the identifier is not recognized
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedAlgorithmError(
                f"Unknown signing algorithm: '{value}'",
                {"algorithm": value, "supported": [a.value for a in cls]}
            )


class Canonicalization(str, Enum):
    """Header and body canonicalization algorithms"""
    SIMPLE = "simple"
    RELAXED = "relaxed"

    @classmethod
    def coerce(cls, value: Union['Canonicalization', str]) -> 'Canonicalization':
        """
        Convert a string or enum member to a Canonicalization.

        Raises:
            UnsupportedAlgorithmError: If the identifier is not recognized
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedAlgorithmError(
                f"Unknown canonicalization algorithm: '{value}'",
                {"canonicalization": value, "supported": [c.value for c in cls]}
            )


# Header fields signed by default. Each name is listed twice so that a second
# instance cannot be added after signing without breaking the signature.
_SIGNABLE_HEADERS = (
    'Date', 'From', 'To', 'Message-ID', 'Subject', 'MIME-Version',
    'Content-Type', 'Content-Transfer-Encoding', 'List-Unsubscribe',
    'List-Id', 'Reply-To', 'Cc',
)
DEFAULT_SIGNED_HEADERS: Tuple[str, ...] = _SIGNABLE_HEADERS + _SIGNABLE_HEADERS


@dataclass(frozen=True)
class HeaderField:
    """
    A single header field as it appeared on the wire

    Attributes:
        name: Field name exactly as written before the colon
        value: Raw text after the colon, folding CRLFs kept, without the final CRLF
    """
    name: str
    value: str

    @property
    def normalized_name(self) -> str:
        """Lowercase name used for case-insensitive matching"""
        return self.name.strip().lower()


@dataclass
class SigningConfig:
    """
    Configuration for DKIM signing

    Attributes:
        domain: Signing domain (d= tag)
        selector: Key selector (s= tag)
        private_key: RSA private key object or unencrypted PEM text
        algorithm: Signing algorithm (a= tag)
        header_canonicalization: Canonicalization applied to signed headers
        body_canonicalization: Canonicalization applied to the body
        identity: Optional agent or user identifier (i= tag)
        signed_headers: Ordered header names to sign (h= tag), repeats allowed
        signature_ttl: Optional signature lifetime in seconds used for x=
        timestamp_generator: Optional callable returning the signing time
    """
    domain: Optional[str] = None
    selector: Optional[str] = None
    private_key: Optional['PrivateKeyInput'] = None
    algorithm: SignatureAlgorithm = SignatureAlgorithm.RSA_SHA256
    header_canonicalization: Canonicalization = Canonicalization.RELAXED
    body_canonicalization: Canonicalization = Canonicalization.RELAXED
    identity: Optional[str] = None
    signed_headers: List[str] = field(default_factory=lambda: list(DEFAULT_SIGNED_HEADERS))
    signature_ttl: Optional[int] = None
    timestamp_generator: Optional[Callable[[], int]] = None

    def __post_init__(self):
        """Normalize algorithm identifiers and copy the header list"""
        self.algorithm = SignatureAlgorithm.coerce(self.algorithm)
        self.header_canonicalization = Canonicalization.coerce(self.header_canonicalization)
        self.body_canonicalization = Canonicalization.coerce(self.body_canonicalization)
        self.signed_headers = list(self.signed_headers)

    @property
    def canonicalization(self) -> str:
        """Value of the c= tag"""
        return f"{self.header_canonicalization.value}/{self.body_canonicalization.value}"


@dataclass
class SigningOptions:
    """
    Signing options for individual messages

    Attributes:
        timestamp: Signing time for this message (t= tag)
        expiration: Expiration time for this message (x= tag)
        identity: Override the configured identity
        signed_headers: Override the configured header list
    """
    timestamp: Optional['Timestamp'] = None
    expiration: Optional['Timestamp'] = None
    identity: Optional[str] = None
    signed_headers: Optional[List[str]] = None


@dataclass(frozen=True)
class ResolvedSigningConfig:
    """
    Fully resolved configuration for one signing operation

    Produced by resolve_signing_config from a SigningConfig and optional
    SigningOptions. Nothing downstream reads any other source.
    """
    domain: str
    selector: str
    private_key: 'RSAPrivateKey'
    algorithm: SignatureAlgorithm
    header_canonicalization: Canonicalization
    body_canonicalization: Canonicalization
    identity: Optional[str]
    signed_headers: Tuple[str, ...]
    timestamp: int
    expiration: Optional[int]

    @property
    def canonicalization(self) -> str:
        """Value of the c= tag"""
        return f"{self.header_canonicalization.value}/{self.body_canonicalization.value}"


@dataclass
class DKIMSignatureResult:
    """
    Generated DKIM signature

    Attributes:
        header: Complete "DKIM-Signature: ..." line terminated by CRLF
        tags: Tag list of the signature, b= populated
        body_hash: Base64 body hash (bh= tag)
        signing_input: Exact text that was signed
        signed_headers: Header instances covered by the signature, in signing order
    """
    header: str
    tags: 'SignatureTags'
    body_hash: str
    signing_input: str
    signed_headers: List[HeaderField]

    @property
    def signature(self) -> str:
        """Base64 signature (b= tag)"""
        return self.tags['b']


# Type aliases for convenience
PrivateKeyInput = Union['RSAPrivateKey', str, bytes]
Timestamp = Union[int, float, datetime]
TimestampGenerator = Callable[[], int]
RawMessage = Union[str, bytes, bytearray]
