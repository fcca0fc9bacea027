"""
Utility functions for DKIM signing

This module provides timestamp handling, body hash calculation and
header name helpers shared by the signing modules.
"""

import base64
import hashlib
import math
import time
from datetime import datetime, timezone
from typing import Optional

from ..exceptions import InvalidConfigurationError, UnsupportedAlgorithmError
from .types import SignatureAlgorithm, Timestamp


HASH_ALGORITHMS = {
    SignatureAlgorithm.RSA_SHA1: hashlib.sha1,
    SignatureAlgorithm.RSA_SHA256: hashlib.sha256,
}


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def to_unix_timestamp(value: Timestamp, field_name: str = "timestamp") -> int:
    """
    Convert a timestamp value to whole seconds since the epoch.

    Naive datetimes are taken to be UTC.

    Args:
        value: int, float or datetime
        field_name: Name used in error details

    Returns:
        int: Unix timestamp

    Raises:
        InvalidConfigurationError: If the value is not a usable timestamp
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name, "value_type": type(value).__name__}
        )

    if not math.isfinite(value) or value < 0:
        raise InvalidConfigurationError(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name}
        )

    return int(value)


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for case-insensitive matching.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.strip().lower()


def calculate_body_hash(canonical_body: str, algorithm: SignatureAlgorithm) -> str:
    """
    Calculate the bh= value for a canonicalized body.

    Args:
        canonical_body: Body already canonicalized (may be empty)
        algorithm: Signing algorithm, which fixes the digest

    Returns:
        str: Base64-encoded digest

    Raises:
        UnsupportedAlgorithmError: If the algorithm has no digest
    """
    hasher = HASH_ALGORITHMS.get(SignatureAlgorithm.coerce(algorithm))
    if hasher is None:
        raise UnsupportedAlgorithmError(
            f"Unsupported digest algorithm: {algorithm}",
            {"algorithm": algorithm}
        )

    digest = hasher(canonical_body.encode('utf-8')).digest()
    return base64.b64encode(digest).decode('ascii')


def domain_matches(identity: str, domain: str) -> bool:
    """
    Check that the domain part of an i= identity is d= or a subdomain of it.

    Args:
        identity: Identity such as "@example.com" or "user@mail.example.com"
        domain: Signing domain

    Returns:
        bool: True if the identity may be used with the domain
    """
    _, sep, identity_domain = identity.rpartition('@')
    if not sep:
        return False

    identity_domain = identity_domain.lower().rstrip('.')
    domain = domain.lower().rstrip('.')
    return identity_domain == domain or identity_domain.endswith('.' + domain)


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000


def optional_timestamp(value: Optional[Timestamp], field_name: str) -> Optional[int]:
    """Convert an optional timestamp, passing None through."""
    if value is None:
        return None
    return to_unix_timestamp(value, field_name)
