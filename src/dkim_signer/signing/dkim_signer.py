"""
RFC 6376 DKIM signer

This module provides the main signer: it digests the canonical body, builds
the DKIM-Signature tag list with an empty b=, signs the selected headers
followed by that tag list, and fills in b=.
"""

import base64
import dataclasses
import logging
from typing import Optional

from ..crypto.rsa import load_private_key, sign_message as rsa_sign
from ..exceptions import DKIMSignerError, SigningError, SigningErrorCodes
from .canonicalization import canonicalize_body, canonicalize_headers
from .dkim_header import SignatureTags, build_signing_input
from .header_selection import select_headers
from .message import ParsedMessage, parse_message
from .signing_config import apply_signing_options, validate_signing_config
from .types import (
    DKIMSignatureResult,
    RawMessage,
    ResolvedSigningConfig,
    SigningConfig,
    SigningOptions,
)
from .utils import PerformanceTimer, calculate_body_hash

logger = logging.getLogger(__name__)

DKIM_VERSION = '1'
QUERY_METHOD = 'dns/txt'


class DKIMSigner:
    """
    DKIM signer for email messages

    The signer keeps only its configuration and the loaded key, both treated
    as read-only, so one instance can sign messages from several threads.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration

        Raises:
            ConfigurationError: If configuration is invalid
            SigningError: If the private key cannot be loaded
        """
        validate_signing_config(config)
        self.config = dataclasses.replace(
            config,
            private_key=load_private_key(config.private_key),
            signed_headers=list(config.signed_headers)
        )
        logger.info(f"Initialized DKIM signer for domain={config.domain}, selector={config.selector}")

    def sign(self, message: RawMessage, options: Optional[SigningOptions] = None) -> DKIMSignatureResult:
        """
        Sign a message.

        Args:
            message: Raw message as str or UTF-8 bytes, LF or CRLF line endings
            options: Optional per-message overrides

        Returns:
            DKIMSignatureResult: Signature header and the data it covers

        Raises:
            ConfigurationError: If the resolved configuration is invalid
            MalformedMessageError: If the message cannot be parsed
            SigningError: If signing fails
        """
        return self._sign(parse_message(message), options)

    def sign_message(self, message: RawMessage, options: Optional[SigningOptions] = None) -> str:
        """
        Sign a message and prepend the DKIM-Signature header to it.

        Args:
            message: Raw message
            options: Optional per-message overrides

        Returns:
            str: Signed message with CRLF line endings
        """
        parsed = parse_message(message)
        return self._sign(parsed, options).header + parsed.original

    def _sign(self, parsed: ParsedMessage, options: Optional[SigningOptions]) -> DKIMSignatureResult:
        timer = PerformanceTimer()
        resolved = apply_signing_options(self.config, options, self.config.private_key)

        try:
            result = self._sign_parsed(parsed, resolved)
        except DKIMSignerError:
            raise
        except Exception as e:
            raise SigningError(
                f"DKIM signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            ) from e

        logger.debug(f"Signed message for {resolved.domain} in {timer.elapsed_ms():.2f}ms")
        return result

    def _sign_parsed(self, parsed: ParsedMessage, resolved: ResolvedSigningConfig) -> DKIMSignatureResult:
        # Digest body
        canonical_body = canonicalize_body(parsed.body, resolved.body_canonicalization)
        body_hash = calculate_body_hash(canonical_body, resolved.algorithm)
        logger.debug(f"Body hash ({resolved.algorithm.value}): {body_hash}")

        # Skeleton with empty b=
        tags = build_signature_tags(resolved, body_hash)

        # Sign
        signed_headers = select_headers(parsed.headers, resolved.signed_headers)
        canonical_headers = canonicalize_headers(signed_headers, resolved.header_canonicalization)
        signing_input = build_signing_input(canonical_headers, tags, resolved.header_canonicalization)
        signature = rsa_sign(resolved.private_key, signing_input, resolved.algorithm)
        tags['b'] = base64.b64encode(signature).decode('ascii')

        logger.debug(f"Signed headers: {[h.name for h in signed_headers]}")

        return DKIMSignatureResult(
            header=tags.to_header(),
            tags=tags,
            body_hash=body_hash,
            signing_input=signing_input,
            signed_headers=signed_headers
        )


def build_signature_tags(resolved: ResolvedSigningConfig, body_hash: str) -> SignatureTags:
    """
    Build the DKIM-Signature tag list with an empty b= tag.

    Tag order is v, a, c, d, i (optional), q, s, t, x (optional), bh, h, b.

    Args:
        resolved: Resolved signing configuration
        body_hash: Base64 body hash

    Returns:
        SignatureTags: Unsigned tag list
    """
    tags = SignatureTags()
    tags['v'] = DKIM_VERSION
    tags['a'] = resolved.algorithm.value
    tags['c'] = resolved.canonicalization
    tags['d'] = resolved.domain
    if resolved.identity is not None:
        tags['i'] = resolved.identity
    tags['q'] = QUERY_METHOD
    tags['s'] = resolved.selector
    tags['t'] = resolved.timestamp
    if resolved.expiration is not None:
        tags['x'] = resolved.expiration
    tags['bh'] = body_hash
    tags['h'] = ':'.join(resolved.signed_headers)
    tags['b'] = ''
    return tags


def create_signer(config: SigningConfig) -> DKIMSigner:
    """
    Create a new DKIM signer.

    Args:
        config: Signing configuration

    Returns:
        DKIMSigner: Configured signer instance
    """
    return DKIMSigner(config)


def sign(message: RawMessage, config: SigningConfig, options: Optional[SigningOptions] = None) -> str:
    """
    Sign a message and return the DKIM-Signature header line.

    Args:
        message: Raw message
        config: Signing configuration
        options: Optional per-message overrides

    Returns:
        str: "DKIM-Signature: ..." terminated by CRLF
    """
    return create_signer(config).sign(message, options).header


def sign_message(message: RawMessage, config: SigningConfig, options: Optional[SigningOptions] = None) -> str:
    """
    Sign a message and return it with the DKIM-Signature header prepended.

    Args:
        message: Raw message
        config: Signing configuration
        options: Optional per-message overrides

    Returns:
        str: Signed message with CRLF line endings
    """
    return create_signer(config).sign_message(message, options)
