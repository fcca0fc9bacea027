"""
dkim-signer - Message Signing Module

RFC 6376 DomainKeys Identified Mail signatures with RSA keys. This module
canonicalizes headers and body, selects the signed header instances and
produces the DKIM-Signature header field.
"""

from .types import (
    HeaderField,
    SigningConfig,
    SigningOptions,
    ResolvedSigningConfig,
    DKIMSignatureResult,
    SignatureAlgorithm,
    Canonicalization,
    DEFAULT_SIGNED_HEADERS,
)

from .message import (
    ParsedMessage,
    split_message,
    parse_headers,
    parse_message,
)

from .canonicalization import (
    canonicalize_header,
    canonicalize_headers,
    canonicalize_body,
)

from .header_selection import (
    select_headers,
    canonicalize_selected,
)

from .dkim_header import (
    SignatureTags,
    parse_tag_list,
    build_signing_input,
)

from .signing_config import (
    SigningConfigBuilder,
    create_signing_config,
    validate_signing_config,
    resolve_signing_config,
    apply_signing_options,
)

from .dkim_signer import (
    DKIMSigner,
    build_signature_tags,
    create_signer,
    sign,
    sign_message,
)

from .utils import (
    generate_timestamp,
    calculate_body_hash,
    normalize_header_name,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'DKIMSigner',
    'create_signer',
    'sign',
    'sign_message',
    'build_signature_tags',
    # Types
    'HeaderField',
    'SigningConfig',
    'SigningOptions',
    'ResolvedSigningConfig',
    'DKIMSignatureResult',
    'SignatureAlgorithm',
    'Canonicalization',
    'DEFAULT_SIGNED_HEADERS',
    # Message parsing
    'ParsedMessage',
    'split_message',
    'parse_headers',
    'parse_message',
    # Canonicalization
    'canonicalize_header',
    'canonicalize_headers',
    'canonicalize_body',
    'select_headers',
    'canonicalize_selected',
    # Signature header
    'SignatureTags',
    'parse_tag_list',
    'build_signing_input',
    # Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'validate_signing_config',
    'resolve_signing_config',
    'apply_signing_options',
    # Utilities
    'generate_timestamp',
    'calculate_body_hash',
    'normalize_header_name',
]
