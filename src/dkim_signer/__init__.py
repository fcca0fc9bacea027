"""
dkim-signer
DKIM-Signature generation for email messages with RSA keys
"""

from .version import __version__
from .exceptions import (
    DKIMSignerError,
    ConfigurationError,
    MissingConfigurationError,
    UnsupportedAlgorithmError,
    InvalidConfigurationError,
    MalformedMessageError,
    SigningError,
    SigningErrorCodes,
)
from .signing import (
    # Core signing functionality
    DKIMSigner,
    create_signer,
    sign,
    sign_message,
    # Types
    HeaderField,
    SigningConfig,
    SigningOptions,
    DKIMSignatureResult,
    SignatureAlgorithm,
    Canonicalization,
    DEFAULT_SIGNED_HEADERS,
    SignatureTags,
    # Configuration
    SigningConfigBuilder,
    create_signing_config,
)
from .crypto import load_private_key

__all__ = [
    '__version__',
    # Signing
    'DKIMSigner',
    'create_signer',
    'sign',
    'sign_message',
    'HeaderField',
    'SigningConfig',
    'SigningOptions',
    'DKIMSignatureResult',
    'SignatureAlgorithm',
    'Canonicalization',
    'DEFAULT_SIGNED_HEADERS',
    'SignatureTags',
    'SigningConfigBuilder',
    'create_signing_config',
    'load_private_key',
    # Exceptions
    'DKIMSignerError',
    'ConfigurationError',
    'MissingConfigurationError',
    'UnsupportedAlgorithmError',
    'InvalidConfigurationError',
    'MalformedMessageError',
    'SigningError',
    'SigningErrorCodes',
]
