"""
RSA signing primitive for DKIM signatures

This module loads RSA private keys and produces RSASSA-PKCS1-v1_5
signatures using the cryptography package.
"""

from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..exceptions import SigningError, SigningErrorCodes
from ..signing.types import PrivateKeyInput, SignatureAlgorithm

# Smallest modulus accepted by verifiers (RFC 8301)
MINIMUM_KEY_SIZE = 1024

SIGNATURE_HASHES = {
    SignatureAlgorithm.RSA_SHA1: hashes.SHA1,
    SignatureAlgorithm.RSA_SHA256: hashes.SHA256,
}


def load_private_key(private_key: PrivateKeyInput) -> RSAPrivateKey:
    """
    Load an RSA private key.

    Args:
        private_key: RSAPrivateKey object, or unencrypted PEM text as str or bytes
            (PKCS#1 "RSA PRIVATE KEY" or PKCS#8 "PRIVATE KEY")

    Returns:
        RSAPrivateKey: Key ready for signing

    Raises:
        SigningError: If the key cannot be parsed or is not an RSA key
    """
    if isinstance(private_key, RSAPrivateKey):
        key = private_key
    elif isinstance(private_key, (str, bytes)):
        pem = private_key.encode('ascii') if isinstance(private_key, str) else private_key
        try:
            key = serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError, UnicodeEncodeError, UnsupportedAlgorithm) as e:
            raise SigningError(
                f"Failed to load private key from PEM: {e}",
                SigningErrorCodes.INVALID_PRIVATE_KEY,
                {"original_error": str(e)}
            ) from e
    else:
        raise SigningError(
            f"Private key must be an RSA key or PEM text, got {type(private_key).__name__}",
            SigningErrorCodes.INVALID_PRIVATE_KEY,
            {"key_type": type(private_key).__name__}
        )

    if not isinstance(key, RSAPrivateKey):
        raise SigningError(
            f"Private key is not an RSA key: {type(key).__name__}",
            SigningErrorCodes.INVALID_PRIVATE_KEY,
            {"key_type": type(key).__name__}
        )

    if key.key_size < MINIMUM_KEY_SIZE:
        raise SigningError(
            f"RSA key must be at least {MINIMUM_KEY_SIZE} bits, got {key.key_size}",
            SigningErrorCodes.INVALID_PRIVATE_KEY,
            {"key_size": key.key_size}
        )

    return key


def sign_message(
    private_key: RSAPrivateKey,
    message: Union[str, bytes],
    algorithm: SignatureAlgorithm = SignatureAlgorithm.RSA_SHA256
) -> bytes:
    """
    Sign a message with RSASSA-PKCS1-v1_5.

    The signature is deterministic for a given key, algorithm and message.

    Args:
        private_key: RSA private key
        message: Message to sign (string or bytes)
        algorithm: rsa-sha1 or rsa-sha256

    Returns:
        bytes: Raw signature

    Raises:
        SigningError: If signing fails
    """
    algorithm = SignatureAlgorithm.coerce(algorithm)

    if isinstance(message, str):
        message_bytes = message.encode('utf-8')
    else:
        message_bytes = message

    try:
        return private_key.sign(message_bytes, padding.PKCS1v15(), SIGNATURE_HASHES[algorithm]())
    except Exception as e:
        raise SigningError(
            f"Message signing failed: {e}",
            SigningErrorCodes.SIGNING_FAILED,
            {"algorithm": algorithm.value, "original_error": str(e)}
        ) from e
