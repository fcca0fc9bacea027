"""
Cryptographic operations for dkim-signer
"""

from .rsa import (
    MINIMUM_KEY_SIZE,
    load_private_key,
    sign_message,
)

__all__ = [
    'MINIMUM_KEY_SIZE',
    'load_private_key',
    'sign_message',
]
