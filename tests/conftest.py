"""
Shared fixtures for dkim-signer tests
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


SAMPLE_MESSAGE = (
    "From: Alice <alice@example.com>\r\n"
    "To: Bob <bob@example.org>\r\n"
    "Subject: Quarterly report\r\n"
    "Date: Mon, 02 Jan 2023 10:00:00 +0000\r\n"
    "Message-ID: <report-1@example.com>\r\n"
    "\r\n"
    "Hi Bob,\r\n"
    "\r\n"
    "The report is attached.\r\n"
)


@pytest.fixture(scope="session")
def rsa_private_key():
    """2048-bit RSA key shared by the whole test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key):
    """The session key as PKCS#1 PEM bytes."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def sample_message():
    """A small message with CRLF line endings."""
    return SAMPLE_MESSAGE
