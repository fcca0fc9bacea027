"""
Exception classes for dkim-signer
"""

from typing import Optional, Dict, Any


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    MISSING_CONFIGURATION = "MISSING_CONFIGURATION"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Message errors
    MALFORMED_MESSAGE = "MALFORMED_MESSAGE"

    # Crypto errors
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    SIGNING_FAILED = "SIGNING_FAILED"


class DKIMSignerError(Exception):
    """Base exception for all dkim-signer errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class ConfigurationError(DKIMSignerError):
    """Exception raised for unusable signing configuration"""

    def __init__(
        self,
        message: str,
        error_code: str = SigningErrorCodes.INVALID_CONFIGURATION,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details)


class MissingConfigurationError(ConfigurationError):
    """Exception raised when domain, selector or private key is absent"""

    def __init__(self, field_name: str):
        super().__init__(
            f"A {field_name.replace('_', ' ')} is required",
            SigningErrorCodes.MISSING_CONFIGURATION,
            {"field": field_name}
        )
        self.field_name = field_name


class UnsupportedAlgorithmError(ConfigurationError):
    """Exception raised for an unknown signing or canonicalization algorithm"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.UNSUPPORTED_ALGORITHM, details)


class InvalidConfigurationError(ConfigurationError):
    """Exception raised for configuration values that cannot produce a valid signature"""
    pass


class MalformedMessageError(DKIMSignerError):
    """Exception raised when a message cannot be split into header fields and body"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.MALFORMED_MESSAGE, details)


class SigningError(DKIMSignerError):
    """Exception raised when the private key cannot be used or the signing primitive fails"""

    def __init__(
        self,
        message: str,
        error_code: str = SigningErrorCodes.SIGNING_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details)
