"""
Configuration management for DKIM signing

This module provides the configuration builder, validation, and the overlay
that merges per-message options over a signing configuration into a single
resolved value.
"""

from typing import List, Optional, Union

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..crypto.rsa import load_private_key
from ..exceptions import (
    InvalidConfigurationError,
    MissingConfigurationError,
    SigningErrorCodes,
)
from .types import (
    DEFAULT_SIGNED_HEADERS,
    Canonicalization,
    PrivateKeyInput,
    ResolvedSigningConfig,
    SignatureAlgorithm,
    SigningConfig,
    SigningOptions,
    Timestamp,
    TimestampGenerator,
)
from .utils import (
    domain_matches,
    generate_timestamp,
    optional_timestamp,
    to_unix_timestamp,
)


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._domain: Optional[str] = None
        self._selector: Optional[str] = None
        self._private_key: Optional[PrivateKeyInput] = None
        self._algorithm: SignatureAlgorithm = SignatureAlgorithm.RSA_SHA256
        self._header_canonicalization: Canonicalization = Canonicalization.RELAXED
        self._body_canonicalization: Canonicalization = Canonicalization.RELAXED
        self._identity: Optional[str] = None
        self._signed_headers: List[str] = list(DEFAULT_SIGNED_HEADERS)
        self._signature_ttl: Optional[int] = None
        self._timestamp_generator: Optional[TimestampGenerator] = None

    def domain(self, domain: str) -> 'SigningConfigBuilder':
        """
        Set signing domain.

        Args:
            domain: Domain published in the d= tag

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._domain = domain
        return self

    def selector(self, selector: str) -> 'SigningConfigBuilder':
        """
        Set key selector.

        Args:
            selector: Selector published in the s= tag

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._selector = selector
        return self

    def private_key(self, private_key: PrivateKeyInput) -> 'SigningConfigBuilder':
        """
        Set private key for signing.

        Args:
            private_key: RSA private key object or PEM text

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._private_key = private_key
        return self

    def algorithm(self, algorithm: Union[SignatureAlgorithm, str]) -> 'SigningConfigBuilder':
        """
        Set signing algorithm.

        Args:
            algorithm: rsa-sha1 or rsa-sha256

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            UnsupportedAlgorithmError: If the algorithm is unknown
        """
        self._algorithm = SignatureAlgorithm.coerce(algorithm)
        return self

    def canonicalization(
        self,
        header: Union[Canonicalization, str],
        body: Optional[Union[Canonicalization, str]] = None
    ) -> 'SigningConfigBuilder':
        """
        Set header and body canonicalization.

        Accepts either two modes or a single "header/body" string. A single
        mode without "/" sets the header mode and leaves the body simple, as
        the c= tag does.

        Args:
            header: Header canonicalization, or "header/body"
            body: Body canonicalization

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            UnsupportedAlgorithmError: If a mode is unknown
        """
        if body is None:
            if isinstance(header, str) and '/' in header:
                header, body = header.split('/', 1)
            else:
                body = Canonicalization.SIMPLE

        self._header_canonicalization = Canonicalization.coerce(header)
        self._body_canonicalization = Canonicalization.coerce(body)
        return self

    def identity(self, identity: str) -> 'SigningConfigBuilder':
        """
        Set signing identity.

        Args:
            identity: Identity for the i= tag, e.g. "@example.com"

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._identity = identity
        return self

    def signed_headers(self, headers: List[str]) -> 'SigningConfigBuilder':
        """
        Set header names to sign, in signing order.

        Repeated names are kept; each repeat covers one more instance.

        Args:
            headers: Header names

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._signed_headers = list(headers)
        return self

    def add_header(self, header: str, times: int = 1) -> 'SigningConfigBuilder':
        """
        Append a header name to the signed header list.

        Args:
            header: Header name to add
            times: How many times to list it

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._signed_headers.extend([header] * times)
        return self

    def signature_ttl(self, seconds: int) -> 'SigningConfigBuilder':
        """
        Set signature lifetime used to derive x=.

        Args:
            seconds: Lifetime in seconds

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._signature_ttl = seconds
        return self

    def timestamp_generator(self, generator: TimestampGenerator) -> 'SigningConfigBuilder':
        """
        Set custom timestamp generator.

        Args:
            generator: Function that returns Unix timestamps

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._timestamp_generator = generator
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Complete signing configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = SigningConfig(
            domain=self._domain,
            selector=self._selector,
            private_key=self._private_key,
            algorithm=self._algorithm,
            header_canonicalization=self._header_canonicalization,
            body_canonicalization=self._body_canonicalization,
            identity=self._identity,
            signed_headers=self._signed_headers,
            signature_ttl=self._signature_ttl,
            timestamp_generator=self._timestamp_generator or generate_timestamp
        )
        validate_signing_config(config)
        return config


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Args:
        config: Signing configuration to validate

    Raises:
        MissingConfigurationError: If domain, selector or private key is absent
        InvalidConfigurationError: If a value cannot produce a valid signature
    """
    if not isinstance(config, SigningConfig):
        raise InvalidConfigurationError(
            "Configuration must be SigningConfig instance",
            details={"config_type": type(config).__name__}
        )

    if config.private_key is None:
        raise MissingConfigurationError("private_key")
    if not config.domain:
        raise MissingConfigurationError("domain")
    if not config.selector:
        raise MissingConfigurationError("selector")

    _validate_signed_headers(config.signed_headers)

    if config.identity is not None:
        _validate_identity(config.identity, config.domain)

    if config.signature_ttl is not None:
        if isinstance(config.signature_ttl, bool) or not isinstance(config.signature_ttl, int) \
                or config.signature_ttl <= 0:
            raise InvalidConfigurationError(
                f"Signature TTL must be a positive number of seconds: {config.signature_ttl!r}",
                details={"field": "signature_ttl"}
            )


def _validate_signed_headers(headers: List[str]) -> None:
    if not headers:
        raise InvalidConfigurationError(
            "At least one header must be signed",
            details={"field": "signed_headers"}
        )

    for name in headers:
        if not isinstance(name, str) or not name.strip() or ':' in name or ';' in name:
            raise InvalidConfigurationError(
                f"Invalid header name: {name!r}",
                details={"field": "signed_headers"}
            )


def _validate_identity(identity: str, domain: str) -> None:
    if not domain_matches(identity, domain):
        raise InvalidConfigurationError(
            f"Identity {identity!r} is not within signing domain {domain!r}",
            SigningErrorCodes.INVALID_CONFIGURATION,
            {"identity": identity, "domain": domain}
        )


def resolve_signing_config(
    config: SigningConfig,
    options: Optional[SigningOptions] = None
) -> ResolvedSigningConfig:
    """
    Merge per-message options over a signing configuration.

    Args:
        config: Signing configuration
        options: Optional per-message overrides

    Returns:
        ResolvedSigningConfig: The only configuration the signing pipeline reads

    Raises:
        ConfigurationError: If the merged configuration is invalid
        SigningError: If the private key cannot be loaded
    """
    validate_signing_config(config)
    return apply_signing_options(config, options, load_private_key(config.private_key))


def apply_signing_options(
    config: SigningConfig,
    options: Optional[SigningOptions],
    private_key: RSAPrivateKey
) -> ResolvedSigningConfig:
    """
    Merge per-message options over an already validated configuration.

    Args:
        config: Validated signing configuration
        options: Optional per-message overrides
        private_key: Loaded signing key

    Returns:
        ResolvedSigningConfig: Resolved configuration for one message

    Raises:
        ConfigurationError: If an option is invalid
    """
    options = options or SigningOptions()

    identity = options.identity if options.identity is not None else config.identity
    if identity is not None:
        _validate_identity(identity, config.domain)

    signed_headers = options.signed_headers if options.signed_headers is not None else config.signed_headers
    _validate_signed_headers(signed_headers)

    if options.timestamp is not None:
        timestamp = to_unix_timestamp(options.timestamp, "timestamp")
    else:
        timestamp = to_unix_timestamp(_generate_timestamp(config), "timestamp")

    expiration = optional_timestamp(options.expiration, "expiration")
    if expiration is None and config.signature_ttl is not None:
        expiration = timestamp + config.signature_ttl

    if expiration is not None and expiration <= timestamp:
        raise InvalidConfigurationError(
            f"Expiration {expiration} must be later than signing time {timestamp}",
            details={"timestamp": timestamp, "expiration": expiration}
        )

    return ResolvedSigningConfig(
        domain=config.domain,
        selector=config.selector,
        private_key=private_key,
        algorithm=config.algorithm,
        header_canonicalization=config.header_canonicalization,
        body_canonicalization=config.body_canonicalization,
        identity=identity,
        signed_headers=tuple(signed_headers),
        timestamp=timestamp,
        expiration=expiration
    )


def _generate_timestamp(config: SigningConfig) -> Timestamp:
    timestamp_gen = config.timestamp_generator or generate_timestamp
    try:
        return timestamp_gen()
    except Exception as e:
        raise InvalidConfigurationError(
            f"Timestamp generator failed: {e}",
            details={"field": "timestamp_generator", "original_error": str(e)}
        ) from e
