"""
Test suite for signing configuration, validation and option resolution
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from dkim_signer.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
    SigningError,
    UnsupportedAlgorithmError,
)
from dkim_signer.signing import (
    DEFAULT_SIGNED_HEADERS,
    Canonicalization,
    SignatureAlgorithm,
    SigningConfig,
    SigningOptions,
    apply_signing_options,
    create_signing_config,
    resolve_signing_config,
    validate_signing_config,
)


class TestDefaultSignedHeaders:
    """Test the default header list"""

    def test_every_name_listed_twice(self):
        """Test that each default header appears exactly twice"""
        assert len(DEFAULT_SIGNED_HEADERS) == 24
        for name in set(DEFAULT_SIGNED_HEADERS):
            assert DEFAULT_SIGNED_HEADERS.count(name) == 2

    def test_default_order(self):
        """Test the order of the first round of names"""
        assert DEFAULT_SIGNED_HEADERS[:12] == (
            'Date', 'From', 'To', 'Message-ID', 'Subject', 'MIME-Version',
            'Content-Type', 'Content-Transfer-Encoding', 'List-Unsubscribe',
            'List-Id', 'Reply-To', 'Cc',
        )
        assert DEFAULT_SIGNED_HEADERS[12:] == DEFAULT_SIGNED_HEADERS[:12]


class TestSigningConfigBuilder:
    """Test the fluent configuration builder"""

    def test_build_with_defaults(self, private_key_pem):
        """Test a minimal configuration"""
        config = (create_signing_config()
                  .domain("example.com")
                  .selector("mail")
                  .private_key(private_key_pem)
                  .build())

        assert config.domain == "example.com"
        assert config.selector == "mail"
        assert config.algorithm is SignatureAlgorithm.RSA_SHA256
        assert config.canonicalization == "relaxed/relaxed"
        assert config.identity is None
        assert config.signed_headers == list(DEFAULT_SIGNED_HEADERS)
        assert config.signature_ttl is None
        assert callable(config.timestamp_generator)

    def test_build_with_all_options(self, private_key_pem):
        """Test every builder method"""
        config = (create_signing_config()
                  .domain("example.com")
                  .selector("s1")
                  .private_key(private_key_pem)
                  .algorithm("RSA-SHA1")
                  .canonicalization("simple", "relaxed")
                  .identity("news@lists.example.com")
                  .signed_headers(["From", "Subject"])
                  .add_header("To", times=2)
                  .signature_ttl(3600)
                  .timestamp_generator(lambda: 1700000000)
                  .build())

        assert config.algorithm is SignatureAlgorithm.RSA_SHA1
        assert config.header_canonicalization is Canonicalization.SIMPLE
        assert config.body_canonicalization is Canonicalization.RELAXED
        assert config.identity == "news@lists.example.com"
        assert config.signed_headers == ["From", "Subject", "To", "To"]
        assert config.signature_ttl == 3600
        assert config.timestamp_generator() == 1700000000

    def test_canonicalization_pair_string(self, private_key_pem):
        """Test the "header/body" form"""
        builder = create_signing_config().domain("example.com").selector("s").private_key(private_key_pem)

        config = builder.canonicalization("relaxed/simple").build()
        assert config.canonicalization == "relaxed/simple"

        config = builder.canonicalization("relaxed").build()
        assert config.canonicalization == "relaxed/simple"

    def test_unknown_algorithm(self):
        """Test that an unknown algorithm fails immediately"""
        with pytest.raises(UnsupportedAlgorithmError) as exc_info:
            create_signing_config().algorithm("ed25519-sha256")

        assert exc_info.value.error_code == "UNSUPPORTED_ALGORITHM"
        assert isinstance(exc_info.value, ConfigurationError)

    def test_unknown_canonicalization(self):
        """Test that an unknown canonicalization fails immediately"""
        with pytest.raises(UnsupportedAlgorithmError):
            create_signing_config().canonicalization("relaxed/nowsp")

    def test_missing_private_key(self):
        """Test that the private key is checked first"""
        with pytest.raises(MissingConfigurationError) as exc_info:
            create_signing_config().build()

        assert exc_info.value.field_name == "private_key"
        assert exc_info.value.error_code == "MISSING_CONFIGURATION"
        assert "private key is required" in str(exc_info.value)

    def test_missing_domain(self, private_key_pem):
        """Test that a domain is required"""
        with pytest.raises(MissingConfigurationError) as exc_info:
            create_signing_config().selector("s").private_key(private_key_pem).build()

        assert exc_info.value.details == {"field": "domain"}

    def test_missing_selector(self, private_key_pem):
        """Test that a selector is required"""
        with pytest.raises(MissingConfigurationError) as exc_info:
            create_signing_config().domain("example.com").private_key(private_key_pem).build()

        assert exc_info.value.field_name == "selector"

    def test_empty_domain_is_missing(self, private_key_pem):
        """Test that an empty domain counts as absent"""
        with pytest.raises(MissingConfigurationError):
            create_signing_config().domain("").selector("s").private_key(private_key_pem).build()


class TestValidateSigningConfig:
    """Test configuration validation"""

    def test_wrong_type(self):
        """Test that only SigningConfig instances are accepted"""
        with pytest.raises(InvalidConfigurationError):
            validate_signing_config({"domain": "example.com"})

    @pytest.mark.parametrize("identity", ["@example.com", "user@example.com", "@mail.EXAMPLE.com"])
    def test_identity_within_domain(self, private_key_pem, identity):
        """Test identities that belong to the signing domain"""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem, identity=identity)

        validate_signing_config(config)

    @pytest.mark.parametrize("identity", ["@example.org", "user@notexample.com", "example.com"])
    def test_identity_outside_domain(self, private_key_pem, identity):
        """Test that a foreign identity is rejected"""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem, identity=identity)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            validate_signing_config(config)

        assert exc_info.value.details["identity"] == identity

    def test_empty_header_list(self, private_key_pem):
        """Test that at least one header must be signed"""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem, signed_headers=[])

        with pytest.raises(InvalidConfigurationError):
            validate_signing_config(config)

    @pytest.mark.parametrize("name", ["", "  ", "Subject:", "From;To"])
    def test_invalid_header_name(self, private_key_pem, name):
        """Test that header names must be usable in h="""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem,
                               signed_headers=["From", name])

        with pytest.raises(InvalidConfigurationError):
            validate_signing_config(config)

    @pytest.mark.parametrize("ttl", [0, -5, 1.5, True])
    def test_invalid_ttl(self, private_key_pem, ttl):
        """Test that the TTL must be a positive integer"""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem, signature_ttl=ttl)

        with pytest.raises(InvalidConfigurationError):
            validate_signing_config(config)

    def test_enum_coercion_in_dataclass(self, private_key_pem):
        """Test that string identifiers are converted on construction"""
        config = SigningConfig(domain="example.com", selector="s", private_key=private_key_pem,
                               algorithm="rsa-sha1", header_canonicalization="SIMPLE")

        assert config.algorithm is SignatureAlgorithm.RSA_SHA1
        assert config.header_canonicalization is Canonicalization.SIMPLE

        with pytest.raises(UnsupportedAlgorithmError):
            SigningConfig(domain="example.com", selector="s", private_key=private_key_pem, algorithm="dsa")


class TestResolveSigningConfig:
    """Test merging of per-message options over configuration"""

    def setup_method(self):
        """Set up test fixtures"""
        self.timestamp = 1700000000

    def _config(self, private_key_pem, **kwargs):
        kwargs.setdefault("timestamp_generator", lambda: self.timestamp)
        return SigningConfig(domain="example.com", selector="mail", private_key=private_key_pem, **kwargs)

    def test_resolve_without_options(self, private_key_pem):
        """Test that configuration values pass through"""
        resolved = resolve_signing_config(self._config(private_key_pem, identity="@example.com"))

        assert resolved.domain == "example.com"
        assert resolved.selector == "mail"
        assert resolved.identity == "@example.com"
        assert resolved.signed_headers == DEFAULT_SIGNED_HEADERS
        assert resolved.timestamp == self.timestamp
        assert resolved.expiration is None
        assert resolved.private_key.key_size == 2048

    def test_options_override(self, private_key_pem):
        """Test that options take precedence over configuration"""
        config = self._config(private_key_pem, identity="@example.com")
        options = SigningOptions(
            timestamp=1600000000,
            expiration=1600000600,
            identity="bounce@mail.example.com",
            signed_headers=["From"]
        )

        resolved = resolve_signing_config(config, options)

        assert resolved.timestamp == 1600000000
        assert resolved.expiration == 1600000600
        assert resolved.identity == "bounce@mail.example.com"
        assert resolved.signed_headers == ("From",)

    def test_datetime_timestamp(self, private_key_pem):
        """Test that datetimes are converted, naive ones as UTC"""
        options = SigningOptions(timestamp=datetime(2023, 11, 14, 22, 13, 20))

        resolved = resolve_signing_config(self._config(private_key_pem), options)
        assert resolved.timestamp == 1700000000

        options = SigningOptions(timestamp=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        assert resolve_signing_config(self._config(private_key_pem), options).timestamp == 1700000000

    def test_ttl_derives_expiration(self, private_key_pem):
        """Test that x= is t= plus the TTL"""
        resolved = resolve_signing_config(self._config(private_key_pem, signature_ttl=600))

        assert resolved.expiration == self.timestamp + 600

    def test_explicit_expiration_beats_ttl(self, private_key_pem):
        """Test that an expiration option wins over the TTL"""
        options = SigningOptions(expiration=self.timestamp + 60)

        resolved = resolve_signing_config(self._config(private_key_pem, signature_ttl=600), options)

        assert resolved.expiration == self.timestamp + 60

    @pytest.mark.parametrize("offset", [0, -1])
    def test_expiration_not_after_timestamp(self, private_key_pem, offset):
        """Test that x= must be later than t="""
        options = SigningOptions(expiration=self.timestamp + offset)

        with pytest.raises(InvalidConfigurationError):
            resolve_signing_config(self._config(private_key_pem), options)

    def test_invalid_timestamp(self, private_key_pem):
        """Test that unusable timestamps are rejected"""
        for value in ("yesterday", -1, False):
            with pytest.raises(InvalidConfigurationError):
                resolve_signing_config(self._config(private_key_pem), SigningOptions(timestamp=value))

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_timestamp(self, private_key_pem, value):
        """Test that NaN and infinite timestamps are configuration errors"""
        with pytest.raises(InvalidConfigurationError):
            resolve_signing_config(self._config(private_key_pem), SigningOptions(timestamp=value))

        with pytest.raises(InvalidConfigurationError):
            resolve_signing_config(self._config(private_key_pem), SigningOptions(expiration=value))

    def test_generator_returns_non_finite(self, private_key_pem):
        """Test that a generated NaN is rejected like a passed one"""
        config = self._config(private_key_pem, timestamp_generator=lambda: float("nan"))

        with pytest.raises(InvalidConfigurationError):
            resolve_signing_config(config)

    def test_generator_failure(self, private_key_pem):
        """Test that an exception from the timestamp generator is wrapped"""
        def broken_clock():
            raise RuntimeError("clock unavailable")

        config = self._config(private_key_pem, timestamp_generator=broken_clock)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            resolve_signing_config(config)

        assert "clock unavailable" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_apply_options_uses_given_key(self, rsa_private_key, private_key_pem):
        """Test that applying options does not load the configured key again"""
        config = self._config(private_key_pem)

        with patch("dkim_signer.signing.signing_config.load_private_key") as mock_load:
            resolved = apply_signing_options(config, SigningOptions(timestamp=1600000000), rsa_private_key)

        mock_load.assert_not_called()
        assert resolved.private_key is rsa_private_key
        assert resolved.timestamp == 1600000000

    def test_identity_override_outside_domain(self, private_key_pem):
        """Test that an overriding identity is checked against d="""
        with pytest.raises(InvalidConfigurationError):
            resolve_signing_config(self._config(private_key_pem), SigningOptions(identity="@example.net"))

    def test_unloadable_key(self):
        """Test that a bad key is reported during resolution"""
        config = SigningConfig(domain="example.com", selector="mail", private_key="not a key")

        with pytest.raises(SigningError) as exc_info:
            resolve_signing_config(config)

        assert exc_info.value.error_code == "INVALID_PRIVATE_KEY"

    def test_resolved_is_immutable(self, private_key_pem):
        """Test that the resolved configuration cannot be changed"""
        resolved = resolve_signing_config(self._config(private_key_pem))

        with pytest.raises(AttributeError):
            resolved.domain = "example.org"
