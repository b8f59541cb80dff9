"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from hashpost.config import DEFAULT_API_URL, ClientConfig, RetryConfig, Settings
from hashpost.errors import ConfigurationError

VALID_TOKEN = "0123456789abcdef" * 4


class TestClientConfig:
    """Tests for ClientConfig validation."""

    def test_defaults_api_url(self) -> None:
        config = ClientConfig(api_token=VALID_TOKEN, publication_id="pub-1")
        assert config.api_url == DEFAULT_API_URL

    def test_accepts_uppercase_hex(self) -> None:
        config = ClientConfig(api_token="ABCDEF0123456789" * 2, publication_id="pub-1")
        assert config.api_token == "ABCDEF0123456789" * 2

    @pytest.mark.parametrize(
        "token",
        ["", "abc", "0123456789abcdef" * 1, "g" * 40, "0123456789abcdef-" * 3],
    )
    def test_rejects_bad_tokens(self, token: str) -> None:
        """Should fail fast on malformed tokens."""
        with pytest.raises(ConfigurationError, match="token"):
            ClientConfig(api_token=token, publication_id="pub-1")

    @pytest.mark.parametrize("publication_id", ["", "   "])
    def test_rejects_blank_publication_id(self, publication_id: str) -> None:
        with pytest.raises(ConfigurationError, match="Publication ID"):
            ClientConfig(api_token=VALID_TOKEN, publication_id=publication_id)

    def test_with_token_validates(self) -> None:
        config = ClientConfig(api_token=VALID_TOKEN, publication_id="pub-1")
        with pytest.raises(ConfigurationError):
            config.with_token("abc")
        assert config.with_token("f" * 32).api_token == "f" * 32

    def test_repr_hides_token(self) -> None:
        config = ClientConfig(api_token=VALID_TOKEN, publication_id="pub-1")
        assert VALID_TOKEN not in repr(config)


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_defaults(self) -> None:
        config = RetryConfig()
        assert config.max_retries == 3
        assert config.initial_delay == 1.0
        assert config.max_delay == 10.0
        assert config.backoff_multiplier == 2.0

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_retries": -1}, {"initial_delay": -1.0}, {"backoff_multiplier": 0.5}],
    )
    def test_rejects_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            RetryConfig(**kwargs)


class TestSettings:
    """Tests for environment settings."""

    def test_loads_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHNODE_API_TOKEN", f" {VALID_TOKEN} ")
        monkeypatch.setenv("HASHNODE_PUBLICATION_ID", "pub-1")
        monkeypatch.setenv("HASHNODE_MAX_RETRIES", "5")

        settings = Settings()  # type: ignore[call-arg]

        assert settings.client_config() == ClientConfig(
            api_token=VALID_TOKEN, publication_id="pub-1"
        )
        assert settings.retry_config().max_retries == 5

    def test_rejects_invalid_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHNODE_API_TOKEN", "abc")
        monkeypatch.setenv("HASHNODE_PUBLICATION_ID", "pub-1")

        with pytest.raises(ValidationError, match="HASHNODE_API_TOKEN"):
            Settings()  # type: ignore[call-arg]

    def test_rejects_missing_publication(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHNODE_API_TOKEN", VALID_TOKEN)
        monkeypatch.setenv("HASHNODE_PUBLICATION_ID", " ")

        with pytest.raises(ValidationError, match="HASHNODE_PUBLICATION_ID"):
            Settings()  # type: ignore[call-arg]

    def test_publication_host_and_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should carry the publication host into the client config and normalize the level."""
        monkeypatch.setenv("HASHNODE_API_TOKEN", VALID_TOKEN)
        monkeypatch.setenv("HASHNODE_PUBLICATION_ID", "pub-1")
        monkeypatch.setenv("HASHNODE_PUBLICATION_HOST", "blog.example.com")
        monkeypatch.setenv("HASHNODE_LOG_LEVEL", "warning")

        settings = Settings()  # type: ignore[call-arg]

        assert settings.client_config().publication_host == "blog.example.com"
        assert settings.log_level == "WARNING"

    def test_rejects_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHNODE_API_TOKEN", VALID_TOKEN)
        monkeypatch.setenv("HASHNODE_PUBLICATION_ID", "pub-1")
        monkeypatch.setenv("HASHNODE_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError, match="HASHNODE_LOG_LEVEL"):
            Settings()  # type: ignore[call-arg]
