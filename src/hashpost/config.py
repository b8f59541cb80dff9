"""Configuration for the Hashnode publishing client."""

import re
from dataclasses import dataclass, replace
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hashpost.errors import ConfigurationError

DEFAULT_API_URL = "https://gql.hashnode.com"

# Hashnode personal access tokens are hex strings, at least 32 characters
API_TOKEN_REGEX = re.compile(r"^[0-9a-fA-F]{32,}$")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def is_valid_api_token(token: object) -> bool:
    """Check a token against the Hashnode token format."""
    return isinstance(token, str) and bool(API_TOKEN_REGEX.match(token))


@dataclass(frozen=True)
class ClientConfig:
    """Immutable per-client settings, validated on construction.

    Raises:
        ConfigurationError: If the token is malformed or the publication
            ID is blank.
    """

    api_token: str
    publication_id: str
    api_url: str = DEFAULT_API_URL
    publication_host: str | None = None

    def __post_init__(self) -> None:
        if not is_valid_api_token(self.api_token):
            raise ConfigurationError("Invalid Hashnode API token format")
        if not self.publication_id or not self.publication_id.strip():
            raise ConfigurationError("Publication ID is required")
        if not self.api_url:
            object.__setattr__(self, "api_url", DEFAULT_API_URL)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_token='...{self.api_token[-4:]}', "
            f"publication_id={self.publication_id!r}, api_url={self.api_url!r}, "
            f"publication_host={self.publication_host!r})"
        )

    def with_token(self, api_token: str) -> "ClientConfig":
        """Return a copy using a different token, validated the same way."""
        return replace(self, api_token=api_token)


@dataclass(frozen=True)
class RetryConfig:
    """Tuning for the retry policy. Delays are in seconds."""

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("Retry delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ConfigurationError("backoff_multiplier must be >= 1")


DEFAULT_RETRY_CONFIG = RetryConfig()


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="HASHNODE_")

    # Hashnode settings
    api_token: str = Field(description="Hashnode personal access token")
    publication_id: str = Field(description="ID of the publication to publish into")
    api_url: str = Field(default=DEFAULT_API_URL, description="GraphQL endpoint")
    publication_host: str | None = Field(
        default=None, description="Publication host, e.g. blog.example.com"
    )

    # Retry settings
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    initial_delay: float = Field(default=1.0, ge=0, description="First backoff delay in seconds")
    max_delay: float = Field(default=10.0, ge=0, description="Backoff cap in seconds")
    backoff_multiplier: float = Field(default=2.0, ge=1, description="Backoff growth factor")

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("api_token")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        """Validate the token is present and hex formatted."""
        if not v or not v.strip():
            raise ValueError(
                "HASHNODE_API_TOKEN is required. "
                "Create one at https://hashnode.com/settings/developer."
            )
        v = v.strip()
        if not is_valid_api_token(v):
            raise ValueError("HASHNODE_API_TOKEN is not a valid Hashnode API token.")
        return v

    @field_validator("publication_id")
    @classmethod
    def validate_publication_id(cls, v: str) -> str:
        """Validate the publication ID is not empty."""
        if not v or not v.strip():
            raise ValueError(
                "HASHNODE_PUBLICATION_ID is required. "
                "Find it in your Hashnode publication settings."
            )
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is one logging understands."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"HASHNODE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}.")
        return level

    def client_config(self) -> ClientConfig:
        """Build the immutable client configuration."""
        return ClientConfig(
            api_token=self.api_token,
            publication_id=self.publication_id,
            api_url=self.api_url,
            publication_host=self.publication_host,
        )

    def retry_config(self) -> RetryConfig:
        """Build the immutable retry configuration."""
        return RetryConfig(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_multiplier=self.backoff_multiplier,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached client settings."""
    return Settings()  # type: ignore[call-arg]
