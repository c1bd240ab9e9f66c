from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UpaymentsSettings(BaseSettings):
    """
    UPayments client configuration loaded from environment variables.

    Every value can be overridden per instance through the constructor
    arguments of ``UpaymentsService``.
    """

    UPAYMENTS_API_KEY: str = Field("", description="Bearer token for the UPayments API")
    UPAYMENTS_API_URL: str = Field(
        "https://sandboxapi.upayments.com", description="Base URL (sandbox by default)"
    )
    UPAYMENTS_PROFILE: str = Field("v1", description="Endpoint/validation profile: v1 or legacy")

    # Request/response logging
    UPAYMENTS_LOGGING_CHANNEL: str = Field("upayments", description="Logger name used for request logs")
    UPAYMENTS_LOGGING_ENABLED: bool = Field(True, description="Log every request/response pair")

    # Transport
    UPAYMENTS_TIMEOUT: float = Field(30.0, description="Request timeout in seconds")
    UPAYMENTS_MAX_RETRIES: int = Field(3, description="Extra attempts on network errors and 5xx responses")
    UPAYMENTS_RETRY_WAIT: float = Field(0.1, description="Initial backoff between retries in seconds")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("UPAYMENTS_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("UPAYMENTS_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("UPAYMENTS_TIMEOUT must be greater than 0")
        return v

    @field_validator("UPAYMENTS_MAX_RETRIES")
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("UPAYMENTS_MAX_RETRIES must be 0 or greater")
        if v > 10:
            raise ValueError("UPAYMENTS_MAX_RETRIES should not exceed 10")
        return v

    @field_validator("UPAYMENTS_RETRY_WAIT")
    @classmethod
    def validate_retry_wait(cls, v):
        if v < 0:
            raise ValueError("UPAYMENTS_RETRY_WAIT must be 0 or greater")
        return v


# Singleton para configuración
_settings_instance = None


def get_settings() -> UpaymentsSettings:
    """
    Return the cached settings instance.

    Environment variables are read once, on first call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = UpaymentsSettings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
