from typing import Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (and .env).
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Clinic Encounters API"
    PROJECT_DESCRIPTION: str = "Treatment encounter workflow and provider slot availability"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("clinic", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(10, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(20, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections after N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Scheduling
    SLOT_INTERVAL_MINUTES: int = Field(30, description="Slot granularity in minutes")
    DEFAULT_START_HOUR: int = Field(9, description="Opening hour when a provider has no schedule")
    DEFAULT_END_HOUR: int = Field(20, description="Closing hour (exclusive) when a provider has no schedule")
    DEFAULT_CLOSED_WEEKDAY: int = Field(0, description="Closed weekday without a schedule (0=Sunday)")
    FOLLOW_UP_CONFLICT_CHECK: bool = Field(
        True, description="Re-check provider availability right before booking a follow-up"
    )

    # Edge functions (calendar sync, appointment email)
    FUNCTIONS_BASE_URL: str = Field("http://localhost:54321/functions/v1", description="Base URL of edge functions")
    FUNCTIONS_API_KEY: str | None = Field(None, description="Bearer key for edge functions")
    CALENDAR_SYNC_FUNCTION: str = Field("google-calendar-sync", description="Calendar sync function name")
    NOTIFICATION_FUNCTION: str = Field("send-appointment-email", description="Appointment email function name")

    # Object storage for treatment attachments
    STORAGE_BASE_URL: str = Field("http://localhost:54321/storage/v1", description="Object storage base URL")
    STORAGE_API_KEY: str | None = Field(None, description="Bearer key for object storage")
    STORAGE_BUCKET: str = Field("treatment-files", description="Bucket for treatment attachments")

    INTEGRATION_TIMEOUT: float = Field(15.0, description="Timeout in seconds for outbound HTTP calls")

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    CORS_ORIGINS: str = Field("", description="Comma separated CORS origins allowed outside debug mode")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("SLOT_INTERVAL_MINUTES")
    @classmethod
    def validate_slot_interval(cls, v):
        if v < 5 or v > 240:
            raise ValueError("SLOT_INTERVAL_MINUTES must be between 5 and 240")
        return v

    @field_validator("DEFAULT_START_HOUR", "DEFAULT_END_HOUR")
    @classmethod
    def validate_hour(cls, v):
        if v < 0 or v > 24:
            raise ValueError("Default hours must be between 0 and 24")
        return v

    @field_validator("DEFAULT_CLOSED_WEEKDAY")
    @classmethod
    def validate_closed_weekday(cls, v):
        if v < 0 or v > 6:
            raise ValueError("DEFAULT_CLOSED_WEEKDAY must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """PostgreSQL URL for synchronous tooling."""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]


# Singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.

    Environment variables are read once per process.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
