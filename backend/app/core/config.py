"""Application configuration."""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="Async SQLAlchemy URL (e.g. sqlite+aiosqlite:///./civicfix.db). "
                    "Unset selects the in-memory store."
    )
    database_fallback_to_memory: bool = Field(
        default=True,
        description="Serve from the in-memory store when the database is unreachable at startup"
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Security
    secret_key: str = Field(
        default="change-this-to-a-random-secret-key-in-production",
        description="Secret key for JWT token generation"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expiration_hours: int = Field(default=168, description="JWT token expiration in hours")
    jwt_issuer: str = Field(default="civicfix", description="JWT issuer claim")
    jwt_audience: str = Field(default="civicfix-users", description="JWT audience claim")

    # Query parameters
    default_page_size: int = Field(default=10, description="Issues per page when no limit is given")
    max_page_size: int = Field(default=100, description="Upper bound for the limit parameter")
    default_comment_page_size: int = Field(default=20, description="Comments per page when no limit is given")

    # Voting
    vote_conflict_retries: int = Field(
        default=3,
        description="Attempts at re-applying a vote after a uniqueness conflict"
    )

    # Categories
    seed_categories: bool = Field(
        default=True,
        description="Create the default categories on startup when none exist"
    )

    # Development Settings
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="text", description="Log format (text or json)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is text or json."""
        v_lower = v.strip().lower()
        if v_lower not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return v_lower

    @field_validator(
        "default_page_size",
        "max_page_size",
        "default_comment_page_size",
        "vote_conflict_retries",
        "jwt_expiration_hours",
    )
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate integer is positive."""
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "Settings":
        """Validate page sizes are logically consistent."""
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must be less than or equal to max_page_size")
        if self.default_comment_page_size > self.max_page_size:
            raise ValueError("default_comment_page_size must be less than or equal to max_page_size")
        return self


# Global settings instance
settings = Settings()
