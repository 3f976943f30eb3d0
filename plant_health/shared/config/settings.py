# 📄 File: plant_health/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings (database address, storage keys,
# AI model keys, timeouts) from environment variables and hands them to the rest of the app.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading (through pydantic-settings env_file)
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main (application startup)
# - Database connection modules
# - Supabase storage client and diagnosis oracle factory
# - Authentication middleware

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Plant Health API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Upload a plant photo, get an AI diagnosis and a treatment plan",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    API_V1_PREFIX: str = Field(default="/api/v1", description="Prefix for version 1 routes")
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma separated CORS allowed origins"
    )

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")

    # =========================================================================
    # LOGGING
    # =========================================================================

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=2.0, description="Requests slower than this many seconds are logged as warnings"
    )

    # =========================================================================
    # SUPABASE (AUTH + STORAGE)
    # =========================================================================

    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(..., description="Supabase anonymous key")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")
    SUPABASE_JWT_SECRET: str = Field(..., description="Secret used to verify Supabase access tokens")
    SUPABASE_STORAGE_BUCKET: str = Field(default="plant-images", description="Public bucket for plant photos")
    STORAGE_TIMEOUT_SECONDS: int = Field(default=30, description="Timeout for a single storage call")

    JWT_ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    JWT_AUDIENCE: str = Field(default="authenticated", description="Expected JWT audience claim")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="Async SQLAlchemy connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="postgres", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    DB_POOL_SIZE: int = Field(default=10, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Max pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Pool checkout timeout in seconds")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Recycle connections after seconds")
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # =========================================================================
    # DIAGNOSIS ORACLE
    # =========================================================================

    DIAGNOSIS_PROVIDER: str = Field(default="openai", description="openai, worker, mock or static")
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API key")
    OPENAI_API_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL")
    OPENAI_MODEL: str = Field(default="gpt-4o", description="Vision-capable chat model")
    OPENAI_MAX_TOKENS: int = Field(default=1000, description="Max tokens for a diagnosis reply")
    DIAGNOSIS_WORKER_URL: Optional[str] = Field(None, description="Remote diagnosis worker URL")
    DIAGNOSIS_TIMEOUT_SECONDS: int = Field(default=60, description="Total timeout for one diagnosis call")
    DIAGNOSIS_FALLBACK_ENABLED: bool = Field(
        default=True, description="Substitute the general-care diagnosis when the oracle fails"
    )

    # =========================================================================
    # UPLOADS
    # =========================================================================

    MAX_IMAGE_SIZE: int = Field(default=10 * 1024 * 1024, description="Max image size in bytes")
    ALLOWED_IMAGE_FORMATS: str = Field(
        default="JPEG,PNG,WEBP,GIF",
        description="Comma separated image formats accepted for upload (Pillow format names)"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("DIAGNOSIS_PROVIDER")
    @classmethod
    def validate_diagnosis_provider(cls, v: str) -> str:
        """Validate the diagnosis oracle provider."""
        allowed_providers = ["openai", "worker", "mock", "static"]
        if v.lower() not in allowed_providers:
            raise ValueError(f"Diagnosis provider must be one of {allowed_providers}")
        return v.lower()

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def validate_allowed_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        for origin in v.split(","):
            origin = origin.strip()
            if origin and origin != "*" and not origin.startswith(("http://", "https://")):
                raise ValueError(f"Invalid CORS origin: {origin}")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the async database URL, building it from DB_* parts when unset."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_formats(self) -> List[str]:
        return [fmt.strip().upper() for fmt in self.ALLOWED_IMAGE_FORMATS.split(",") if fmt.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
