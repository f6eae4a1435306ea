# python
# app/core/config.py
"""Configuration settings for the AI File Library API.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="AI File Library API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== Authentication (Supabase Auth) =====
    supabase_url: str | None = Field(default=None, description="Supabase project URL")
    supabase_anon_key: str | None = Field(default=None, description="Supabase anon key")
    supabase_jwt_secret: str | None = Field(
        default=None, description="Supabase JWT secret for local token verification"
    )
    jwt_audience: str = Field(default="authenticated", description="Expected JWT audience")

    # ===== AI Service (Gemini) =====
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model to use")
    gemini_max_tokens: int = Field(default=1000, description="Maximum tokens for Gemini")
    ai_request_timeout: int = Field(default=30, description="AI request timeout in seconds")

    # ===== Object Storage Settings =====
    aws_access_key_id: str | None = Field(default=None, description="S3 access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="S3 secret access key")
    s3_bucket_name: str = Field(default="file-storage", description="S3 bucket name")
    s3_region: str = Field(default="us-east-1", description="S3 region")
    s3_endpoint_url: str | None = Field(
        default=None, description="S3-compatible endpoint URL (e.g. Supabase Storage)"
    )
    s3_public_base_url: str | None = Field(
        default=None, description="Public base URL for stored objects"
    )
    presigned_url_expiry: int = Field(default=3600, description="Presigned URL lifetime in seconds")

    # ===== Application Limits =====
    max_file_size: int = Field(default=52428800, description="Maximum file size in bytes (50MB)")
    max_files_per_upload: int = Field(default=10, description="Maximum files per multi-upload")
    storage_quota_bytes: int = Field(default=1073741824, description="Storage quota per user (1GB)")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5000,http://localhost:5173,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.json, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_file_storage(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key and self.s3_bucket_name)

    @property
    def has_local_jwt_verification(self) -> bool:
        return bool(self.supabase_jwt_secret)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
        return v

    @field_validator("max_file_size")
    @classmethod
    def validate_file_size(cls, v):
        if v > 100 * 1024 * 1024:
            raise ValueError("Maximum file size cannot exceed 100MB")
        return v

    @field_validator("max_files_per_upload")
    @classmethod
    def validate_max_files_per_upload(cls, v):
        if v < 1 or v > 50:
            raise ValueError("Maximum files per upload must be between 1 and 50")
        return v


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if not settings.supabase_url and not settings.supabase_jwt_secret:
            errors.append("SUPABASE_URL or SUPABASE_JWT_SECRET is required")
        if not settings.has_file_storage:
            errors.append("AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and S3_BUCKET_NAME are required")
        if settings.is_production and not settings.gemini_api_key:
            errors.append("GEMINI_API_KEY is required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "ai_enabled": settings.has_ai_enabled,
            "file_storage": settings.has_file_storage,
            "local_jwt_verification": settings.has_local_jwt_verification,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "auth_configured": bool(settings.supabase_url or settings.supabase_jwt_secret),
        "storage_bucket": settings.s3_bucket_name,
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
