"""Configuration for the ISP gateway API.

Environment variables (and an optional ``.env`` file) are read once through
pydantic-settings and copied onto Flask config classes per environment.
"""

# flake8: noqa: E501


from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings for the gateway."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistence
    database_url: Optional[str] = Field(
        default=None,
        description="PyDAL database URI; unset runs the dictionary on the mock store",
    )
    db_pool_size: int = Field(default=10, ge=0, description="PyDAL connection pool size")
    db_migrate: bool = Field(
        default=False,
        description="Let PyDAL create the dictionary configuration tables",
    )
    db_folder: Optional[str] = Field(default=None, description="PyDAL metadata folder")
    dictionary_backend: Literal["auto", "database", "mock"] = Field(
        default="auto",
        description="Row and schema source: auto picks database when DATABASE_URL is set",
    )

    # HTTP
    api_prefix: str = Field(default="/api/isp", description="Primary route prefix")
    legacy_api_prefix: Optional[str] = Field(
        default="/app-root/api/isp",
        description="Second prefix the same routes are mounted under; empty disables it",
    )
    cors_origins: str = Field(default="*", description="Comma-separated allowed origins")

    # Auth
    auth_required: bool = Field(default=False, description="Require bearer JWTs on gateway routes")
    jwt_secret: str = Field(default="change-me-in-production", description="HS256 signing secret")

    # Observability
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["json", "console"] = Field(default="json")
    metrics_enabled: bool = Field(default=False, description="Expose Prometheus /metrics")

    app_version: str = Field(default="1.0.0")

    @field_validator("api_prefix", "legacy_api_prefix")
    @classmethod
    def normalize_prefix(cls, v: Optional[str]) -> Optional[str]:
        """Prefixes start with '/' and never end with one."""
        if v is None or v.strip() == "":
            return None
        v = "/" + v.strip().strip("/")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()

    def origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Config:
    """Base configuration."""

    DEBUG = False
    TESTING = False
    ENV = "production"

    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE = 10
    DB_MIGRATE = False
    DB_FOLDER: Optional[str] = None
    DICTIONARY_BACKEND = "auto"

    API_PREFIX = "/api/isp"
    LEGACY_API_PREFIX: Optional[str] = "/app-root/api/isp"

    CORS_ORIGINS: List[str] = ["*"]
    CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]
    CORS_SUPPORTS_CREDENTIALS = False

    AUTH_REQUIRED = False
    JWT_SECRET = "change-me-in-production"

    LOG_LEVEL = "INFO"
    LOG_FORMAT = "json"
    METRICS_ENABLED = False

    APP_VERSION = "1.0.0"

    @classmethod
    def load_settings(cls, settings: Settings) -> None:
        """Copy environment settings onto the config class."""
        cls.DATABASE_URL = settings.database_url
        cls.DB_POOL_SIZE = settings.db_pool_size
        cls.DB_MIGRATE = settings.db_migrate
        cls.DB_FOLDER = settings.db_folder
        cls.DICTIONARY_BACKEND = settings.dictionary_backend
        cls.API_PREFIX = settings.api_prefix or "/api/isp"
        cls.LEGACY_API_PREFIX = settings.legacy_api_prefix
        cls.CORS_ORIGINS = settings.origins() or ["*"]
        cls.AUTH_REQUIRED = settings.auth_required
        cls.JWT_SECRET = settings.jwt_secret
        cls.LOG_LEVEL = settings.log_level
        cls.LOG_FORMAT = settings.log_format
        cls.METRICS_ENABLED = settings.metrics_enabled
        cls.APP_VERSION = settings.app_version

    @staticmethod
    def init_app(app) -> None:
        """Hook for environment-specific app setup."""


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    ENV = "development"
    LOG_FORMAT = "console"

    @classmethod
    def load_settings(cls, settings: Settings) -> None:
        super().load_settings(settings)
        if "log_format" not in settings.model_fields_set:
            cls.LOG_FORMAT = "console"


class TestingConfig(Config):
    """Testing configuration: mock backend, no metrics, console logs."""

    TESTING = True
    ENV = "testing"

    @classmethod
    def load_settings(cls, settings: Settings) -> None:
        super().load_settings(settings)
        cls.DICTIONARY_BACKEND = "mock" if settings.dictionary_backend == "auto" else settings.dictionary_backend
        cls.METRICS_ENABLED = False
        cls.LOG_FORMAT = "console"
        cls.JWT_SECRET = "test-secret-key-for-testing-only"


class ProductionConfig(Config):
    """Production configuration."""

    @staticmethod
    def init_app(app) -> None:
        if app.config["AUTH_REQUIRED"] and app.config["JWT_SECRET"] == "change-me-in-production":
            raise RuntimeError("JWT_SECRET must be set when AUTH_REQUIRED is enabled in production")


_CONFIGS = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(config_name: Optional[str] = None, settings: Optional[Settings] = None):
    """
    Return the config class for ``config_name`` loaded from the environment.

    Args:
        config_name: development, testing or production (default production)
        settings: Pre-built settings, mostly for tests

    Returns:
        Config class ready for ``app.config.from_object``
    """
    config = _CONFIGS.get((config_name or "production").lower(), ProductionConfig)
    config.load_settings(settings or Settings())
    return config
