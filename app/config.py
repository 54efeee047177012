"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="SalesBackOffice", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings - Supabase Postgres
    database_url: str = Field(
        default="postgresql+psycopg2://postgres@localhost:5432/postgres",
        validation_alias=AliasChoices("DATABASE_URL", "POSTGRES_DB_URL"),
        description="Supabase / PostgreSQL connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="Sales Back Office API", description="API documentation title"
    )
    api_description: str = Field(
        default="Floor sales, marketplace imports, recipe costing and KPI tracking",
        description="API documentation description",
    )

    # Domain settings
    fiscal_start_month: int = Field(
        default=8, ge=1, le=12, description="First calendar month of the fiscal year"
    )
    match_threshold: int = Field(
        default=70, ge=0, le=100, description="Minimum fuzzy score for a title match"
    )
    default_production_quantity: int = Field(
        default=400, ge=1, description="Units per production run used for unit cost"
    )
    quantity_tolerance: int = Field(
        default=5, ge=0, description="Import discrepancy still considered valid"
    )
    quantity_error_threshold: int = Field(
        default=20, ge=0, description="Import discrepancy reported as an error"
    )
    first_series_number: int = Field(
        default=1001, ge=1, description="Series number given to the first product"
    )
    csv_encodings: list[str] = Field(
        default=["utf-8-sig", "cp932"],
        description="Encodings tried, in order, when decoding uploaded CSV files",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
