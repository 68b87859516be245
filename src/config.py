"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./wellness.db")

    # Sessions
    session_ttl_days: int = Field(default=30, gt=0)
    enable_dev_login: bool = Field(default=True)

    # TheMealDB (external recipe source)
    mealdb_base_url: str = Field(default="https://www.themealdb.com/api/json/v1/1")

    # Edamam Nutrition Analysis API (optional enrichment)
    edamam_app_id: str | None = Field(default=None)
    edamam_app_key: str | None = Field(default=None)
    edamam_api_url: str = Field(default="https://api.edamam.com/api/nutrition-details")

    # Import pipeline
    import_max_items: int = Field(default=50, gt=0)
    import_time_budget_seconds: float = Field(default=120.0, gt=0)
    http_timeout_seconds: float = Field(default=15.0, gt=0)

    # API
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.enable_dev_login:
                raise ValueError("ENABLE_DEV_LOGIN must be disabled in production")
            if "localhost" in self.database_url:
                raise ValueError("DATABASE_URL should not use localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def edamam_configured(self) -> bool:
        return bool(self.edamam_app_id and self.edamam_app_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
