"""
Application configuration using Pydantic Settings
Reads from environment variables and .env file
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    db_user: str = Field(default="forum_admin", alias="DB_USER")
    db_password: str = Field(default="", alias="DB_PASSWORD")
    db_name: str = Field(default="forum", alias="DB_NAME")
    db_host: str = Field(default="postgres", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    @property
    def database_url(self) -> str:
        """Construct database URL (DATABASE_URL wins when set)"""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Redis / Celery
    celery_broker_url: str = Field(default="redis://redis:6379/1", alias="CELERY_BROKER_URL")
    celery_result_backend: str = Field(default="redis://redis:6379/2", alias="CELERY_RESULT_BACKEND")
    post_count_sync_schedule: float = Field(default=3600.0, alias="POST_COUNT_SYNC_SCHEDULE")

    # Application
    environment: str = Field(default="production", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    admin_token: Optional[str] = Field(default=None, alias="ADMIN_TOKEN")

    # AI categorization (Anthropic)
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    ai_model: str = Field(default="claude-sonnet-4-5", alias="AI_MODEL")
    ai_temperature: float = Field(default=0.0, alias="AI_TEMPERATURE")
    ai_max_tokens: int = Field(default=1024, alias="AI_MAX_TOKENS")
    ai_timeout_seconds: float = Field(default=30.0, alias="AI_TIMEOUT_SECONDS")
    ai_max_retries: int = Field(default=2, alias="AI_MAX_RETRIES")

    # Used when the database has no categories to offer
    default_categories: List[str] = Field(
        default=[
            "Business",
            "Design",
            "Career",
            "Construction",
            "Academic",
            "Informative",
            "Other",
        ],
        alias="DEFAULT_CATEGORIES",
    )

    # Monitoring
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    # Development
    debug: bool = Field(default=False, alias="DEBUG")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment"""
        valid_envs = ["development", "staging", "production", "test"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of {valid_envs}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
