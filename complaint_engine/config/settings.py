"""
Environment configuration for the complaint lifecycle engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)

APPELLATE_STRATEGIES = ("first_approved", "configured", "round_robin")
DISPATCH_MODES = ("inline", "background")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Complaint Lifecycle Engine", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "complaints"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_ECHO: bool = False
    DB_CONNECT_ARGS: Dict[str, Any] = {}
    DB_SLOW_QUERY_SECONDS: float = 0.5

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True
    SENTRY_DSN: Optional[str] = None

    # Complaint intake
    DESCRIPTION_MAX_LENGTH: int = 1000
    MAX_IMAGES_PER_COMPLAINT: int = 2

    # Lifecycle rules
    FEEDBACK_CLOSE_THRESHOLD: int = 3
    DEFAULT_ESCALATION_REASON: str = "User not satisfied with resolution"
    APPELLATE_AUTHORITY_STRATEGY: str = "first_approved"
    APPELLATE_AUTHORITY_ID: Optional[str] = None
    TRANSITION_MAX_RETRIES: int = 3

    # Notifications
    NOTIFICATION_DISPATCH_MODE: str = "inline"
    NOTIFICATION_WORKERS: int = 4

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                import json
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator('APPELLATE_AUTHORITY_STRATEGY')
    @classmethod
    def validate_appellate_strategy(cls, v: str) -> str:
        """Only known authority selection strategies are accepted"""
        if v not in APPELLATE_STRATEGIES:
            raise ValueError(
                f"APPELLATE_AUTHORITY_STRATEGY must be one of {', '.join(APPELLATE_STRATEGIES)}"
            )
        return v

    @field_validator('NOTIFICATION_DISPATCH_MODE')
    @classmethod
    def validate_dispatch_mode(cls, v: str) -> str:
        if v not in DISPATCH_MODES:
            raise ValueError(
                f"NOTIFICATION_DISPATCH_MODE must be one of {', '.join(DISPATCH_MODES)}"
            )
        return v

    @field_validator('FEEDBACK_CLOSE_THRESHOLD')
    @classmethod
    def validate_close_threshold(cls, v: int) -> int:
        if v < 1 or v > 5:
            raise ValueError("FEEDBACK_CLOSE_THRESHOLD must be between 1 and 5")
        return v

    @field_validator('TRANSITION_MAX_RETRIES', 'MAX_IMAGES_PER_COMPLAINT', 'DESCRIPTION_MAX_LENGTH')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be a positive integer")
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
