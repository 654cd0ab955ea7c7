"""
Core configuration management using Pydantic Settings.
Follows 12-factor app principles for environment-based configuration.
"""

from typing import List, Optional, Union
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "FoodBuddy Ingredient Analysis API"
    version: str = "1.0.0"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Global kill-switch, answers every route with a 503 page
    maintenance_mode: bool = Field(default=False)

    # CORS
    cors_origins: Union[List[str], str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # Analysis service (OpenAI-compatible Groq endpoint)
    groq_api_key: Optional[str] = Field(default=None)
    llm_base_url: str = Field(default="https://api.groq.com/openai/v1")
    llm_model: str = Field(default="openai/gpt-oss-20b")
    llm_timeout: float = Field(default=30.0)

    # Enrichment
    confidence_strategy: str = Field(default="deterministic")

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0")
    history_limit: int = Field(default=5)

    # Google Cloud (label OCR)
    google_application_credentials: Optional[str] = Field(default=None)
    max_image_bytes: int = Field(default=10 * 1024 * 1024)  # 10MB

    @validator("cors_origins", pre=True)
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment values."""
        allowed = ["development", "staging", "production", "testing"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @validator("confidence_strategy")
    def validate_confidence_strategy(cls, v):
        """Validate the risk confidence strategy name."""
        allowed = ["deterministic", "fixed", "random"]
        if v.lower() not in allowed:
            raise ValueError(f"Confidence strategy must be one of {allowed}")
        return v.lower()

    @validator("history_limit")
    def validate_history_limit(cls, v):
        if v < 1:
            raise ValueError("History limit must be at least 1")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


# Environment-specific configurations
class DevelopmentConfig(Settings):
    """Development environment configuration."""
    debug: bool = True
    log_level: str = "DEBUG"


class ProductionConfig(Settings):
    """Production environment configuration."""
    debug: bool = False
    log_level: str = "WARNING"

    @validator("groq_api_key", always=True)
    def validate_api_key_production(cls, v):
        """Ensure the analysis service is reachable in production."""
        if not v:
            raise ValueError("GROQ_API_KEY must be set in production")
        return v


def get_settings() -> Settings:
    """Factory function to get environment-specific settings."""
    env = Settings().environment.lower()

    if env == "production":
        return ProductionConfig()
    elif env == "development":
        return DevelopmentConfig()
    else:
        return Settings()


# Global settings instance
settings = get_settings()
