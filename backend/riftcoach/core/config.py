"""Configuration settings for the RiftCoach backend."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration (champion benchmark store)
    postgres_db: str = Field(default="riftcoach_db")
    postgres_user: str = Field(default="riftcoach_user")
    postgres_password: str = Field(default="dev_password")
    postgres_host: str = Field(default="postgres")
    postgres_port: int = Field(default=5432)

    @property
    def database_url(self) -> str:
        """Construct async database URL from components."""
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [
            origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
        ]

    # Riot API Configuration
    riot_api_key: str = Field(default="", description="Riot developer API key")
    riot_region: str = Field(default="europe", description="Default regional route")

    # Analysis pipeline
    analysis_match_count: int = Field(
        default=50, ge=1, le=100, description="Matches requested per analysis"
    )
    match_fetch_concurrency: int = Field(
        default=8, ge=1, description="Maximum match downloads in flight"
    )
    match_fetch_timeout_seconds: float = Field(
        default=25.0,
        gt=0,
        description="Deadline for the whole match download step",
    )
    analysis_timeline_match_count: int = Field(
        default=10,
        ge=0,
        le=20,
        description="Most recent matches whose timelines are analysed, 0 disables",
    )
    analysis_cache_ttl_seconds: int = Field(default=300, ge=0)
    benchmark_cache_ttl_seconds: int = Field(default=3600, ge=0)

    @field_validator("riot_region")
    @classmethod
    def lowercase_route(cls, v: str) -> str:
        """Riot routing value is lower case."""
        return v.strip().lower()

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="forbid",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
