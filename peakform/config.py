"""
Configuration management for PeakForm.

Settings are read from environment variables (and a .env file when present)
with defaults suitable for local development. Algorithm constants live in
``peakform.const`` and are intentionally not configurable.
"""

from functools import lru_cache
from typing import Dict, Any, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load .env from the current working directory if one exists
load_dotenv()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="")

    level: str = Field(default="INFO", alias="PEAKFORM_LOG_LEVEL")
    log_dir: Optional[str] = Field(default=None, alias="PEAKFORM_LOG_DIR")


class ElasticsearchSettings(BaseSettings):
    """Elasticsearch connection and index configuration."""

    model_config = SettingsConfigDict(env_prefix="")

    host: str = Field(default="http://localhost:9200", alias="ELASTICSEARCH_HOST")
    username: str = Field(default="elastic", alias="ELASTICSEARCH_USER")
    password: str = Field(default="ChangeMe", alias="ELASTICSEARCH_PASSWORD")
    timeout: int = Field(default=30)
    verify_certs: bool = Field(default=False)
    session_index: str = Field(default="fitness-sessions", alias="PEAKFORM_SESSION_INDEX")
    goal_index: str = Field(default="fitness-goals", alias="PEAKFORM_GOAL_INDEX")
    progress_index: str = Field(default="fitness-goal-progress", alias="PEAKFORM_PROGRESS_INDEX")
    fetch_limit: int = Field(default=10000, ge=1, alias="PEAKFORM_FETCH_LIMIT")

    @property
    def hosts(self) -> list[str]:
        """Get hosts as a list for the Elasticsearch client."""
        host = self.host
        if not host.startswith(("http://", "https://")):
            host = f"http://{host}"
        return [host]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to keyword arguments for the Elasticsearch client."""
        config = {
            'hosts': self.hosts,
            'request_timeout': self.timeout,
            'verify_certs': self.verify_certs,
        }
        if self.username and self.password:
            config['basic_auth'] = (self.username, self.password)
        return config


class Settings(BaseSettings):
    """Main settings combining all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore"
    )

    environment: str = Field(default="development", alias="ENVIRONMENT")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    elasticsearch: ElasticsearchSettings = Field(default_factory=ElasticsearchSettings)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
