"""
Configuration management for ChartScribe.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import List, Optional

import json
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    db_name: str = Field(default="chartscribe", description="MongoDB database name")
    server_selection_timeout_ms: int = Field(
        default=15000, description="Server selection timeout in milliseconds"
    )

    @field_validator("uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if not v:
            raise ValueError("MongoDB URI is required. Please set MONGO_URI environment variable.")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration settings."""

    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_")

    endpoint: str = Field(default="", description="Azure OpenAI endpoint URL")
    api_key: str = Field(default="", description="Azure OpenAI API key")
    api_version: str = Field(default="2024-12-01-preview", description="Azure OpenAI API version")
    deployment_name: str = Field(default="gpt-4o", description="Azure OpenAI chat deployment name")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate Azure OpenAI endpoint format."""
        if v and not v.startswith("https://"):
            raise ValueError("Invalid Azure OpenAI endpoint format. Must be: https://xxx.openai.azure.com/")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key and self.deployment_name)


def _validate_temperature(v: float) -> float:
    if not 0.0 <= v <= 2.0:
        raise ValueError("Temperature must be between 0.0 and 2.0")
    return v


class ExtractionSettings(BaseSettings):
    """Structured note extraction settings."""

    model_config = SettingsConfigDict(env_prefix="EXTRACTION_")

    temperature: float = Field(default=0.1, description="Temperature for note extraction")
    max_tokens: int = Field(default=4000, description="Maximum tokens for the extracted note")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        return _validate_temperature(v)


class CdiSettings(BaseSettings):
    """Clinical Documentation Improvement pass settings."""

    model_config = SettingsConfigDict(env_prefix="CDI_")

    temperature: float = Field(default=0.2, description="Temperature for the CDI improvement pass")
    max_tokens: int = Field(default=4000, description="Maximum tokens for the improved chart")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        return _validate_temperature(v)


class RevealSettings(BaseSettings):
    """Field reveal sequencer timing."""

    model_config = SettingsConfigDict(env_prefix="REVEAL_")

    settle_delay_ms: int = Field(default=150, description="Delay after a field is marked animating")
    reveal_delay_ms: int = Field(default=350, description="Delay after a field value is copied")
    animate_over_http: bool = Field(
        default=False,
        description="Apply reveal delays when the sequencer runs inside an HTTP request",
    )

    @field_validator("settle_delay_ms", "reveal_delay_ms")
    @classmethod
    def validate_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Reveal delays cannot be negative")
        return v


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    allowed_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )
    allow_credentials: bool = Field(
        default=True, description="Allow credentials in CORS"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v.strip()]
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="ChartScribe", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    azure_openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    cdi: CdiSettings = Field(default_factory=CdiSettings)
    reveal: RevealSettings = Field(default_factory=RevealSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps in environments where the working directory isn't the backend folder
    and pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
