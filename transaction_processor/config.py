"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class ProcessorConfig(BaseSettings):
    """Transaction processor configuration"""

    model_config = SettingsConfigDict(
        env_prefix="TXPROC_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    # Input configuration
    csv_encoding: str = "utf-8-sig"  # Accepts a leading byte order mark


# Global configuration instance
config = ProcessorConfig()


def get_config() -> ProcessorConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ProcessorConfig:
    """Reload configuration from environment"""
    global config
    config = ProcessorConfig()
    return config
