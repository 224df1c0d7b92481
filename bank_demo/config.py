"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class BankDemoConfig(BaseSettings):
    """Bank demo service configuration"""

    model_config = SettingsConfigDict(
        env_prefix="BANK_DEMO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage configuration
    storage_backend: str = "memory"  # memory or sqlite
    database_path: str = "bank_demo.db"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text


# Global configuration instance
config = BankDemoConfig()


def get_config() -> BankDemoConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankDemoConfig:
    """Reload configuration from environment"""
    global config
    config = BankDemoConfig()
    return config
