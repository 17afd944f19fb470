"""Configuration management module for tempo_mcp_server."""

from dotenv import load_dotenv

from .manager import (
    ENV_MAPPINGS,
    AppConfig,
    ConfigManager,
    JiraConfig,
    ServerConfig,
    TempoConfig,
)

load_dotenv()

# Global config manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config() -> AppConfig:
    """Load configuration from environment variables and .env."""
    return get_config_manager().load_app_config()


__all__ = [
    "ENV_MAPPINGS",
    "AppConfig",
    "ConfigManager",
    "JiraConfig",
    "ServerConfig",
    "TempoConfig",
    "get_config_manager",
    "load_config",
]
