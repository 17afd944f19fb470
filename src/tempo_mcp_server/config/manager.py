"""Configuration manager reading settings from environment variables."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..api.tempo_client import DEFAULT_BASE_URL


@dataclass
class TempoConfig:
    api_token: str
    base_url: str = DEFAULT_BASE_URL


@dataclass
class JiraConfig:
    base_url: str
    api_token: str
    email: str
    # Custom field linking issues to Tempo accounts. Must be set when the
    # organization has a mandatory "Account" work attribute.
    tempo_account_custom_field_id: Optional[str] = None


@dataclass
class ServerConfig:
    name: str = "tempo-mcp-server"
    version: str = "1.0.0"
    log_level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass
class AppConfig:
    tempo: TempoConfig
    jira: JiraConfig
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> tuple[bool, List[str]]:
        """Validate required configuration fields.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors: List[str] = []

        if not self.tempo.api_token:
            errors.append("TEMPO_API_TOKEN is required")
        if not self.jira.base_url:
            errors.append("JIRA_BASE_URL is required")
        if not self.jira.api_token:
            errors.append("JIRA_API_TOKEN is required")
        if not self.jira.email:
            errors.append("JIRA_EMAIL is required")

        return len(errors) == 0, errors


# Configuration key -> (environment variable, default)
ENV_MAPPINGS: Dict[str, tuple[str, Any]] = {
    "tempo.api_token": ("TEMPO_API_TOKEN", ""),
    "tempo.base_url": ("TEMPO_BASE_URL", DEFAULT_BASE_URL),
    "jira.base_url": ("JIRA_BASE_URL", ""),
    "jira.api_token": ("JIRA_API_TOKEN", ""),
    "jira.email": ("JIRA_EMAIL", ""),
    "jira.tempo_account_custom_field_id": ("JIRA_TEMPO_ACCOUNT_CUSTOM_FIELD_ID", None),
    "server.log_level": ("LOG_LEVEL", "INFO"),
    "server.log_dir": ("LOG_DIR", None),
}


class ConfigManager:
    """Configuration manager backed by environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration manager.

        Args:
            environ: Environment mapping to read from (defaults to os.environ)
        """
        self.environ = environ if environ is not None else os.environ

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value from the environment.

        Args:
            key: Configuration key (e.g., 'jira.base_url')
            default: Default value if not set

        Returns:
            Configuration value
        """
        env_key, mapped_default = ENV_MAPPINGS.get(
            key, (key.replace(".", "_").upper(), None)
        )
        value = self.environ.get(env_key)
        if value is None or value.strip() == "":
            return default if default is not None else mapped_default
        return value.strip()

    def load_app_config(self) -> AppConfig:
        """Load complete application configuration.

        Returns:
            AppConfig instance with all configuration sections
        """
        tempo_config = TempoConfig(
            api_token=self.get_config("tempo.api_token"),
            base_url=self.get_config("tempo.base_url"),
        )

        jira_config = JiraConfig(
            base_url=self.get_config("jira.base_url"),
            api_token=self.get_config("jira.api_token"),
            email=self.get_config("jira.email"),
            tempo_account_custom_field_id=self.get_config(
                "jira.tempo_account_custom_field_id"
            ),
        )

        server_config = ServerConfig(
            log_level=self.get_config("server.log_level"),
            log_dir=self.get_config("server.log_dir"),
        )

        return AppConfig(tempo=tempo_config, jira=jira_config, server=server_config)
