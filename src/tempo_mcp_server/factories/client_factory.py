"""Factory for creating API clients."""

from ..api.errors import ConfigurationError
from ..api.jira_client import JiraClient
from ..api.tempo_client import TempoClient
from ..config import AppConfig


class ClientFactory:
    """Factory for creating API clients with configuration."""

    @staticmethod
    def create_tempo_client(config: AppConfig) -> TempoClient:
        """Create Tempo API client."""
        if not config.tempo.api_token:
            raise ConfigurationError("TEMPO_API_TOKEN is required")
        return TempoClient(config.tempo.api_token, config.tempo.base_url)

    @staticmethod
    def create_jira_client(config: AppConfig) -> JiraClient:
        """Create Jira API client."""
        if not config.jira.base_url:
            raise ConfigurationError("JIRA_BASE_URL is required")
        if not config.jira.email:
            raise ConfigurationError("JIRA_EMAIL is required")
        if not config.jira.api_token:
            raise ConfigurationError("JIRA_API_TOKEN is required")
        return JiraClient(
            config.jira.base_url,
            config.jira.email,
            config.jira.api_token,
            config.jira.tempo_account_custom_field_id,
        )
