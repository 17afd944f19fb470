"""Tests for configuration loading and client creation."""

import pytest

from tempo_mcp_server.api.errors import ConfigurationError
from tempo_mcp_server.api.jira_client import JiraClient
from tempo_mcp_server.api.tempo_client import TempoClient
from tempo_mcp_server.config import ConfigManager
from tempo_mcp_server.factories.client_factory import ClientFactory

FULL_ENV = {
    "TEMPO_API_TOKEN": "tempo-token",
    "JIRA_BASE_URL": "https://example.atlassian.net",
    "JIRA_API_TOKEN": "jira-token",
    "JIRA_EMAIL": "me@example.com",
    "JIRA_TEMPO_ACCOUNT_CUSTOM_FIELD_ID": "10234",
}


class TestConfigManager:
    """Test environment-backed configuration."""

    def test_loads_all_sections(self):
        config = ConfigManager(FULL_ENV).load_app_config()

        assert config.tempo.api_token == "tempo-token"
        assert config.tempo.base_url == "https://api.tempo.io/4"
        assert config.jira.base_url == "https://example.atlassian.net"
        assert config.jira.email == "me@example.com"
        assert config.jira.tempo_account_custom_field_id == "10234"
        assert config.server.log_level == "INFO"
        assert config.server.log_dir is None
        assert config.validate() == (True, [])

    def test_blank_values_count_as_missing(self):
        """Test that whitespace-only variables fall back to defaults."""
        env = {**FULL_ENV, "JIRA_TEMPO_ACCOUNT_CUSTOM_FIELD_ID": "  ", "TEMPO_BASE_URL": ""}
        config = ConfigManager(env).load_app_config()
        assert config.jira.tempo_account_custom_field_id is None
        assert config.tempo.base_url == "https://api.tempo.io/4"

    def test_validate_reports_missing(self):
        is_valid, errors = ConfigManager({}).load_app_config().validate()
        assert not is_valid
        assert errors == [
            "TEMPO_API_TOKEN is required",
            "JIRA_BASE_URL is required",
            "JIRA_API_TOKEN is required",
            "JIRA_EMAIL is required",
        ]


class TestClientFactory:
    """Test client creation from configuration."""

    def test_creates_clients(self):
        config = ConfigManager(FULL_ENV).load_app_config()

        tempo_client = ClientFactory.create_tempo_client(config)
        jira_client = ClientFactory.create_jira_client(config)

        assert isinstance(tempo_client, TempoClient)
        assert isinstance(jira_client, JiraClient)
        assert jira_client.tempo_account_field_id == "10234"

    def test_missing_tempo_token(self):
        config = ConfigManager({**FULL_ENV, "TEMPO_API_TOKEN": ""}).load_app_config()
        with pytest.raises(ConfigurationError):
            ClientFactory.create_tempo_client(config)

    def test_missing_jira_email(self):
        config = ConfigManager({**FULL_ENV, "JIRA_EMAIL": ""}).load_app_config()
        with pytest.raises(ConfigurationError) as exc_info:
            ClientFactory.create_jira_client(config)
        assert "JIRA_EMAIL" in str(exc_info.value)
