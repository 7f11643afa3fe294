import pytest

from snyk_mcp.config import SnykMCPServerConfig
from snyk_mcp.errors import MissingConfigurationError

ENV_VARS = [
    "SNYK_API_KEY",
    "SNYK_ORG_ID",
    "SNYK_CLI_BIN",
    "SNYK_TIMEOUT_SECONDS",
    "SNYK_MCP_TRANSPORT",
    "SNYK_MCP_HOST",
    "SNYK_MCP_PORT",
    "SNYK_MCP_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_api_key_is_fatal():
    with pytest.raises(MissingConfigurationError, match="SNYK_API_KEY"):
        SnykMCPServerConfig.from_env()


def test_blank_api_key_is_fatal(monkeypatch):
    monkeypatch.setenv("SNYK_API_KEY", "   ")
    with pytest.raises(MissingConfigurationError):
        SnykMCPServerConfig.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("SNYK_API_KEY", "key")
    cfg = SnykMCPServerConfig.from_env()

    assert cfg.api_key == "key"
    assert cfg.default_org_id is None
    assert cfg.cli_bin == "snyk"
    assert cfg.timeout_seconds is None
    assert cfg.mcp_transport == "stdio"
    assert cfg.mcp_port == SnykMCPServerConfig.DEFAULT_MCP_PORT
    assert cfg.log_level == "INFO"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SNYK_API_KEY", "key")
    monkeypatch.setenv("SNYK_ORG_ID", " my-org ")
    monkeypatch.setenv("SNYK_CLI_BIN", "/opt/snyk/bin/snyk")
    monkeypatch.setenv("SNYK_TIMEOUT_SECONDS", "90")
    monkeypatch.setenv("SNYK_MCP_TRANSPORT", "HTTP")
    monkeypatch.setenv("SNYK_MCP_PORT", "9000")
    monkeypatch.setenv("SNYK_MCP_LOG_LEVEL", "debug")

    cfg = SnykMCPServerConfig.from_env()

    assert cfg.default_org_id == "my-org"
    assert cfg.cli_bin == "/opt/snyk/bin/snyk"
    assert cfg.timeout_seconds == 90
    assert cfg.mcp_transport == "http"
    assert cfg.mcp_port == 9000
    assert cfg.log_level == "DEBUG"


def test_empty_org_and_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("SNYK_API_KEY", "key")
    monkeypatch.setenv("SNYK_ORG_ID", "")
    monkeypatch.setenv("SNYK_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("SNYK_MCP_PORT", "eighty")

    cfg = SnykMCPServerConfig.from_env()

    assert cfg.default_org_id is None
    assert cfg.timeout_seconds is None
    assert cfg.mcp_port == SnykMCPServerConfig.DEFAULT_MCP_PORT


def test_api_key_is_handed_to_the_cli_but_not_exposed(config):
    assert config.to_env_overrides() == {"SNYK_TOKEN": "test-api-key"}
    assert "test-api-key" not in str(config.to_dict())
