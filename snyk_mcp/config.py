from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import MissingConfigurationError


def env_str(name: str, default: str, *, strip: bool = True) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() if strip else value


def env_optional_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class SnykMCPServerConfig:
    """Runtime configuration for the Snyk MCP server.

    Read once at startup and never mutated afterwards.

    Snyk configuration:
    - SNYK_API_KEY: API token handed to the snyk CLI (required)
    - SNYK_ORG_ID: default organisation ID used when a tool call has none
    - SNYK_CLI_BIN: snyk executable (default: snyk)
    - SNYK_TIMEOUT_SECONDS: subprocess timeout, 0 disables it (default: 0)

    MCP transport selection:
    - SNYK_MCP_TRANSPORT: stdio|http|sse
    - SNYK_MCP_HOST
    - SNYK_MCP_PORT
    - SNYK_MCP_LOG_LEVEL: level of the stderr operational log
    """

    api_key: str
    default_org_id: Optional[str]
    cli_bin: str
    timeout_seconds: Optional[int]

    mcp_transport: str
    mcp_host: str
    mcp_port: int
    log_level: str

    DEFAULT_CLI_BIN: str = "snyk"
    DEFAULT_MCP_TRANSPORT: str = "stdio"
    DEFAULT_MCP_HOST: str = "0.0.0.0"
    DEFAULT_MCP_PORT: int = 8010
    DEFAULT_LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "SnykMCPServerConfig":
        api_key = env_optional_str("SNYK_API_KEY")
        if not api_key:
            raise MissingConfigurationError("SNYK_API_KEY environment variable is not set")

        timeout = env_int("SNYK_TIMEOUT_SECONDS", 0)
        transport = env_str("SNYK_MCP_TRANSPORT", cls.DEFAULT_MCP_TRANSPORT).lower()

        return cls(
            api_key=api_key,
            default_org_id=env_optional_str("SNYK_ORG_ID"),
            cli_bin=env_str("SNYK_CLI_BIN", cls.DEFAULT_CLI_BIN) or cls.DEFAULT_CLI_BIN,
            timeout_seconds=timeout if timeout > 0 else None,
            mcp_transport=transport,
            mcp_host=env_str("SNYK_MCP_HOST", cls.DEFAULT_MCP_HOST),
            mcp_port=env_int("SNYK_MCP_PORT", cls.DEFAULT_MCP_PORT),
            log_level=env_str("SNYK_MCP_LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
        )

    def to_env_overrides(self) -> Dict[str, str]:
        """Environment passed on to every snyk subprocess."""
        return {"SNYK_TOKEN": self.api_key}

    def to_dict(self) -> dict:
        return {
            "has_api_key": bool(self.api_key),
            "default_org_id": self.default_org_id,
            "cli_bin": self.cli_bin,
            "timeout_seconds": self.timeout_seconds,
            "mcp_transport": self.mcp_transport,
            "mcp_host": self.mcp_host,
            "mcp_port": self.mcp_port,
        }
