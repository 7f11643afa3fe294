from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from snyk_mcp.config import SnykMCPServerConfig
from snyk_mcp.dispatch import SnykToolDispatcher
from snyk_mcp.utils.client import SnykClient, SnykResult


class RecordingSnykClient(SnykClient):
    """SnykClient whose subprocesses are scripted by argv prefix.

    ``responses`` maps an argv prefix tuple to ``(returncode, stdout, stderr)``.
    Unscripted commands succeed with empty output. Every argv is recorded.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Tuple[int, str, str]]] = None):
        super().__init__(snyk_bin="snyk")
        self.responses = dict(responses or {})
        self.calls: List[List[str]] = []

    def run(self, args: Sequence[str]) -> SnykResult:
        argv = list(args)
        self.calls.append(argv)

        returncode, stdout, stderr = 0, "", ""
        for prefix, scripted in self.responses.items():
            if tuple(argv[: len(prefix)]) == prefix:
                returncode, stdout, stderr = scripted
                break

        return SnykResult(
            ok=returncode == 0,
            stdout=stdout,
            stderr=stderr,
            returncode=returncode,
            command=["snyk"] + argv,
            error=None if returncode == 0 else (stderr.strip() or f"snyk exited {returncode}"),
        )


CLI_MISSING = {("--version",): (127, "", "snyk: command not found")}


@pytest.fixture
def config() -> SnykMCPServerConfig:
    return SnykMCPServerConfig(
        api_key="test-api-key",
        default_org_id=None,
        cli_bin="snyk",
        timeout_seconds=None,
        mcp_transport="stdio",
        mcp_host="0.0.0.0",
        mcp_port=8010,
        log_level="INFO",
    )


@pytest.fixture
def make_config(config):
    def _make(**overrides) -> SnykMCPServerConfig:
        return dataclasses.replace(config, **overrides)

    return _make


@pytest.fixture
def make_dispatcher(make_config):
    """Build a dispatcher over a recording client; returns (dispatcher, client)."""

    def _make(responses=None, **config_overrides):
        client = RecordingSnykClient(responses)
        return SnykToolDispatcher(make_config(**config_overrides), client), client

    return _make
