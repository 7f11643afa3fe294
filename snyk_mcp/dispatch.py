"""Routes MCP tool calls to snyk CLI invocations.

Argument validation and organisation resolution happen before any scan
command starts. Only ``verify_token`` reports a failed subprocess as an error
response: the scan and listing commands exit non-zero whenever snyk finds
vulnerabilities, so their output is relayed as ordinary content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import SnykMCPServerConfig
from .errors import ExternalProcessFailure, InvalidUrlError
from .utils.client import SnykClient
from .utils.org import resolve_org_id
from .utils.schemas import (
    ListProjectsArgs,
    ScanProjectArgs,
    ScanRepositoryArgs,
    ToolArgs,
    get_descriptor,
    validate_arguments,
)


logger = logging.getLogger(__name__)

GITHUB_MARKER = "github.com/"


@dataclass(frozen=True)
class ToolResponse:
    """One MCP tool response: text blocks plus the error flag."""

    texts: List[str] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> "ToolResponse":
        return cls(texts=[text], is_error=is_error)

    @property
    def joined_text(self) -> str:
        return "\n".join(self.texts)


def extract_repo_path(url: str) -> str:
    """Return the ``owner/repo`` part following ``github.com/`` in a URL.

    Only the text up to a second ``github.com/`` is kept.
    """
    parts = url.split(GITHUB_MARKER)
    repo_path = parts[1] if len(parts) > 1 else ""
    if not repo_path:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url} (only github.com URLs are supported)")
    return repo_path


class SnykToolDispatcher:
    """Stateless translator from tool calls to snyk commands."""

    def __init__(self, config: SnykMCPServerConfig, client: SnykClient):
        self.config = config
        self.client = client
        self._handlers: Dict[str, Callable[[Any], ToolResponse]] = {
            "verify_token": self._verify_token,
            "scan_repository": self._scan_repository,
            "scan_project": self._scan_project,
            "list_projects": self._list_projects,
        }

    @classmethod
    def from_config(cls, config: SnykMCPServerConfig) -> "SnykToolDispatcher":
        client = SnykClient(
            snyk_bin=config.cli_bin,
            timeout_seconds=config.timeout_seconds,
            env_overrides=config.to_env_overrides(),
        )
        return cls(config, client)

    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResponse:
        descriptor = get_descriptor(name)
        args = validate_arguments(descriptor.name, arguments)
        logger.debug("Dispatching tool %s", descriptor.name)
        return self._handlers[descriptor.name](args)

    def _org(self, provided: Optional[str]) -> str:
        return resolve_org_id(provided, self.config, self.client)

    def _verify_token(self, _args: ToolArgs) -> ToolResponse:
        try:
            result = self.client.whoami().raise_for_status()
        except ExternalProcessFailure as exc:
            return ToolResponse.text(f"❌ Token verification failed: {exc}", is_error=True)
        return ToolResponse.text(f"✅ Token verified successfully!\n{result.stdout}")

    def _scan_repository(self, args: ScanRepositoryArgs) -> ToolResponse:
        repo_path = extract_repo_path(args.url)
        org_id = self._org(args.org)

        cli_args = [
            "test",
            f"--org={org_id}",
            "--json",
            GITHUB_MARKER + repo_path,
        ]
        if args.branch:
            cli_args.append(f"--branch={args.branch}")

        return ToolResponse.text(self.client.execute("code", cli_args))

    def _scan_project(self, args: ScanProjectArgs) -> ToolResponse:
        org_id = self._org(args.org)
        output = self.client.execute(
            "test",
            [f"--org={org_id}", f"--project-id={args.project_id}", "--json"],
        )
        return ToolResponse.text(output)

    def _list_projects(self, args: ListProjectsArgs) -> ToolResponse:
        org_id = self._org(args.org)
        output = self.client.execute("projects", ["list", f"--org={org_id}", "--json"])
        return ToolResponse.text(output)
