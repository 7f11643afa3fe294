from __future__ import annotations

from typing import Optional

from ..config import SnykMCPServerConfig
from ..errors import MissingOrganisationError
from .client import SnykClient


MISSING_ORG_MESSAGE = (
    "Snyk organisation ID is required. You can provide it in one of these ways:\n"
    "1. Include it in the command\n"
    "2. Configure SNYK_ORG_ID in the MCP settings\n"
    '3. Set it in your Snyk CLI configuration using "snyk config set org=<org-id>"'
)


def resolve_org_id(
    provided_org_id: Optional[str],
    config: SnykMCPServerConfig,
    client: SnykClient,
) -> str:
    """Pick the organisation ID for one tool call.

    Priority: the value passed in the call, then SNYK_ORG_ID, then the org
    stored in the snyk CLI configuration. The CLI is asked again on every
    call since its configuration can change while the server runs.
    """
    if provided_org_id:
        return provided_org_id

    if config.default_org_id:
        return config.default_org_id

    if client.is_installed():
        cli_org_id = client.configured_org()
        if cli_org_id:
            return cli_org_id

    raise MissingOrganisationError(MISSING_ORG_MESSAGE)
