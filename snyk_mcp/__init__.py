"""Snyk MCP server package.

Layout:
- config.py: Server configuration from environment
- mcp.py: FastMCP tool definitions + transport runner
- dispatch.py: tool call routing and response mapping
- utils/: Snyk CLI wrapper, organisation lookup and argument schemas

Tools exposed:
- scan_repository: Snyk Code scan of a GitHub repository
- scan_project: scan of an existing Snyk project
- list_projects: projects of a Snyk organisation
- verify_token: check the configured API token
"""

from .mcp import mcp, run_stdio

__all__ = ["mcp", "run_stdio"]
