from __future__ import annotations

import inspect
import logging
import os
import sys
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import TextContent

from .config import SnykMCPServerConfig
from .dispatch import SnykToolDispatcher
from .errors import MissingConfigurationError, SnykMCPError
from .log import configure_logging
from .utils.schemas import describe_tools


logger = logging.getLogger(__name__)

mcp = FastMCP("snyk-mcp-server")

_DISPATCHER: Optional[SnykToolDispatcher] = None


def _dispatcher_from_env() -> SnykToolDispatcher:
    """Get or create the dispatcher from environment configuration."""
    global _DISPATCHER
    if _DISPATCHER is not None:
        return _DISPATCHER

    _DISPATCHER = SnykToolDispatcher.from_config(SnykMCPServerConfig.from_env())
    return _DISPATCHER


class SnykTool(Tool):
    """FastMCP tool served straight from the tool registry.

    Arguments reach the dispatcher unvalidated, so the registry models are
    the only schema and the only validation a caller ever meets.
    """

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        try:
            response = _dispatcher_from_env().call_tool(self.name, arguments)
        except SnykMCPError as exc:
            raise ToolError(str(exc)) from exc

        if response.is_error:
            raise ToolError(response.joined_text)
        return ToolResult(content=[TextContent(type="text", text=t) for t in response.texts])


for _descriptor in describe_tools():
    mcp.add_tool(
        SnykTool(
            name=_descriptor.name,
            description=_descriptor.description,
            parameters=_descriptor.input_schema,
        )
    )


def run_stdio() -> None:
    """Run the Snyk MCP server.

    Exits with status 1 when SNYK_API_KEY is missing. The transport defaults
    to stdio; MCP_TRANSPORT / SNYK_MCP_TRANSPORT select http or sse instead.
    """
    global _DISPATCHER

    try:
        cfg = SnykMCPServerConfig.from_env()
    except MissingConfigurationError as exc:
        configure_logging()
        logger.error("Fatal error: %s", exc)
        sys.exit(1)

    configure_logging(cfg.log_level)
    logger.debug("Configuration: %s", cfg.to_dict())
    _DISPATCHER = SnykToolDispatcher.from_config(cfg)

    transport = (os.environ.get("MCP_TRANSPORT") or cfg.mcp_transport or "stdio").lower().strip()
    if transport == "stdio":
        logger.info("Snyk MCP Server running on stdio")
        mcp.run(transport="stdio")
        return

    host = os.environ.get("MCP_HOST") or cfg.mcp_host
    port_raw = os.environ.get("MCP_PORT")
    try:
        port = int(port_raw) if port_raw else int(cfg.mcp_port)
    except ValueError:
        port = int(cfg.mcp_port)

    sig = inspect.signature(mcp.run)
    open_kwargs = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in sig.parameters.values())
    kwargs: Dict[str, Any] = {"transport": transport}
    if open_kwargs or "host" in sig.parameters:
        kwargs["host"] = host
    if open_kwargs or "port" in sig.parameters:
        kwargs["port"] = port

    logger.info("Snyk MCP Server running on %s://%s:%s", transport, host, port)
    mcp.run(**kwargs)
