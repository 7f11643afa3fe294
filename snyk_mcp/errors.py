from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Tuple

if TYPE_CHECKING:
    from .utils.client import SnykResult


class SnykMCPError(RuntimeError):
    """Base class for errors reported back to the MCP caller as text."""


class MissingConfigurationError(SnykMCPError):
    pass


class MissingOrganisationError(SnykMCPError):
    pass


class InvalidArgumentsError(SnykMCPError):
    """Tool arguments failed validation.

    ``errors`` holds one ``(field, reason)`` pair per offending field.
    """

    def __init__(self, errors: Sequence[Tuple[str, str]]):
        self.errors: List[Tuple[str, str]] = list(errors)
        detail = ", ".join(f"{field}: {reason}" for field, reason in self.errors)
        super().__init__(f"Invalid arguments: {detail}")


class InvalidUrlError(SnykMCPError):
    pass


class UnknownToolError(SnykMCPError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ExternalProcessFailure(SnykMCPError):
    """A snyk subprocess exited unsuccessfully or could not be started."""

    def __init__(self, result: "SnykResult"):
        self.result = result
        super().__init__(result.text or f"snyk exited {result.returncode}")
