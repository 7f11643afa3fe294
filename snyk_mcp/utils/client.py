from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..errors import ExternalProcessFailure


logger = logging.getLogger(__name__)

UNSET_ORG_VALUES = frozenset({"", "undefined", "null"})


def _subprocess_creationflags() -> int:
    """Avoid flashing a console window on Windows."""
    if os.name == "nt" and hasattr(subprocess, "CREATE_NO_WINDOW"):
        return int(subprocess.CREATE_NO_WINDOW)
    return 0


@dataclass(frozen=True)
class SnykResult:
    """Result of a snyk command execution."""

    ok: bool
    stdout: str
    stderr: str
    returncode: int
    command: List[str]
    error: Optional[str] = None

    @property
    def text(self) -> str:
        """Output to relay: stdout on success, else stdout, stderr or the error."""
        if self.ok:
            return self.stdout
        return self.stdout or self.stderr or self.error or ""

    def raise_for_status(self) -> "SnykResult":
        if not self.ok:
            raise ExternalProcessFailure(self)
        return self


class SnykClient:
    """Snyk CLI wrapper used by the tool dispatcher.

    Commands are run as argument vectors, never through a shell, so branch
    names and URLs reach snyk verbatim.
    """

    def __init__(
        self,
        snyk_bin: str = "snyk",
        timeout_seconds: Optional[int] = None,
        env_overrides: Optional[Dict[str, str]] = None,
    ):
        self.snyk_bin = snyk_bin
        self.timeout_seconds = timeout_seconds
        self.env_overrides = dict(env_overrides or {})

    def _build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.env_overrides)
        return env

    def run(self, args: Sequence[str]) -> SnykResult:
        """Run ``snyk <args>`` and return the result. Never raises."""
        cmd = [self.snyk_bin] + list(args)
        logger.info("Executing command: %s", shlex.join(cmd))

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                env=self._build_env(),
                timeout=self.timeout_seconds,
                creationflags=_subprocess_creationflags(),
            )
        except subprocess.TimeoutExpired:
            return SnykResult(
                ok=False,
                stdout="",
                stderr="",
                returncode=-1,
                command=cmd,
                error=f"Command timed out after {self.timeout_seconds}s",
            )
        except OSError as exc:
            return SnykResult(
                ok=False,
                stdout="",
                stderr="",
                returncode=-1,
                command=cmd,
                error=f"Failed to run {self.snyk_bin}: {exc}",
            )

        stderr = proc.stderr or ""
        return SnykResult(
            ok=proc.returncode == 0,
            stdout=proc.stdout or "",
            stderr=stderr,
            returncode=proc.returncode,
            command=cmd,
            error=None if proc.returncode == 0 else (stderr.strip() or f"snyk exited {proc.returncode}"),
        )

    def execute(self, command: str, args: Sequence[str] = ()) -> str:
        """Run a snyk subcommand and return its output as text.

        A non-zero exit is not an error here: snyk exits non-zero when it
        finds vulnerabilities and still prints the report on stdout.
        """
        argv = ([command] if command else []) + list(args)
        return self.run(argv).text

    def is_installed(self) -> bool:
        return self.run(["--version"]).ok

    def whoami(self) -> SnykResult:
        return self.run(["whoami"])

    def configured_org(self) -> Optional[str]:
        """Organisation ID from ``snyk config get org``, if one is set."""
        result = self.run(["config", "get", "org"])
        if not result.ok:
            logger.warning("Failed to get organization ID from Snyk CLI: %s", result.error)
            return None

        org = result.stdout.strip()
        if org in UNSET_ORG_VALUES:
            return None
        logger.info("Retrieved organization ID from Snyk CLI configuration")
        return org
