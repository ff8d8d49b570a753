"""Subprocess runner for the external version-control tool."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from bujo_mcp.errors import SyncNetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Normalized result of one external command."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Run a command, get its exit status and output. Nothing else."""

    def run(self, args: Sequence[str], *, cwd: Path, timeout: float) -> CommandResult: ...


class SubprocessCommandRunner:
    """
    Runs ``git <args>`` in a subprocess.

    A non-zero exit is returned, not raised: the caller decides what it means.
    Timeouts and a missing executable are tooling failures and raise
    ``SyncNetworkError``. On timeout the child is killed before raising.
    """

    def __init__(self, executable: str = "git", env_overrides: Mapping[str, str] | None = None) -> None:
        self._executable = executable
        self._env_overrides = dict(env_overrides or {})

    def run(self, args: Sequence[str], *, cwd: Path, timeout: float) -> CommandResult:
        command = (self._executable, *args)
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        env.update(self._env_overrides)

        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                env=env,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise SyncNetworkError(f"Command timed out after {timeout:g} seconds", command=command) from e
        except FileNotFoundError as e:
            raise SyncNetworkError(
                f"{self._executable} is not installed or not in PATH", command=command
            ) from e

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout.strip(),
            stderr=completed.stderr.strip(),
        )
        logger.debug("%s -> %d", " ".join(command), result.returncode)
        return result
