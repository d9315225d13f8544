"""Process runner for kubectl invocations."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from kubepick.commands import KubectlCommand

LOGGER = logging.getLogger("kubepick.runner")


@dataclass(frozen=True)
class CommandResult:
    output: str
    error: str | None = None
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, *, exit_code: int = 1, output: str = "") -> CommandResult:
        return cls(output=output, error=error, exit_code=exit_code)


class ProcessRunner(Protocol):
    def run(self, command: KubectlCommand) -> CommandResult:
        ...


class KubectlRunner:
    """Runs kubectl once per call and captures its output."""

    def __init__(
        self,
        *,
        binary: str = "kubectl",
        kubeconfig: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.binary = binary
        self.kubeconfig = kubeconfig
        self.timeout_seconds = timeout_seconds

    def run(self, command: KubectlCommand) -> CommandResult:
        argv = command.argv(self.binary, self.kubeconfig)
        LOGGER.debug("running command=%s", command.describe())
        try:
            completed = subprocess.run(
                argv,
                text=True,
                capture_output=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError:
            LOGGER.warning("kubectl binary not found binary=%s", self.binary)
            return CommandResult.failure(
                f"'{self.binary}' command not found. Ensure kubectl is installed and in your PATH.",
                exit_code=127,
            )
        except subprocess.TimeoutExpired:
            LOGGER.warning(
                "command timed out command=%s timeout_seconds=%s",
                command.describe(),
                self.timeout_seconds,
            )
            return CommandResult.failure(
                f"{command.describe()} timed out after {self.timeout_seconds} seconds",
                exit_code=124,
            )

        LOGGER.debug(
            "command finished command=%s exit_code=%s",
            command.describe(),
            completed.returncode,
        )
        if completed.returncode != 0:
            error = completed.stderr.strip() or (
                f"{command.describe()} exited with status {completed.returncode}"
            )
            return CommandResult.failure(
                error,
                exit_code=completed.returncode,
                output=completed.stdout,
            )
        return CommandResult(output=completed.stdout, exit_code=0)
