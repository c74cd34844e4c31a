"""Command execution abstraction with protocol-based swappable implementations.

Production code uses ``SubprocessCommandRunner``, which runs each configured
command string directly as an executable (no shell, no arguments, inherited
environment) and blocks until it exits. Tests use ``InMemoryCommandRunner``,
which records commands for assertion without spawning processes.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol

from hookrunner.errors import CommandExecutionError


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command that ran to completion."""

    command: str
    returncode: int
    stdout: str
    stderr: str = ""


class CommandRunner(Protocol):
    """Protocol for running a single configured command."""

    def run(self, command: str) -> CommandResult:
        """Run *command* and return its captured output.

        Raises:
            CommandExecutionError: If the command cannot be started or
                exits with a non-zero status.
        """
        ...


class SubprocessCommandRunner:
    """Production implementation backed by ``subprocess.run``."""

    def run(self, command: str) -> CommandResult:
        """Execute *command* with no arguments and capture its output."""
        try:
            completed = subprocess.run(
                [command],
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except (OSError, ValueError) as exc:
            # ValueError: the command string holds a NUL byte
            raise CommandExecutionError(command, str(exc)) from exc

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
        if completed.returncode != 0:
            raise CommandExecutionError(
                command, f"exit status {completed.returncode}", result=result,
            )
        return result


class InMemoryCommandRunner:
    """Test double that records commands instead of executing them.

    Commands listed in ``failing`` raise ``CommandExecutionError`` after being
    recorded; ``outputs`` maps commands to canned stdout.
    """

    def __init__(
        self,
        failing: set[str] | None = None,
        outputs: dict[str, str] | None = None,
    ) -> None:
        self.commands: list[str] = []
        self.failing = failing or set()
        self.outputs = outputs or {}

    def run(self, command: str) -> CommandResult:
        """Record *command* and return a canned result."""
        self.commands.append(command)
        if command in self.failing:
            result = CommandResult(command=command, returncode=1, stdout="", stderr="failed")
            raise CommandExecutionError(command, "exit status 1", result=result)
        return CommandResult(command=command, returncode=0, stdout=self.outputs.get(command, ""))
