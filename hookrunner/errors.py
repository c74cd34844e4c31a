"""Error taxonomy for startup, per-request and per-command failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hookrunner.services.command_runner import CommandResult


class HookRunnerError(Exception):
    """Base class for all hookrunner errors."""


class ConfigReadError(HookRunnerError):
    """The configuration file could not be opened or read."""


class ConfigParseError(HookRunnerError):
    """The configuration file is not valid JSON or has the wrong shape."""


class BindError(HookRunnerError):
    """The listen address could not be bound."""


class RequestReadError(HookRunnerError):
    """The request body could not be read."""


class RequestParseError(HookRunnerError):
    """The request body is not a valid webhook payload."""


class CommandExecutionError(HookRunnerError):
    """A configured command failed to start or exited non-zero.

    ``result`` is set when the process ran to completion, so the captured
    output is still available for logging.
    """

    def __init__(self, command: str, reason: str, result: CommandResult | None = None) -> None:
        super().__init__(f"{command}: {reason}")
        self.command = command
        self.reason = reason
        self.result = result
