"""Dispatching a push payload to the configured commands for its repository.

Every configuration entry whose name equals ``repository.name`` is run, in
configuration order, and each entry's commands run in the order listed. A
failing command is logged and skipped; it never stops the remaining commands
or entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from pydantic import ValidationError

from hookrunner.errors import CommandExecutionError, RequestParseError
from hookrunner.schemas.config import RunnerConfig
from hookrunner.schemas.webhooks import PushWebhookPayload
from hookrunner.services.command_runner import CommandRunner

logger = structlog.get_logger()


@dataclass(frozen=True)
class CommandOutcome:
    """What happened to one attempted command."""

    command: str
    succeeded: bool
    output: str = ""
    error: str | None = None


@dataclass
class DispatchReport:
    """Summary of one dispatch: matched entries and attempted commands."""

    repository: str
    entries_matched: int = 0
    outcomes: list[CommandOutcome] = field(default_factory=list)

    @property
    def commands_run(self) -> list[str]:
        return [outcome.command for outcome in self.outcomes]

    @property
    def failures(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)


def decode_payload(body: bytes) -> PushWebhookPayload:
    """Decode a raw request body into a push payload.

    Raises:
        RequestParseError: If the body is not JSON or lacks ``repository.name``.
    """
    try:
        return PushWebhookPayload.model_validate_json(body)
    except ValidationError as exc:
        raise RequestParseError(str(exc)) from exc


def dispatch(
    payload: PushWebhookPayload,
    config: RunnerConfig,
    runner: CommandRunner,
) -> DispatchReport:
    """Run the commands of every entry matching the payload's repository.

    Blocks until every command has exited. *config* is a single snapshot,
    so a reload during dispatch does not affect this request.
    """
    name = payload.repository.name
    report = DispatchReport(repository=name)
    log = logger.bind(repository=name, ref=payload.ref, after=payload.after)

    for entry in config.repositories:
        if entry.name != name:
            continue
        report.entries_matched += 1

        for command in entry.commands:
            try:
                result = runner.run(command)
            except CommandExecutionError as exc:
                output = exc.result.stdout if exc.result is not None else ""
                stderr = exc.result.stderr if exc.result is not None else ""
                log.error(
                    "command_failed",
                    command=command,
                    error=exc.reason,
                    output=output,
                    stderr=stderr,
                )
                report.outcomes.append(
                    CommandOutcome(
                        command=command, succeeded=False, output=output, error=exc.reason,
                    )
                )
                continue

            log.info("command_executed", command=command, output=result.stdout)
            report.outcomes.append(
                CommandOutcome(command=command, succeeded=True, output=result.stdout)
            )

    if report.entries_matched == 0:
        log.debug("dispatch_no_match")
    else:
        log.info(
            "dispatch_completed",
            entries_matched=report.entries_matched,
            commands_run=len(report.outcomes),
            failures=report.failures,
        )
    return report
