"""Tests for payload decoding and the dispatch loop."""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from hookrunner.errors import RequestParseError
from hookrunner.schemas.config import RepositoryEntry, RunnerConfig
from hookrunner.services.command_runner import InMemoryCommandRunner, SubprocessCommandRunner
from hookrunner.services.dispatcher import decode_payload, dispatch


def _config(*entries: tuple[str, list[str]]) -> RunnerConfig:
    return RunnerConfig(
        repositories=[RepositoryEntry(name=name, commands=commands) for name, commands in entries]
    )


def test_decode_minimal_payload() -> None:
    """Only ``repository.name`` is required; everything else defaults."""
    payload = decode_payload(b'{"repository": {"name": "demo"}}')

    assert payload.repository.name == "demo"
    assert payload.commits == []
    assert payload.total_commits_count == 0
    assert payload.ref == ""


def test_decode_full_payload() -> None:
    """GitLab field spellings are mapped onto the payload model."""
    payload = decode_payload(
        b"""{
            "before": "95790bf8",
            "after": "da1560886",
            "ref": "refs/heads/master",
            "user_id": 4,
            "user_name": "John Smith",
            "project_id": 15,
            "repository": {
                "name": "Diaspora",
                "url": "git@example.com:mike/diaspora.git",
                "description": null,
                "homepage": "http://example.com/mike/diaspora"
            },
            "commits": [
                {
                    "id": "b6568db1",
                    "message": "Update Catalan translation",
                    "timestamp": "2011-12-12T14:27:31+02:00",
                    "url": "http://example.com/mike/diaspora/commit/b6568db1",
                    "author": {"name": "Jordi Mallach", "email": "jordi@softcatala.org"}
                }
            ],
            "total_commits_count": 1
        }"""
    )

    assert payload.user_name == "John Smith"
    assert payload.user_id == 4
    assert payload.project_id == 15
    assert payload.repository.home_page == "http://example.com/mike/diaspora"
    assert payload.repository.description is None
    assert payload.commits[0].author.email == "jordi@softcatala.org"
    assert payload.total_commits_count == 1


def test_decode_accepts_username_spelling() -> None:
    payload = decode_payload(b'{"username": "jsmith", "repository": {"name": "demo"}}')

    assert payload.user_name == "jsmith"


@pytest.mark.parametrize(
    "body",
    [b"not json", b"[1, 2]", b'{"ref": "refs/heads/main"}', b'{"repository": {"url": "x"}}'],
)
def test_decode_rejects_bad_bodies(body: bytes) -> None:
    with pytest.raises(RequestParseError):
        decode_payload(body)


def test_dispatch_runs_every_matching_entry_in_order() -> None:
    """Commands of all entries named ``demo`` run, in configuration order."""
    runner = InMemoryCommandRunner()
    config = _config(("demo", ["one", "two"]), ("api", ["skip"]), ("demo", ["three"]))

    report = dispatch(decode_payload(b'{"repository": {"name": "demo"}}'), config, runner)

    assert runner.commands == ["one", "two", "three"]
    assert report.entries_matched == 2
    assert report.commands_run == ["one", "two", "three"]
    assert report.failures == 0


def test_dispatch_without_match_runs_nothing() -> None:
    runner = InMemoryCommandRunner()

    report = dispatch(
        decode_payload(b'{"repository": {"name": "nope"}}'),
        _config(("demo", ["one"])),
        runner,
    )

    assert runner.commands == []
    assert report.entries_matched == 0
    assert report.outcomes == []


def test_dispatch_entry_without_commands() -> None:
    """A matching entry with an empty command list is a no-op."""
    runner = InMemoryCommandRunner()

    report = dispatch(
        decode_payload(b'{"repository": {"name": "demo"}}'), _config(("demo", [])), runner,
    )

    assert report.entries_matched == 1
    assert runner.commands == []


def test_dispatch_continues_after_failure() -> None:
    """A failing command is logged and the next command and entry still run."""
    runner = InMemoryCommandRunner(failing={"fail"}, outputs={"succeed": "ok\n"})
    config = _config(("demo", ["fail", "succeed"]), ("demo", ["fail"]))

    with capture_logs() as logs:
        report = dispatch(decode_payload(b'{"repository": {"name": "demo"}}'), config, runner)

    assert runner.commands == ["fail", "succeed", "fail"]
    assert report.failures == 2
    assert [o.succeeded for o in report.outcomes] == [False, True, False]
    assert report.outcomes[0].error == "exit status 1"

    events = [(entry["event"], entry["command"]) for entry in logs if "command" in entry]
    assert events == [
        ("command_failed", "fail"),
        ("command_executed", "succeed"),
        ("command_failed", "fail"),
    ]


def test_dispatch_logs_command_output() -> None:
    runner = InMemoryCommandRunner(outputs={"/bin/echo-hi.sh": "hi\n"})

    with capture_logs() as logs:
        dispatch(
            decode_payload(b'{"repository": {"name": "demo"}, "ref": "refs/heads/main"}'),
            _config(("demo", ["/bin/echo-hi.sh"])),
            runner,
        )

    executed = next(entry for entry in logs if entry["event"] == "command_executed")
    assert executed["output"] == "hi\n"
    assert executed["repository"] == "demo"
    assert executed["ref"] == "refs/heads/main"
    assert executed["log_level"] == "info"


def test_dispatch_continues_after_unstartable_command(tmp_path: Path) -> None:
    """A command that cannot be started does not stop the next one."""
    good = tmp_path / "good.sh"
    good.write_text("#!/bin/sh\necho ran\n")
    good.chmod(0o755)
    config = _config(("demo", ["bad\x00cmd", str(good)]))

    with capture_logs() as logs:
        report = dispatch(
            decode_payload(b'{"repository": {"name": "demo"}}'), config, SubprocessCommandRunner(),
        )

    assert [o.succeeded for o in report.outcomes] == [False, True]
    assert report.outcomes[1].output == "ran\n"
    assert [entry["event"] for entry in logs if "command" in entry] == [
        "command_failed",
        "command_executed",
    ]
