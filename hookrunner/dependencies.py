"""Centralized FastAPI dependencies for use with Depends()."""

from hookrunner.config import settings
from hookrunner.schemas.config import RunnerConfig
from hookrunner.services.command_runner import CommandRunner, SubprocessCommandRunner
from hookrunner.services.config_store import ConfigStore

_config_store: ConfigStore = ConfigStore(settings.config_file, RunnerConfig())
_command_runner: CommandRunner = SubprocessCommandRunner()


def init_deps(store: ConfigStore, runner: CommandRunner | None = None) -> None:
    """Install the loaded configuration store (and optionally a runner).

    Called once by the CLI after the configuration file has been loaded.
    """
    global _config_store, _command_runner  # noqa: PLW0603

    _config_store = store
    if runner is not None:
        _command_runner = runner


def get_config_store() -> ConfigStore:
    """Return the process-wide configuration store.

    Holds an empty configuration until ``init_deps()`` installs the loaded one.
    """
    return _config_store


def get_command_runner() -> CommandRunner:
    """Return the command runner used for dispatch."""
    return _command_runner


__all__ = [
    "get_command_runner",
    "get_config_store",
    "init_deps",
]
