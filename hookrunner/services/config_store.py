"""Loading the repository configuration file and holding the active snapshot.

``ConfigStore`` owns the process-wide ``RunnerConfig``. Request handlers read
``current`` once and use that snapshot for the whole dispatch; ``reload``
builds a complete new snapshot before swapping it in under a lock, so a
reader never sees a half-updated configuration.
"""

from __future__ import annotations

import threading
from pathlib import Path

import structlog
from pydantic import ValidationError

from hookrunner.errors import ConfigParseError, ConfigReadError
from hookrunner.schemas.config import RunnerConfig

logger = structlog.get_logger()


def load_config(path: str | Path) -> RunnerConfig:
    """Read the whole configuration file at *path* and decode it.

    Raises:
        ConfigReadError: If the file cannot be opened or read.
        ConfigParseError: If the contents are not valid JSON or do not
            match the configuration shape.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigReadError(f"cannot read config file {path}: {exc}") from exc

    try:
        return RunnerConfig.model_validate_json(data)
    except ValidationError as exc:
        raise ConfigParseError(f"invalid config file {path}: {exc}") from exc


class ConfigStore:
    """Atomically swappable holder of the active configuration."""

    def __init__(self, path: str | Path, config: RunnerConfig) -> None:
        self.path = Path(path)
        self._config = config
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str | Path) -> ConfigStore:
        """Load *path* and return a store holding it; load errors propagate."""
        return cls(path, load_config(path))

    @property
    def current(self) -> RunnerConfig:
        with self._lock:
            return self._config

    def replace(self, config: RunnerConfig) -> None:
        """Swap in *config* as the active snapshot."""
        with self._lock:
            self._config = config

    def reload(self) -> bool:
        """Re-read the configuration file and swap it in.

        Returns *True* on success. On failure the error is logged and the
        previous snapshot stays active.
        """
        try:
            config = load_config(self.path)
        except (ConfigReadError, ConfigParseError) as exc:
            logger.error("config_reload_failed", path=str(self.path), error=str(exc))
            return False

        self.replace(config)
        logger.info(
            "config_reloaded",
            path=str(self.path),
            repositories=len(config.repositories),
        )
        return True

