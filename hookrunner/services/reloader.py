"""Background configuration reload driven by SIGHUP.

Python delivers signals to the main thread only, so the signal handler just
sets an event; a daemon thread waits on that event and performs the reload,
then goes back to waiting.
"""

from __future__ import annotations

import signal
import threading
from types import FrameType

import structlog

from hookrunner.services.config_store import ConfigStore

logger = structlog.get_logger()


class ConfigReloader:
    """Waits for reload triggers and re-reads the configuration each time."""

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self._wakeup = threading.Event()
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="config-reloader", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the reload thread and wait for it to exit."""
        self._stopping.set()
        self._wakeup.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def trigger(self) -> None:
        """Request a reload; safe to call from a signal handler."""
        self._wakeup.set()

    def install_signal_handler(self, signum: int = signal.SIGHUP) -> None:
        """Route *signum* to ``trigger``. Must be called from the main thread."""

        def _handle(received: int, frame: FrameType | None) -> None:
            self.trigger()

        signal.signal(signum, _handle)
        logger.debug("reload_signal_installed", signal=signal.Signals(signum).name)

    def _run(self) -> None:
        while True:
            self._wakeup.wait()
            if self._stopping.is_set():
                return
            # Triggers that arrive while reloading collapse into one more pass.
            self._wakeup.clear()
            self._store.reload()
