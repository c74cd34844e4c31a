"""Shared test fixtures for the config store, command runner and test client."""

import json
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from hookrunner.dependencies import get_command_runner, get_config_store
from hookrunner.main import app
from hookrunner.services.command_runner import InMemoryCommandRunner
from hookrunner.services.config_store import ConfigStore

DEMO_CONFIG = {
    "Address": "127.0.0.1",
    "Port": 9000,
    "Repositories": [{"Name": "demo", "Commands": ["/bin/echo-hi.sh"]}],
}


def write_config(path: Path, config: dict) -> Path:
    """Write *config* as JSON to *path* and return the path."""
    path.write_text(json.dumps(config))
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """A config file on disk holding the demo configuration."""
    return write_config(tmp_path / "config.json", DEMO_CONFIG)


@pytest.fixture
def config_store(config_path: Path) -> ConfigStore:
    """A store loaded from the demo configuration file."""
    return ConfigStore.from_file(config_path)


@pytest.fixture
def mock_command_runner() -> InMemoryCommandRunner:
    """Create a fresh in-memory command runner for test inspection."""
    return InMemoryCommandRunner()


@pytest.fixture
async def client(
    config_store: ConfigStore,
    mock_command_runner: InMemoryCommandRunner,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with dependencies overridden.

    Uses the demo config store and an in-memory runner so no processes
    are spawned.
    """
    app.dependency_overrides[get_config_store] = lambda: config_store
    app.dependency_overrides[get_command_runner] = lambda: mock_command_runner
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio, the event loop the app targets."""
    return "asyncio"
