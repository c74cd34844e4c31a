"""Command-line entry point: load config, bind, and serve webhooks."""

from __future__ import annotations

import argparse
import socket
import sys

import structlog
import uvicorn

from hookrunner.config import settings
from hookrunner.dependencies import init_deps
from hookrunner.errors import BindError, ConfigParseError, ConfigReadError
from hookrunner.logging_config import configure_logging
from hookrunner.services.config_store import ConfigStore
from hookrunner.services.reloader import ConfigReloader

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookrunner",
        description="Run configured commands when a repository push webhook arrives.",
    )
    parser.add_argument(
        "-config",
        "--config",
        dest="config",
        default=settings.config_file,
        help="configuration file to load (default: %(default)s)",
    )
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse *argv*; positional arguments are a usage error."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.extra:
        parser.error("extra arguments provided")
    return args


def bind_socket(address: str, port: int) -> socket.socket:
    """Create a listening TCP socket bound to *address*:*port*.

    Raises:
        BindError: If the address is in use, cannot be bound, or the port
            is outside 0-65535.
    """
    host = address or "0.0.0.0"
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except (OSError, OverflowError) as exc:
        sock.close()
        raise BindError(f"cannot bind {host}:{port}: {exc}") from exc
    sock.set_inheritable(True)
    return sock


def serve(sock: socket.socket) -> None:
    """Run uvicorn on an already bound socket until the process is stopped."""
    from hookrunner.main import app

    config = uvicorn.Config(app, log_config=None, log_level=settings.log_level.lower())
    uvicorn.Server(config).run(sockets=[sock])


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)

    try:
        store = ConfigStore.from_file(args.config)
    except (ConfigReadError, ConfigParseError) as exc:
        logger.error("config_load_failed", path=args.config, error=str(exc))
        sys.exit(1)

    init_deps(store)

    reloader = ConfigReloader(store)
    reloader.start()
    reloader.install_signal_handler()

    config = store.current
    try:
        sock = bind_socket(config.address, config.port)
    except BindError as exc:
        logger.error("bind_failed", address=config.listen_address, error=str(exc))
        reloader.stop()
        sys.exit(1)

    logger.info("listening", address=config.listen_address)
    try:
        serve(sock)
    finally:
        reloader.stop()
        sock.close()
