"""Botin entry point: wires the router to a transport and runs it."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any

import click

from botin.config import Settings, load_settings
from botin.core.fetcher import AttachmentFetcher
from botin.core.ingestor import AttachmentIngestor
from botin.core.menu import MenuDispatcher
from botin.core.router import TurnRouter
from botin.transports.connector import ConnectorClient
from botin.transports.console import ConsoleChannel
from botin.transports.server import BotServer
from botin.utils.logging import get_logger, setup_logging

log = get_logger(__name__)


class Botin:
    """Holds the per-process components shared by every turn."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.fetcher = AttachmentFetcher(timeout=settings.fetch.timeout)
        self.router = TurnRouter(
            AttachmentIngestor(self.fetcher, settings.get_storage_dir()),
            MenuDispatcher(settings.get_resources_dir()),
            bot_name=settings.bot_name,
        )

    async def close(self) -> None:
        await self.fetcher.close()


async def serve(settings: Settings) -> None:
    app = Botin(settings)
    connector = ConnectorClient(timeout=settings.connector.timeout)
    server = BotServer(settings.server, app.router, connector)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    log.info("botin_starting", storage_dir=str(settings.get_storage_dir()))
    await server.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await server.stop()
        await connector.close()
        await app.close()
        log.info("botin_stopped")


async def chat(settings: Settings) -> None:
    app = Botin(settings)
    channel = ConsoleChannel(app.router)
    try:
        await channel.start()
    finally:
        await channel.stop()
        await app.close()


def _load(config_path: str | None, log_level: str | None, port: int | None = None) -> Settings:
    overrides: dict[str, Any] = {}
    if log_level:
        overrides["log_level"] = log_level
    if port is not None:
        overrides["server"] = {"port": port}
    settings = load_settings(config_path, overrides)
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    return settings


@click.group()
def cli() -> None:
    """Botin, the attachments bot."""


@cli.command("serve")
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--port", type=int, default=None, help="Override the listening port")
def serve_cmd(config_path: str | None, log_level: str | None, port: int | None) -> None:
    """Run the HTTP messaging endpoint."""
    settings = _load(config_path, log_level, port)
    asyncio.run(serve(settings))


@cli.command("chat")
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default="WARNING", help="Log level (DEBUG, INFO, WARNING, ERROR)")
def chat_cmd(config_path: str | None, log_level: str | None) -> None:
    """Talk to the bot from this terminal."""
    settings = _load(config_path, log_level)
    asyncio.run(chat(settings))


if __name__ == "__main__":
    cli()
