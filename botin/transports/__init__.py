"""Botin transports."""

from botin.transports.base import ReplyCollector, Transport
from botin.transports.console import ConsoleChannel
from botin.transports.server import BotServer

__all__ = [
    "BotServer",
    "ConsoleChannel",
    "ReplyCollector",
    "Transport",
]
