"""Core turn handling for botin."""

from botin.core.fetcher import AttachmentFetcher, rehydrate_buffers
from botin.core.ingestor import AttachmentIngestor
from botin.core.menu import MenuDispatcher, MenuSelector
from botin.core.router import TurnRouter

__all__ = [
    "AttachmentFetcher",
    "AttachmentIngestor",
    "MenuDispatcher",
    "MenuSelector",
    "TurnRouter",
    "rehydrate_buffers",
]
