"""Abstract transport base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from botin.core.router import TurnRouter
from botin.models import ReplyPayload


class Transport(ABC):
    def __init__(self, router: TurnRouter) -> None:
        self.router = router

    @property
    @abstractmethod
    def platform_name(self) -> str: ...

    @abstractmethod
    async def start(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...


class ReplyCollector:
    """Reply sink that keeps payloads in send order."""

    def __init__(self) -> None:
        self.replies: list[ReplyPayload] = []

    async def __call__(self, payload: ReplyPayload) -> None:
        self.replies.append(payload)
