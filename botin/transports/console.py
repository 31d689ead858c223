"""Local console channel for talking to the bot from a terminal."""

from __future__ import annotations

import asyncio
from typing import Callable
from urllib.parse import urlparse
from uuid import uuid4

import click

from botin.core.router import TurnRouter
from botin.models import AttachmentRef, HeroCard, IncomingTurn, ReplyPayload, TurnType
from botin.transports.base import Transport
from botin.utils.logging import get_logger

log = get_logger(__name__)

USER_ID = "console-user"
BOT_ID = "console-bot"
ATTACH_PREFIX = "/attach "


def format_reply(payload: ReplyPayload) -> str:
    lines: list[str] = []
    if payload.text:
        lines.append(payload.text)
    for attachment in payload.attachments:
        if isinstance(attachment, HeroCard):
            if attachment.text:
                lines.append(attachment.text)
            for button in attachment.buttons:
                lines.append(f"  [{button.title}] -> {button.value}")
        elif attachment.is_inline:
            lines.append(f"  <{attachment.name} ({attachment.content_type}, inline)>")
        else:
            lines.append(f"  <{attachment.name}: {attachment.content_url}>")
    return "\n".join(lines)


def parse_line(line: str, conversation_id: str) -> IncomingTurn:
    """Build a message turn from one console line.

    ``/attach <url> [name]`` sends the URL as an attachment instead of text.
    """
    attachments: tuple[AttachmentRef, ...] = ()
    text: str | None = line
    if line.startswith(ATTACH_PREFIX):
        parts = line[len(ATTACH_PREFIX):].split()
        if parts:
            url = parts[0]
            name = parts[1] if len(parts) > 1 else urlparse(url).path.rsplit("/", 1)[-1]
            attachments = (AttachmentRef(name=name, content_url=url),)
            text = None

    return IncomingTurn(
        type=TurnType.MESSAGE,
        text=text,
        attachments=attachments,
        sender_id=USER_ID,
        recipient_id=BOT_ID,
        activity_id=uuid4().hex[:12],
        conversation_id=conversation_id,
        channel_id="console",
    )


class ConsoleChannel(Transport):
    def __init__(
        self,
        router: TurnRouter,
        read_line: Callable[[], str] | None = None,
        write: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(router)
        self._read_line = read_line or (lambda: input("botin> "))
        self._write = write or click.echo
        self._conversation_id = f"console:{uuid4().hex[:8]}"
        self._running = False

    @property
    def platform_name(self) -> str:
        return "console"

    async def _print(self, payload: ReplyPayload) -> None:
        self._write(format_reply(payload))

    async def start(self) -> None:
        self._running = True
        log.info(
            "console_channel_started",
            platform=self.platform_name,
            conversation=self._conversation_id,
        )

        # Same as a channel adding the user to a fresh conversation.
        await self.router.on_turn(
            IncomingTurn(
                type=TurnType.CONVERSATION_UPDATE,
                sender_id=USER_ID,
                recipient_id=BOT_ID,
                members_added=(USER_ID,),
                conversation_id=self._conversation_id,
                channel_id="console",
            ),
            self._print,
        )
        await self._loop()

    async def _loop(self) -> None:
        while self._running:
            try:
                line = await asyncio.to_thread(self._read_line)
            except (EOFError, KeyboardInterrupt):
                break
            if line.strip().lower() in ("exit", "quit"):
                break
            if not line:
                continue
            await self.router.on_turn(parse_line(line, self._conversation_id), self._print)
        self._running = False

    async def stop(self) -> None:
        self._running = False
        log.info("console_channel_stopped")
