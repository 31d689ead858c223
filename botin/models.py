"""Typed turn and reply models."""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union


class TurnType(str, Enum):
    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: str) -> "TurnType":
        for member in (cls.MESSAGE, cls.CONVERSATION_UPDATE):
            if member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class AttachmentRef:
    """An attachment as described by the inbound channel."""

    name: str
    content_url: str
    content_type: str | None = None


@dataclass(frozen=True)
class IncomingTurn:
    type: TurnType
    type_name: str = ""
    text: str | None = None
    attachments: tuple[AttachmentRef, ...] = ()
    sender_id: str = ""
    recipient_id: str = ""
    members_added: tuple[str, ...] = ()

    # Addressing, only read by transports
    activity_id: str = ""
    conversation_id: str = ""
    service_url: str = ""
    channel_id: str = ""
    sender_name: str = ""
    recipient_name: str = ""

    def __post_init__(self) -> None:
        if not self.type_name:
            object.__setattr__(self, "type_name", self.type.value)


@dataclass(frozen=True)
class FetchedFile:
    file_name: str
    local_path: str


# None marks a failed fetch.
FetchOutcome = Optional[FetchedFile]


@dataclass(frozen=True)
class OutgoingAttachment:
    name: str
    content_type: str
    content_url: str

    @classmethod
    def inline(cls, path: str | Path, name: str | None = None) -> "OutgoingAttachment":
        """Embed the full contents of a local file as a base64 data URI."""
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return cls(
            name=name or path.name,
            content_type=content_type,
            content_url=f"data:{content_type};base64,{encoded}",
        )

    @property
    def is_inline(self) -> bool:
        return self.content_url.startswith("data:")


@dataclass(frozen=True)
class CardAction:
    title: str
    value: str
    type: str = "imBack"


@dataclass(frozen=True)
class HeroCard:
    content_type = "application/vnd.microsoft.card.hero"

    text: str = ""
    title: str = ""
    buttons: tuple[CardAction, ...] = ()


@dataclass
class ReplyPayload:
    text: str | None = None
    attachments: list[Union[OutgoingAttachment, HeroCard]] = field(default_factory=list)


Reply = Callable[[ReplyPayload], Awaitable[None]]
