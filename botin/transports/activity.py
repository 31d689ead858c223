"""Bot Framework activity <-> turn/reply conversion."""

from __future__ import annotations

from typing import Any

from botin.models import (
    AttachmentRef,
    HeroCard,
    IncomingTurn,
    OutgoingAttachment,
    ReplyPayload,
    TurnType,
)


class ActivityError(ValueError):
    """Raised when an inbound activity cannot be turned into a turn."""


def _account(data: Any) -> dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _list_field(activity: dict[str, Any], key: str) -> list[Any]:
    value = activity.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ActivityError(f"{key} must be a list")
    return value


def parse_activity(activity: Any) -> IncomingTurn:
    if not isinstance(activity, dict):
        raise ActivityError("activity must be a JSON object")
    type_name = activity.get("type")
    if not isinstance(type_name, str) or not type_name:
        raise ActivityError("activity has no type")

    attachments = tuple(
        AttachmentRef(
            name=str(a.get("name") or ""),
            content_url=str(a.get("contentUrl") or ""),
            content_type=a.get("contentType"),
        )
        for a in _list_field(activity, "attachments")
        if isinstance(a, dict)
    )
    members_added = tuple(
        str(_account(m).get("id", "")) for m in _list_field(activity, "membersAdded")
    )
    sender = _account(activity.get("from"))
    recipient = _account(activity.get("recipient"))

    return IncomingTurn(
        type=TurnType.from_wire(type_name),
        type_name=type_name,
        text=activity.get("text"),
        attachments=attachments,
        sender_id=str(sender.get("id", "")),
        sender_name=str(sender.get("name", "")),
        recipient_id=str(recipient.get("id", "")),
        recipient_name=str(recipient.get("name", "")),
        members_added=members_added,
        activity_id=str(activity.get("id", "")),
        conversation_id=str(_account(activity.get("conversation")).get("id", "")),
        service_url=str(activity.get("serviceUrl", "")),
        channel_id=str(activity.get("channelId", "")),
    )


def serialize_attachment(attachment: OutgoingAttachment | HeroCard) -> dict[str, Any]:
    if isinstance(attachment, HeroCard):
        return {
            "contentType": HeroCard.content_type,
            "content": {
                "title": attachment.title,
                "text": attachment.text,
                "buttons": [
                    {"type": b.type, "title": b.title, "value": b.value}
                    for b in attachment.buttons
                ],
            },
        }
    return {
        "name": attachment.name,
        "contentType": attachment.content_type,
        "contentUrl": attachment.content_url,
    }


def build_reply_activity(turn: IncomingTurn, payload: ReplyPayload) -> dict[str, Any]:
    """Address a reply back to whoever sent ``turn``."""
    activity: dict[str, Any] = {
        "type": "message",
        "from": {"id": turn.recipient_id, "name": turn.recipient_name},
        "recipient": {"id": turn.sender_id, "name": turn.sender_name},
        "conversation": {"id": turn.conversation_id},
        "channelId": turn.channel_id,
        "serviceUrl": turn.service_url,
    }
    if turn.activity_id:
        activity["replyToId"] = turn.activity_id
    if payload.text is not None:
        activity["text"] = payload.text
    if payload.attachments:
        activity["attachments"] = [serialize_attachment(a) for a in payload.attachments]
    return activity
