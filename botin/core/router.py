"""Per-turn entry point: classify the turn and hand it to the right handler."""

from __future__ import annotations

from botin.core.ingestor import AttachmentIngestor
from botin.core.menu import MenuDispatcher
from botin.models import IncomingTurn, Reply, ReplyPayload, TurnType
from botin.utils.logging import get_logger

log = get_logger(__name__)


class TurnRouter:
    """Stateless router; one instance can serve any number of turns."""

    def __init__(
        self,
        ingestor: AttachmentIngestor,
        dispatcher: MenuDispatcher,
        bot_name: str = "BotinEjemplo",
    ) -> None:
        self._ingestor = ingestor
        self._dispatcher = dispatcher
        self._bot_name = bot_name

    @property
    def greeting(self) -> str:
        return f"Mi nombre es {self._bot_name}, estoy a tus ordenes"

    async def on_turn(self, turn: IncomingTurn, reply: Reply) -> None:
        log.info(
            "turn_received",
            type=turn.type_name,
            attachments=len(turn.attachments),
        )

        if turn.type is TurnType.MESSAGE:
            if turn.attachments:
                await self._ingestor.ingest(turn, reply)
            else:
                for payload in self._dispatcher.dispatch(turn.text):
                    await reply(payload)

        elif turn.type is TurnType.CONVERSATION_UPDATE:
            if not turn.members_added or turn.members_added[0] == turn.recipient_id:
                return
            await reply(ReplyPayload(text=self.greeting))
            await reply(self._dispatcher.render_menu())

        elif turn.type is TurnType.OTHER:
            await reply(ReplyPayload(text=f"[{turn.type_name}]-type activity detected."))

        else:
            raise AssertionError(f"unhandled turn type: {turn.type!r}")
