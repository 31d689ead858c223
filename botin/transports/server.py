"""Bot Framework messaging endpoint using aiohttp."""

from __future__ import annotations

import asyncio
import json

from aiohttp import web

from botin.config import ServerConfig
from botin.core.router import TurnRouter
from botin.models import IncomingTurn, Reply, ReplyPayload
from botin.transports.activity import ActivityError, build_reply_activity, parse_activity
from botin.transports.base import ReplyCollector, Transport
from botin.transports.connector import ConnectorClient, ConnectorError
from botin.utils.logging import bind_turn, get_logger

log = get_logger(__name__)

EXPECT_REPLIES = "expectReplies"


class BotServer(Transport):
    """Receives activities over HTTP and runs them through the router.

    Turns are handled strictly one after another.
    """

    def __init__(
        self,
        config: ServerConfig,
        router: TurnRouter,
        connector: ConnectorClient | None = None,
    ) -> None:
        super().__init__(router)
        self._config = config
        self._connector = connector
        self._runner: web.AppRunner | None = None
        self._turn_lock = asyncio.Lock()

    @property
    def platform_name(self) -> str:
        return "http"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        app = self.build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        log.info(
            "bot_server_started",
            platform=self.platform_name,
            bind=self._config.bind,
            port=self._config.port,
            path=self._config.path,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("bot_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def build_app(self) -> web.Application:
        app = web.Application()
        path = self._config.path if self._config.path.startswith("/") else f"/{self._config.path}"
        app.router.add_post(path, self._handle_activity)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_activity(self, request: web.Request) -> web.Response:
        body = await request.read()
        try:
            activity = json.loads(body)
            turn = parse_activity(activity)
        except ActivityError as e:
            log.warning("activity_invalid", error=str(e))
            return web.Response(status=400, text=str(e))
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError both land here
            log.warning("activity_malformed_json")
            return web.Response(status=400, text="Invalid JSON")

        use_connector = (
            self._connector is not None
            and bool(turn.service_url)
            and activity.get("deliveryMode") != EXPECT_REPLIES
        )
        collector = ReplyCollector()
        reply: Reply = self._connector_reply(turn) if use_connector else collector

        async with self._turn_lock:
            bind_turn(
                platform=self.platform_name,
                conversation=turn.conversation_id,
                activity=turn.activity_id,
                channel=turn.channel_id,
            )
            try:
                await self.router.on_turn(turn, reply)
            except ConnectorError:
                log.exception("reply_delivery_failed")
                return web.Response(status=502, text="Reply delivery failed")

        if use_connector:
            return web.Response(status=200)
        return web.json_response({
            "activities": [build_reply_activity(turn, p) for p in collector.replies],
        })

    def _connector_reply(self, turn: IncomingTurn) -> Reply:
        connector = self._connector
        assert connector is not None

        async def reply(payload: ReplyPayload) -> None:
            activity = build_reply_activity(turn, payload)
            if turn.activity_id:
                await connector.reply_to_activity(
                    turn.service_url, turn.conversation_id, turn.activity_id, activity
                )
            else:
                await connector.send_to_conversation(
                    turn.service_url, turn.conversation_id, activity
                )

        return reply
