"""HTTP client for the channel connector service (v3 REST API)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from botin.utils.logging import get_logger

log = get_logger(__name__)


class ConnectorError(Exception):
    def __init__(self, status: int, detail: str) -> None:
        super().__init__(f"connector returned {status}: {detail}")
        self.status = status
        self.detail = detail


class ConnectorClient:
    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _base(service_url: str) -> str:
        return service_url if service_url.endswith("/") else service_url + "/"

    async def _post(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(url, json=body)
        if response.is_error:
            log.error("connector_request_failed", url=url, status=response.status_code)
            raise ConnectorError(response.status_code, response.text[:200])
        if not response.content:
            return {}
        return response.json()

    async def send_to_conversation(
        self, service_url: str, conversation_id: str, activity: dict[str, Any]
    ) -> dict[str, Any]:
        url = f"{self._base(service_url)}v3/conversations/{quote(conversation_id, safe='')}/activities"
        return await self._post(url, activity)

    async def reply_to_activity(
        self,
        service_url: str,
        conversation_id: str,
        activity_id: str,
        activity: dict[str, Any],
    ) -> dict[str, Any]:
        url = (
            f"{self._base(service_url)}v3/conversations/{quote(conversation_id, safe='')}"
            f"/activities/{quote(activity_id, safe='')}"
        )
        return await self._post(url, activity)
