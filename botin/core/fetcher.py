"""Download a single inbound attachment and persist it to disk."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx

from botin.models import AttachmentRef, FetchedFile, FetchOutcome
from botin.utils.logging import get_logger

log = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _buffer_hook(obj: dict[str, Any]) -> Any:
    if obj.get("type") == "Buffer" and isinstance(obj.get("data"), list):
        try:
            return bytes(obj["data"])
        except TypeError as e:
            raise ValueError(f"invalid Buffer data: {e}") from e
    return obj


def _collect_buffers(node: Any, found: list[bytes]) -> None:
    if isinstance(node, bytes):
        found.append(node)
    elif isinstance(node, dict):
        for value in node.values():
            _collect_buffers(value, found)
    elif isinstance(node, list):
        for item in node:
            _collect_buffers(item, found)


def rehydrate_buffers(payload: bytes) -> bytes:
    """Turn JSON-serialized byte buffers back into their original bytes.

    Channels sometimes hand over binary uploads as
    ``{"type": "Buffer", "data": [...]}``. Every such marker is decoded,
    wherever it sits in the document, and the decoded runs are joined in
    document order. A document without markers is kept unchanged.
    Raises ``ValueError`` on malformed JSON or byte values out of range.
    """
    document = json.loads(payload, object_hook=_buffer_hook)
    buffers: list[bytes] = []
    _collect_buffers(document, buffers)
    if not buffers:
        return payload
    return b"".join(buffers)


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class AttachmentFetcher:
    """Retrieves attachment bytes and writes them under a destination dir.

    ``fetch`` never raises: every failure is logged and reported as ``None``
    so one bad attachment cannot stop its siblings.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout, follow_redirects=True
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, attachment: AttachmentRef, destination_dir: str | Path) -> FetchOutcome:
        local_path = Path(destination_dir) / attachment.name
        try:
            client = await self._get_client()
            response = await client.get(attachment.content_url)
            response.raise_for_status()

            data = response.content
            if _media_type(response.headers.get("content-type")) == JSON_CONTENT_TYPE:
                data = rehydrate_buffers(data)

            await asyncio.to_thread(_write_file, local_path, data)
        except Exception:
            log.exception(
                "attachment_fetch_failed",
                name=attachment.name,
                url=attachment.content_url,
            )
            return None

        log.info("attachment_saved", name=attachment.name, path=str(local_path), size=len(data))
        return FetchedFile(file_name=attachment.name, local_path=str(local_path))


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
