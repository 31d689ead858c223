"""Save every attachment on a turn and report each result."""

from __future__ import annotations

import asyncio
from pathlib import Path

from botin.core.fetcher import AttachmentFetcher
from botin.models import FetchOutcome, IncomingTurn, Reply, ReplyPayload
from botin.utils.logging import get_logger

log = get_logger(__name__)

NOT_SAVED_TEXT = "Attachment was not successfully saved to disk."


def describe_outcome(outcome: FetchOutcome) -> str:
    if outcome is None:
        return NOT_SAVED_TEXT
    return (
        f'Attachment "{outcome.file_name}" has been received and '
        f'saved to "{outcome.local_path}".'
    )


class AttachmentIngestor:
    def __init__(self, fetcher: AttachmentFetcher, storage_dir: str | Path) -> None:
        self._fetcher = fetcher
        self._storage_dir = Path(storage_dir)

    async def ingest(self, turn: IncomingTurn, reply: Reply) -> list[FetchOutcome]:
        """Fetch all attachments concurrently, then reply once per attachment.

        Replies go out only after every fetch has finished, in the order the
        attachments arrived.
        """
        outcomes = await asyncio.gather(
            *(self._fetcher.fetch(a, self._storage_dir) for a in turn.attachments)
        )

        failed = sum(1 for o in outcomes if o is None)
        log.info("attachments_ingested", total=len(outcomes), failed=failed)

        for outcome in outcomes:
            await reply(ReplyPayload(text=describe_outcome(outcome)))
        return list(outcomes)
