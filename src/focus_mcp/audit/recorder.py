"""Fire-and-forget writer in front of the action ledger."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from focus_mcp.audit.ledger import ActionLedger
from focus_mcp.audit.models import ActionRecord, ActionRecordInput, RecorderStats

logger = logging.getLogger(__name__)


class ActionRecorder:
    """Queue ledger writes so that mutations never wait on, or fail because of, the feed.

    ``record`` is synchronous and never raises. Inside an event loop the entry
    goes onto a bounded queue drained by a background task; outside one it is
    written immediately. A full queue drops the entry with a warning.
    """

    def __init__(self, ledger: ActionLedger, queue_size: int = 1000) -> None:
        self._ledger = ledger
        self._queue_size = queue_size
        self._queue: asyncio.Queue[ActionRecord] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False
        self._enqueued = 0
        self._written = 0
        self._failed = 0
        self._dropped = 0

    @property
    def stats(self) -> RecorderStats:
        return RecorderStats(
            enqueued=self._enqueued,
            written=self._written,
            failed=self._failed,
            dropped=self._dropped,
            pending=self._queue.qsize() if self._queue is not None else 0,
        )

    def record(self, entry: ActionRecordInput) -> None:
        try:
            record = entry.to_record()
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is None or self._closed:
                self._write_now(record)
                return
            queue = self._ensure_worker(loop)
            try:
                queue.put_nowait(record)
            except asyncio.QueueFull:
                self._dropped += 1
                logger.warning(
                    "Action queue full (%d); dropping %s %s %s",
                    self._queue_size,
                    record.action_kind,
                    record.entity_type,
                    record.entity_id,
                )
                return
            self._enqueued += 1
        except Exception:
            self._failed += 1
            logger.exception("Failed to record action for %s", entry.entity_id)

    async def flush(self) -> None:
        """Wait until every queued entry has been written or has failed."""
        if self._queue is None or self._closed:
            return
        queue = self._ensure_worker(asyncio.get_running_loop())
        await queue.join()

    async def close(self) -> None:
        if self._closed:
            return
        await self.flush()
        self._closed = True
        worker, self._worker = self._worker, None
        if worker is not None and not worker.done():
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        logger.info(
            "Action recorder closed: written=%d failed=%d dropped=%d",
            self._written,
            self._failed,
            self._dropped,
        )

    def _write_now(self, record: ActionRecord) -> None:
        self._ledger.insert_sync(record)
        self._written += 1

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> asyncio.Queue[ActionRecord]:
        if (
            self._queue is not None
            and self._loop is loop
            and self._worker is not None
            and not self._worker.done()
        ):
            return self._queue

        queue: asyncio.Queue[ActionRecord] = asyncio.Queue(maxsize=self._queue_size)
        old_queue = self._queue
        if old_queue is not None:
            # Entries left behind by a worker whose loop has gone away.
            while not old_queue.empty():
                queue.put_nowait(old_queue.get_nowait())
        self._queue = queue
        self._loop = loop
        self._worker = loop.create_task(self._drain(queue), name="action-recorder")
        return queue

    async def _drain(self, queue: asyncio.Queue[ActionRecord]) -> None:
        while True:
            record = await queue.get()
            try:
                await self._ledger.insert(record)
            except Exception:
                self._failed += 1
                logger.exception(
                    "Failed to write action %s for %s %s",
                    record.action_kind,
                    record.entity_type,
                    record.entity_id,
                )
            else:
                self._written += 1
            finally:
                queue.task_done()
