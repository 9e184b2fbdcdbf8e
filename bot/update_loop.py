"""Long-polling update source.

Polls ``getUpdates`` in an ``asyncio`` task and hands each batch of raw
update dicts to a callback.  Blocking client calls are offloaded via
:func:`asyncio.to_thread` so the event loop keeps running handlers' deferred
work while a long-poll is pending.

Start-up: updates already pending when the loop starts are fetched with a
zero poll timeout and delivered with ``queued=True``; once the backlog is
drained ``on_sync`` fires and normal long-polling begins.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import requests

from bot.options import LoopOptions
from core.logger import SwitchyardLogger
from sdk.client import SwitchyardClient
from sdk.exceptions import APIException

logger = SwitchyardLogger.get_logger()

BatchCallback = Callable[[List[Dict[str, Any]], bool], None]


class UpdateLoop:
    """Fetches updates until stopped, tracking the ``getUpdates`` offset."""

    def __init__(
        self,
        client: SwitchyardClient,
        on_batch: BatchCallback,
        options: Optional[LoopOptions] = None,
        on_sync: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self._client = client
        self._options = options or LoopOptions()
        self._on_batch = on_batch
        self._on_sync = on_sync
        self._on_error = on_error
        self._offset: Optional[int] = None
        self._synced = False
        self._task: Optional[asyncio.Task] = None

    @property
    def offset(self) -> Optional[int]:
        return self._offset

    @property
    def synced(self) -> bool:
        return self._synced

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule :meth:`run` on the running event loop (idempotent)."""
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self.run(), name="switchyard-update-loop")
        return self._task

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def run(self) -> None:
        """Poll forever; cancel the task to stop."""
        logger.info("Update loop started", extra={"poll_timeout": self._options.poll_timeout})
        try:
            while True:
                await self.poll_once()
        finally:
            logger.info("Update loop stopped", extra={"offset": self._offset})

    async def poll_once(self) -> int:
        """Run one ``getUpdates`` round trip; returns the number of updates received.

        Failures are reported through ``on_error`` followed by a fixed
        ``retry_delay`` pause, and count as zero updates.
        """
        queued = not self._synced
        timeout = 0 if queued else self._options.poll_timeout
        try:
            updates = await asyncio.to_thread(
                self._client.get_updates,
                offset=self._offset,
                limit=self._options.limit,
                timeout=timeout,
                allowed_updates=list(self._options.allowed_updates) or None,
            )
        except (requests.RequestException, APIException) as exc:
            logger.warning("getUpdates failed, retrying", extra={"error": str(exc), "retry_delay": self._options.retry_delay})
            if self._on_error is not None:
                self._on_error(exc)
            await asyncio.sleep(self._options.retry_delay)
            return 0

        updates = updates or []
        if updates:
            logger.debug("Received updates", extra={"count": len(updates), "queued": queued})
            advanced = self._advance(updates)
            self._on_batch(updates, queued)
            if not advanced:
                await asyncio.sleep(self._options.retry_delay)

        if queued and len(updates) < self._options.limit:
            self._synced = True
            logger.info("Update backlog drained", extra={"offset": self._offset})
            if self._on_sync is not None:
                self._on_sync()
        return len(updates)

    def _advance(self, updates: List[Dict[str, Any]]) -> bool:
        """Move the offset past *updates*; False if it could not be moved.

        Entries without an integer ``update_id`` are acknowledged by position
        when the current offset is known.
        """
        ids = [raw["update_id"] for raw in updates if isinstance(raw, dict) and isinstance(raw.get("update_id"), int)]
        malformed = len(updates) - len(ids)
        if malformed:
            logger.warning("Updates without an update_id", extra={"count": malformed, "offset": self._offset})
        if ids:
            self._offset = max(max(ids) + 1, self._offset or 0)
            return True
        if self._offset is not None:
            self._offset += len(updates)
            return True
        return False
