from __future__ import annotations

import asyncio
from typing import AsyncIterator

from portal.app.events.models import SubmissionEvent
from portal.app.events.emitter import SubmissionEventEmitter


class MemoryQueueEventEmitter(SubmissionEventEmitter):
    """
    In-memory async event emitter.

    Properties:
    - single-consumer
    - deterministic ordering
    - stays open across submissions until close() is called,
      since the upload flow is re-entrant
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[SubmissionEvent | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def emit(self, event: SubmissionEvent) -> None:
        if self._closed:
            return

        self._queue.put_nowait(event)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    async def stream(self) -> AsyncIterator[SubmissionEvent]:
        """
        Async generator yielding emitted events in order.
        """
        while True:
            event = await self._queue.get()
            if event is None:
                break
            yield event
