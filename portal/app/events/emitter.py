from __future__ import annotations

from typing import Protocol

from portal.app.events.models import SubmissionEvent


class SubmissionEventEmitter(Protocol):
    """
    Interface for broadcasting upload lifecycle observations.

    Implementations must not raise into the submission path.
    """

    async def emit(self, event: SubmissionEvent) -> None:
        ...


class NullEventEmitter:
    """
    A safe no-op emitter, used when nobody listens.
    """

    async def emit(self, event: SubmissionEvent) -> None:
        return
