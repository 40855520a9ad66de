from .models import SubmissionEvent, SubmissionEventType
from .emitter import SubmissionEventEmitter, NullEventEmitter
from .memory_emitter import MemoryQueueEventEmitter

__all__ = [
    "SubmissionEvent",
    "SubmissionEventType",
    "SubmissionEventEmitter",
    "NullEventEmitter",
    "MemoryQueueEventEmitter",
]
