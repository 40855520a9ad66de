from __future__ import annotations

from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4, UUID

from pydantic import BaseModel, Field, ConfigDict


# ----------------------------------------------------------------------
# Event Types (Finite)
# ----------------------------------------------------------------------
class SubmissionEventType(str, Enum):
    """
    Lifecycle events emitted by the Upload Controller.
    """

    SUBMISSION_STARTED = "submission_started"
    SUBMISSION_SUCCEEDED = "submission_succeeded"
    SUBMISSION_FAILED = "submission_failed"


TERMINAL_EVENT_TYPES = frozenset(
    {
        SubmissionEventType.SUBMISSION_SUCCEEDED,
        SubmissionEventType.SUBMISSION_FAILED,
    }
)


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class SubmissionEvent(BaseModel):
    """
    An immutable observation of an upload lifecycle transition.

    Events are observational only; the session state is authoritative.
    """

    event_id: UUID = Field(default_factory=uuid4)
    submission_id: str = Field(..., description="The submission identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: SubmissionEventType

    # Optional contextual metadata (filename, status, error, ...)
    details: Optional[Dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return self.event_type in TERMINAL_EVENT_TYPES

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
