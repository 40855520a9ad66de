"""
Session state schemas.

The session state is the in-memory triple the Upload Controller owns:
the staged file, the last outcome and the last submission error. None
of it outlives the browsing session.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from portal.app.schemas.verification import VerificationOutcome


class SubmissionPhase(str, Enum):
    """
    Per-attempt state machine: idle -> submitting -> succeeded | failed.
    """

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SelectedFile(BaseModel):
    """
    A document staged for upload. Opaque bytes plus a filename.
    """

    filename: str = Field(..., min_length=1)
    content: bytes = Field(..., repr=False)
    content_type: str = "application/json"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SelectedFile":
        path = Path(path)
        return cls(filename=path.name, content=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.content)


class SessionState(BaseModel):
    """
    Snapshot of the controller's state, as read by the page.
    """

    selected_file: Optional[SelectedFile] = None
    outcome: Optional[VerificationOutcome] = None
    error: Optional[str] = None
    phase: SubmissionPhase = SubmissionPhase.IDLE

    model_config = ConfigDict(frozen=True)


class SubmissionResult(BaseModel):
    """
    Terminal result of a single submit() call.
    """

    submission_id: str
    phase: SubmissionPhase
    outcome: Optional[VerificationOutcome] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def enforce_terminal_shape(self):
        """
        - SUCCEEDED carries an outcome and no error
        - FAILED carries an error and no outcome
        """
        if self.phase == SubmissionPhase.SUCCEEDED:
            if self.outcome is None or self.error is not None:
                raise ValueError(
                    "A succeeded submission must carry an outcome only"
                )
        elif self.phase == SubmissionPhase.FAILED:
            if self.error is None or self.outcome is not None:
                raise ValueError(
                    "A failed submission must carry an error only"
                )
        else:
            raise ValueError(
                f"Submission result must be terminal, got {self.phase.value}"
            )
        return self

    @property
    def succeeded(self) -> bool:
        return self.phase == SubmissionPhase.SUCCEEDED

    model_config = ConfigDict(frozen=True)
