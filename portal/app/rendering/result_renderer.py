"""
Result Renderer.

Pure mapping from a VerificationOutcome to a display label, a visual
tone and the issuer name. Submission errors are not rendered here; the
page shows them in the form's own error slot.

PRESENTATION ONLY: the rendering carries no authority beyond the
outcome it was built from.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from portal.app.schemas.verification import (
    VerificationOutcome,
    VerificationStatus,
)


class ResultTone(str, Enum):
    """Visual treatment of a rendered result."""

    SUCCESS = "success"
    FAILURE = "failure"


class UnrecognizedOutcomeError(ValueError):
    """
    Raised when an outcome carries a tag outside the four known
    verification statuses.
    """


_RENDERINGS: Dict[VerificationStatus, Tuple[str, ResultTone]] = {
    VerificationStatus.VERIFIED: ("Verified", ResultTone.SUCCESS),
    VerificationStatus.INVALID_SIGNATURE: ("Invalid signature", ResultTone.FAILURE),
    VerificationStatus.INVALID_RECIPIENT: ("Invalid recipient", ResultTone.FAILURE),
    VerificationStatus.INVALID_ISSUER: ("Invalid issuer", ResultTone.FAILURE),
}


class RenderedResult(BaseModel):
    """
    Display form of a verification outcome.
    """

    status: VerificationStatus
    label: str = Field(..., description="Human-readable outcome label")
    tone: ResultTone = Field(..., description="Success or failure styling")
    issuer_name: str = Field(
        "",
        alias="issuerName",
        description="Issuer shown as supplementary text",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    @property
    def text(self) -> str:
        if not self.issuer_name:
            return self.label
        return f"{self.label} (issuer: {self.issuer_name})"


def render_result(outcome: VerificationOutcome) -> RenderedResult:
    """
    Render a verification outcome.

    Raises UnrecognizedOutcomeError for any tag outside the known
    statuses, e.g. an outcome built with model_construct() from
    unvalidated data.
    """
    try:
        status = VerificationStatus(outcome.status)
    except ValueError:
        raise UnrecognizedOutcomeError(
            f"Unrecognized verification status: {outcome.status!r}"
        )

    label, tone = _RENDERINGS[status]

    return RenderedResult(
        status=status,
        label=label,
        tone=tone,
        issuer_name=outcome.issuer_name,
    )
