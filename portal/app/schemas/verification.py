"""
Verification service contract.

Defines the response bodies returned by the verification endpoint and
the VerificationOutcome value derived from them. Only the four result
tags below are legal; anything else is a contract violation and fails
validation.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACT)
# ---------------------------------------------------------------------------

class VerificationStatus(str, Enum):
    """
    Terminal classification returned by the verification service.
    """

    VERIFIED = "verified"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_RECIPIENT = "invalid_recipient"
    INVALID_ISSUER = "invalid_issuer"


# ---------------------------------------------------------------------------
# Wire bodies
# ---------------------------------------------------------------------------

class VerificationResponseData(BaseModel):
    """
    Nested `data` object of a successful verification response.
    """

    issuer: str = Field(
        ...,
        description="Name of the entity that issued the document",
    )

    result: VerificationStatus = Field(
        ...,
        description="Verification classification",
    )

    model_config = ConfigDict(frozen=True)


class VerificationResponse(BaseModel):
    """
    Successful response body: `{"data": {"issuer": ..., "result": ...}}`.
    """

    data: VerificationResponseData

    model_config = ConfigDict(frozen=True)


class ServiceErrorBody(BaseModel):
    """
    Optional error body: `{"message": "..."}`.
    """

    message: Optional[str] = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Outcome value
# ---------------------------------------------------------------------------

class VerificationOutcome(BaseModel):
    """
    Finalized outcome of one successful submission.

    Serializes with camelCase aliases, e.g.
    `{"status": "verified", "issuerName": "Acme Corp"}`.
    """

    status: VerificationStatus = Field(
        ...,
        description="Verification classification",
    )

    issuer_name: str = Field(
        "",
        alias="issuerName",
        description="Issuer echoed back by the service, possibly empty",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    @classmethod
    def from_response(cls, response: VerificationResponse) -> "VerificationOutcome":
        return cls(
            status=response.data.result,
            issuer_name=response.data.issuer,
        )
