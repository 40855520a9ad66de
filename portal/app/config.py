"""
Runtime configuration for the verification upload portal.

Pydantic v2 settings management. Values are read once from the
environment (or a local .env file) and are immutable afterwards.

The session credentials (CSRF token and cookies) belong to the
authentication layer. They are carried here only so that they can be
handed to the Upload Controller at construction time.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Annotated, Dict, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StaleOutcomePolicy(str, Enum):
    """
    What happens to a previously displayed outcome when a later
    submission fails.
    """

    # Keep the old outcome visible next to the new error.
    RETAIN = "retain"
    # Drop the old outcome; outcome and error become mutually exclusive.
    CLEAR = "clear"


class SessionCredentials(BaseModel):
    """
    Credentials established by the authentication layer.

    The CSRF token is sent as a request header; cookies travel with the
    HTTP client.
    """

    csrf_token: SecretStr = Field(
        SecretStr(""),
        description="Page-level CSRF token, redacted from logs",
    )

    cookies: Dict[str, str] = Field(
        default_factory=dict,
        description="Session cookies sent with every verification request",
    )

    model_config = ConfigDict(frozen=True)


class PortalSettings(BaseSettings):
    """
    Application settings parsed from the environment.
    """

    # ---------------------------------------------------------------------
    # Verification service
    # ---------------------------------------------------------------------

    service_base_url: Annotated[
        AnyHttpUrl,
        Field(
            default="http://localhost:8000",
            description="Base URL of the verification service",
        ),
    ]

    verify_path: Annotated[
        str,
        Field(
            default="/api/verify-json",
            pattern=r"^/",
            description="Endpoint path receiving the multipart upload",
        ),
    ]

    file_field: Annotated[
        str,
        Field(
            default="file",
            min_length=1,
            description="Multipart field name carrying the document",
        ),
    ]

    # ---------------------------------------------------------------------
    # Session credentials (supplied by the auth layer)
    # ---------------------------------------------------------------------

    csrf_header: Annotated[
        str,
        Field(
            default="X-CSRF-TOKEN",
            min_length=1,
            description="Header name used to transmit the CSRF token",
        ),
    ]

    csrf_token: Annotated[
        SecretStr,
        Field(
            default=SecretStr(""),
            description="CSRF token embedded in the page",
        ),
    ]

    session_cookie_name: Annotated[
        str,
        Field(
            default="session",
            description="Name of the session cookie",
        ),
    ]

    session_cookie: Annotated[
        Optional[SecretStr],
        Field(
            default=None,
            description="Value of the session cookie, if any",
        ),
    ]

    # ---------------------------------------------------------------------
    # Presentation behaviour
    # ---------------------------------------------------------------------

    stale_outcome_policy: Annotated[
        StaleOutcomePolicy,
        Field(
            default=StaleOutcomePolicy.RETAIN,
            description=(
                "Whether a failed submission keeps the previously "
                "displayed outcome"
            ),
        ),
    ]

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    @property
    def base_url(self) -> str:
        return str(self.service_base_url).rstrip("/")

    def credentials(self) -> SessionCredentials:
        """
        Build the session credentials described by these settings.
        """
        cookies: Dict[str, str] = {}
        if self.session_cookie is not None:
            cookies[self.session_cookie_name] = (
                self.session_cookie.get_secret_value()
            )

        return SessionCredentials(
            csrf_token=self.csrf_token,
            cookies=cookies,
        )


@lru_cache(maxsize=1)
def get_settings() -> PortalSettings:
    """
    Process-wide settings provider.
    """
    return PortalSettings()  # singleton within process
