from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional

import httpx

from portal.app.config import PortalSettings, StaleOutcomePolicy
from portal.app.schemas.session import SelectedFile
from portal.app.upload.controller import UploadController

BASE_URL = "http://verifier.test"
CSRF_TOKEN = "csrf-test-token"


def make_settings(**overrides) -> PortalSettings:
    values = {
        "service_base_url": BASE_URL,
        "csrf_token": CSRF_TOKEN,
    }
    values.update(overrides)
    return PortalSettings(**values)


def make_file(filename: str = "doc.json", content: bytes = b'{"id": 1}') -> SelectedFile:
    return SelectedFile(filename=filename, content=content)


def verification_body(result: str, issuer: str = "Acme Corp") -> dict:
    return {"data": {"issuer": issuer, "result": result}}


def json_handler(
    status_code: int,
    body: object,
    requests: Optional[List[httpx.Request]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every request with the same JSON response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=body)

    return handler


@asynccontextmanager
async def controller_for(
    handler,
    *,
    stale_outcome_policy: Optional[StaleOutcomePolicy] = None,
    **kwargs,
) -> AsyncIterator[UploadController]:
    """
    UploadController wired to an httpx.MockTransport.
    """
    settings = kwargs.pop("settings", None) or make_settings()
    credentials = kwargs.get("credentials")
    cookies = credentials.cookies if credentials is not None else None

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        cookies=cookies,
    ) as client:
        yield UploadController(
            settings=settings,
            http_client=client,
            stale_outcome_policy=stale_outcome_policy,
            **kwargs,
        )
