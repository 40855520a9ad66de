"""
End-to-end flow against the fake verification service.

The controller talks to a FastAPI app through httpx.ASGITransport:
file staging, multipart upload, CSRF and cookie checks, response
interpretation and page rendering.
"""

from contextlib import asynccontextmanager

import httpx
import pytest

from portal.app.config import SessionCredentials
from portal.app.schemas.session import SelectedFile
from portal.app.upload.controller import UploadController
from portal.app.upload.errors import GENERIC_SUBMISSION_ERROR
from portal.app.views.upload_page import build_upload_page
from portal.tests.fakes.verification_service import (
    FAKE_CSRF_TOKEN,
    FAKE_SESSION_COOKIE,
    create_verification_service,
)
from portal.tests.helpers import make_settings

pytestmark = pytest.mark.anyio


@asynccontextmanager
async def portal_against(app, *, csrf_token=FAKE_CSRF_TOKEN, cookie=FAKE_SESSION_COOKIE):
    credentials = SessionCredentials(
        csrf_token=csrf_token,
        cookies={"session": cookie},
    )
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(
        transport=transport,
        cookies=credentials.cookies,
    ) as client:
        yield UploadController(
            settings=make_settings(),
            credentials=credentials,
            http_client=client,
        )


@pytest.fixture
def documents(tmp_path):
    doc = tmp_path / "doc.json"
    doc.write_text('{"issuer": {"name": "Acme Corp"}}', encoding="utf-8")

    tampered = tmp_path / "tampered.json"
    tampered.write_text('{"issuer": {"name": "Acme Corp"}, "x": 1}', encoding="utf-8")

    broken = tmp_path / "broken.json"
    broken.write_bytes(b"{not json")

    return {"doc": doc, "tampered": tampered, "broken": broken}


async def test_valid_and_tampered_documents_render_their_outcomes(documents):
    app = create_verification_service(results={"tampered.json": "invalid_signature"})

    async with portal_against(app) as controller:
        controller.select_file(SelectedFile.from_path(documents["doc"]))
        await controller.submit()
        verified_page = build_upload_page(controller.state)

        controller.select_file(SelectedFile.from_path(documents["tampered"]))
        await controller.submit()
        tampered_page = build_upload_page(controller.state)

    assert verified_page.result.status.value == "verified"
    assert verified_page.result.issuer_name == "Acme Corp"
    assert verified_page.error_message is None

    assert tampered_page.result.status.value == "invalid_signature"
    assert tampered_page.result.label == "Invalid signature"
    assert tampered_page.result.issuer_name == "Acme Corp"

    uploaded_names = [name for name, _ in app.state.uploads]
    assert uploaded_names == ["doc.json", "tampered.json"]
    assert app.state.uploads[0][1] == documents["doc"].read_bytes()


async def test_service_validation_message_is_shown_verbatim(documents):
    app = create_verification_service()

    async with portal_against(app) as controller:
        controller.select_file(SelectedFile.from_path(documents["broken"]))
        result = await controller.submit()

    assert result.error == "The file must be a valid JSON document."


async def test_csrf_mismatch_is_reported_by_the_service(documents):
    app = create_verification_service()

    async with portal_against(app, csrf_token="stale-token") as controller:
        controller.select_file(SelectedFile.from_path(documents["doc"]))
        result = await controller.submit()

    assert result.error == "CSRF token mismatch."
    assert app.state.uploads == []


async def test_missing_session_is_reported_by_the_service(documents):
    app = create_verification_service()

    async with portal_against(app, cookie="expired") as controller:
        controller.select_file(SelectedFile.from_path(documents["doc"]))
        result = await controller.submit()

    assert result.error == "Unauthenticated."


async def test_unknown_endpoint_shows_generic_error(documents):
    app = create_verification_service()
    settings = make_settings(verify_path="/api/verify-pdf")

    async with portal_against(app) as controller:
        controller.settings = settings
        controller.select_file(SelectedFile.from_path(documents["doc"]))
        result = await controller.submit()

    # FastAPI's 404 body has "detail", not "message".
    assert result.error == GENERIC_SUBMISSION_ERROR
