"""
Fake verification service for integration tests.

A minimal FastAPI app honouring the verify-json contract: it checks the
session cookie and the CSRF header, requires the upload to be JSON and
answers with a configurable result per filename. It performs no
cryptographic verification.
"""

from __future__ import annotations

import json
from typing import Annotated, Dict, Optional

from fastapi import Cookie, FastAPI, File, Header, UploadFile
from fastapi.responses import JSONResponse

FAKE_CSRF_TOKEN = "csrf-test-token"
FAKE_SESSION_COOKIE = "session-test-cookie"


def create_verification_service(
    *,
    results: Optional[Dict[str, str]] = None,
    issuer: str = "Acme Corp",
    csrf_token: str = FAKE_CSRF_TOKEN,
    session_cookie: str = FAKE_SESSION_COOKIE,
) -> FastAPI:
    results = dict(results or {})

    app = FastAPI(title="Fake Verification Service")
    app.state.uploads = []

    @app.post("/api/verify-json")
    async def verify_json(
        file: Annotated[UploadFile, File(description="JSON document")],
        x_csrf_token: Annotated[
            Optional[str],
            Header(alias="X-CSRF-TOKEN"),
        ] = None,
        session: Annotated[Optional[str], Cookie()] = None,
    ):
        if session != session_cookie:
            return JSONResponse({"message": "Unauthenticated."}, status_code=401)

        if x_csrf_token != csrf_token:
            return JSONResponse({"message": "CSRF token mismatch."}, status_code=419)

        raw = await file.read()
        app.state.uploads.append((file.filename, raw))

        try:
            json.loads(raw)
        except ValueError:
            return JSONResponse(
                {
                    "message": "The file must be a valid JSON document.",
                    "errors": {"file": ["The file must be a valid JSON document."]},
                },
                status_code=422,
            )

        return {
            "data": {
                "issuer": issuer,
                "result": results.get(file.filename, "verified"),
            }
        }

    return app
