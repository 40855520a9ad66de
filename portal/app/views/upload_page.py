"""
Upload page view model.

Composes the session state into what the upload page displays: the
state of the Upload action, the form's error slot and the rendered
verification result.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from portal.app.rendering.result_renderer import RenderedResult, render_result
from portal.app.schemas.session import SessionState, SubmissionPhase


class UploadPageView(BaseModel):
    can_submit: bool
    submitting: bool
    filename: Optional[str] = None
    error_message: Optional[str] = None
    result: Optional[RenderedResult] = None

    model_config = ConfigDict(frozen=True)


def build_upload_page(state: SessionState) -> UploadPageView:
    selected = state.selected_file

    return UploadPageView(
        can_submit=selected is not None,
        submitting=state.phase == SubmissionPhase.SUBMITTING,
        filename=selected.filename if selected is not None else None,
        error_message=state.error,
        result=render_result(state.outcome) if state.outcome is not None else None,
    )
