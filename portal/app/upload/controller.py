"""
Upload Controller.

Mediates between raw user input and the verification service:
stages the selected file, submits it as a multipart upload and turns
the response into either a VerificationOutcome or a display error.

Every failure is caught at the submission boundary. Nothing raised by
the transport or by response parsing escapes submit().
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Union
from uuid import uuid4

import httpx
from pydantic import ValidationError

from portal.app.config import (
    PortalSettings,
    SessionCredentials,
    StaleOutcomePolicy,
    get_settings,
)
from portal.app.events import (
    NullEventEmitter,
    SubmissionEvent,
    SubmissionEventEmitter,
    SubmissionEventType,
)
from portal.app.schemas.session import (
    SelectedFile,
    SessionState,
    SubmissionPhase,
    SubmissionResult,
)
from portal.app.schemas.verification import (
    ServiceErrorBody,
    VerificationOutcome,
    VerificationResponse,
)
from portal.app.services.http_client import create_http_client
from portal.app.upload.errors import (
    GENERIC_SUBMISSION_ERROR,
    ResponseContractError,
    ServiceReportedError,
    SubmissionFailure,
)

logger = logging.getLogger("portal.upload")

FileSelection = Union[SelectedFile, Sequence[SelectedFile], None]


class UploadController:
    """
    Owns the session state (selected file, outcome, error) and the
    submission state machine: idle -> submitting -> succeeded | failed.

    Usage:
        async with UploadController(settings=settings) as controller:
            controller.select_file(SelectedFile.from_path("doc.json"))
            result = await controller.submit()
    """

    def __init__(
        self,
        *,
        settings: Optional[PortalSettings] = None,
        credentials: Optional[SessionCredentials] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        emitter: Optional[SubmissionEventEmitter] = None,
        stale_outcome_policy: Optional[StaleOutcomePolicy] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.credentials = credentials or self.settings.credentials()
        self.stale_outcome_policy = (
            stale_outcome_policy or self.settings.stale_outcome_policy
        )
        self.emitter = emitter or NullEventEmitter()

        if http_client is None:
            self.client = create_http_client(self.settings, self.credentials)
            self._owns_client = True
        else:
            self.client = http_client
            # Used as-is: an injected client must already carry the
            # session cookies. Its cookie jar is never modified.
            self._owns_client = False

        self._selected_file: Optional[SelectedFile] = None
        self._outcome: Optional[VerificationOutcome] = None
        self._error: Optional[str] = None
        self._phase = SubmissionPhase.IDLE
        self._in_flight = 0
        # Phase restored once nothing is in flight, including after a
        # cancelled submission.
        self._last_terminal_phase = SubmissionPhase.IDLE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "UploadController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this controller created it."""
        if self._owns_client:
            await self.client.aclose()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState(
            selected_file=self._selected_file,
            outcome=self._outcome,
            error=self._error,
            phase=self._phase,
        )

    @property
    def can_submit(self) -> bool:
        return self._selected_file is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select_file(self, selection: FileSelection) -> Optional[SelectedFile]:
        """
        Stage a file for the next submission.

        Only the first file of a multi-file selection is kept. An empty
        selection clears the staged file; None leaves it unchanged.
        Outcome and error are never touched here.
        """
        if selection is None:
            return self._selected_file

        if isinstance(selection, SelectedFile):
            self._selected_file = selection
        else:
            files = list(selection)
            if len(files) > 1:
                logger.debug(
                    "select_file: %d files offered, keeping the first",
                    len(files),
                )
            self._selected_file = files[0] if files else None

        if self._selected_file is not None:
            logger.info(
                "select_file: staged %s (%d bytes)",
                self._selected_file.filename,
                self._selected_file.size,
            )
        else:
            logger.info("select_file: selection cleared")

        return self._selected_file

    async def submit(self) -> Optional[SubmissionResult]:
        """
        Submit the staged file to the verification service.

        Returns None without any network call when no file is staged.
        Otherwise performs exactly one POST and returns the terminal
        SubmissionResult.
        """
        selected = self._selected_file
        if selected is None:
            logger.debug("submit: no file selected, ignoring")
            return None

        submission_id = str(uuid4())

        self._error = None
        self._phase = SubmissionPhase.SUBMITTING
        self._in_flight += 1

        try:
            await self._emit(
                submission_id,
                SubmissionEventType.SUBMISSION_STARTED,
                {"filename": selected.filename, "size": selected.size},
            )

            try:
                outcome = await self._verify(selected, submission_id)
            except SubmissionFailure as exc:
                logger.warning(
                    "submission %s failed: %s (status=%s)",
                    submission_id,
                    exc.message,
                    exc.status_code,
                )
                return await self._settle_failure(
                    submission_id, exc.display_message
                )
            except httpx.HTTPError as exc:
                logger.warning(
                    "submission %s transport error: %s", submission_id, exc
                )
                return await self._settle_failure(
                    submission_id, GENERIC_SUBMISSION_ERROR
                )
            except Exception:
                logger.exception("submission %s: unexpected error", submission_id)
                return await self._settle_failure(
                    submission_id, GENERIC_SUBMISSION_ERROR
                )

            return await self._settle_success(submission_id, outcome)
        finally:
            # Runs on cancellation too; the cancellation itself propagates.
            self._in_flight -= 1
            if self._in_flight == 0:
                self._phase = self._last_terminal_phase

    # ------------------------------------------------------------------
    # Request / response
    # ------------------------------------------------------------------

    def _verify_url(self) -> str:
        # Settings are the single source of the endpoint URL, for owned
        # and injected clients alike.
        return f"{self.settings.base_url}{self.settings.verify_path}"

    def _request_headers(self) -> Dict[str, str]:
        return {
            self.settings.csrf_header: self.credentials.csrf_token.get_secret_value(),
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }

    async def _verify(
        self,
        selected: SelectedFile,
        submission_id: str,
    ) -> VerificationOutcome:
        logger.info(
            "submission %s: uploading %s to %s",
            submission_id,
            selected.filename,
            self.settings.verify_path,
        )

        response = await self.client.post(
            self._verify_url(),
            files={
                self.settings.file_field: (
                    selected.filename,
                    selected.content,
                    selected.content_type,
                )
            },
            headers=self._request_headers(),
        )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = _service_message(response)
            if message:
                raise ServiceReportedError(
                    message, response.status_code
                ) from exc
            raise ResponseContractError(
                f"HTTP {response.status_code} without a service message",
                response.status_code,
            ) from exc

        try:
            body = VerificationResponse.model_validate_json(response.content)
        except ValidationError as exc:
            logger.debug(
                "submission %s: rejected body=%s",
                submission_id,
                response.text[:200],
            )
            raise ResponseContractError(
                f"Response does not match the verification contract: "
                f"{exc.error_count()} error(s)",
                response.status_code,
            ) from exc

        return VerificationOutcome.from_response(body)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def _mark_settled(self, terminal: SubmissionPhase) -> None:
        self._last_terminal_phase = terminal
        # Overlapping submissions keep the session in SUBMITTING; the
        # counter itself is released by submit().
        if self._in_flight == 1:
            self._phase = terminal

    async def _settle_success(
        self,
        submission_id: str,
        outcome: VerificationOutcome,
    ) -> SubmissionResult:
        self._outcome = outcome
        self._error = None
        self._mark_settled(SubmissionPhase.SUCCEEDED)

        logger.info(
            "submission %s: %s (issuer=%r)",
            submission_id,
            outcome.status.value,
            outcome.issuer_name,
        )
        await self._emit(
            submission_id,
            SubmissionEventType.SUBMISSION_SUCCEEDED,
            {
                "status": outcome.status.value,
                "issuer": outcome.issuer_name,
            },
        )

        return SubmissionResult(
            submission_id=submission_id,
            phase=SubmissionPhase.SUCCEEDED,
            outcome=outcome,
        )

    async def _settle_failure(
        self,
        submission_id: str,
        message: str,
    ) -> SubmissionResult:
        self._error = message
        if self.stale_outcome_policy == StaleOutcomePolicy.CLEAR:
            self._outcome = None
        self._mark_settled(SubmissionPhase.FAILED)

        await self._emit(
            submission_id,
            SubmissionEventType.SUBMISSION_FAILED,
            {"error": message},
        )

        return SubmissionResult(
            submission_id=submission_id,
            phase=SubmissionPhase.FAILED,
            error=message,
        )

    async def _emit(
        self,
        submission_id: str,
        event_type: SubmissionEventType,
        details: Dict[str, object],
    ) -> None:
        try:
            await self.emitter.emit(
                SubmissionEvent(
                    submission_id=submission_id,
                    event_type=event_type,
                    details=details,
                )
            )
        except Exception:
            logger.warning(
                "submission %s: event emission failed for %s",
                submission_id,
                event_type.value,
                exc_info=True,
            )


def _service_message(response: httpx.Response) -> Optional[str]:
    """
    Extract a non-empty `message` string from an error body, if any.
    """
    try:
        body = ServiceErrorBody.model_validate_json(response.content)
    except ValidationError:
        return None
    return body.message or None
