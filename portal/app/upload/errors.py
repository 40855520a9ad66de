"""
Submission failure classification.

These exceptions never leave the Upload Controller. They are caught at
the submission boundary and converted into the displayed error string.
"""

from typing import Optional

GENERIC_SUBMISSION_ERROR = "An unexpected error occurred."


class SubmissionFailure(RuntimeError):
    """
    Base class for failures of a single verification request.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def display_message(self) -> str:
        return GENERIC_SUBMISSION_ERROR


class ServiceReportedError(SubmissionFailure):
    """
    The service answered with an error status and a readable message.
    The message is shown to the user verbatim.
    """

    @property
    def display_message(self) -> str:
        return self.message


class ResponseContractError(SubmissionFailure):
    """
    The response could not be interpreted: malformed JSON, missing
    fields, an unrecognized result tag, or an error status without a
    usable message.
    """
