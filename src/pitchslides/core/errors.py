"""Exception types raised by the slide workflow.

Every fault carries a caller-facing ``message`` and an HTTP ``status_code``.
The API layer turns them into ``{"error": message}`` bodies, adding
``"details"`` when the fault carries an upstream payload.

Malformed model output is not represented here: the parsers in
:mod:`pitchslides.core.parsing` substitute deterministic content instead of
raising.
"""

from __future__ import annotations

from typing import Any


class SlideWorkflowError(Exception):
    """Base class for all workflow faults."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the caller."""
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationFault(SlideWorkflowError):
    """A required request field is missing or unusable.

    Raised before any upstream call is attempted.
    """

    status_code = 400


class UpstreamFault(SlideWorkflowError):
    """The text, image, or storage API returned a non-success response.

    Attributes:
        upstream_status: HTTP status returned by the collaborator, or
            ``None`` when the call failed at the transport level.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        details: Any = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.upstream_status = upstream_status


class UploadFault(UpstreamFault):
    """The storage relay could not store the slide."""
