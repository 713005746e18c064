"""
Error taxonomy for the inbound message pipeline.

Every failure raised by a pipeline step is a RelayError. The dispatcher
catches them at its boundary and turns them into the user-facing apology,
so none of these ever reach the webhook caller as an HTTP error.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for all pipeline failures."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# IO category: filesystem / network transport failures
# ---------------------------------------------------------------------------

class RelayIOError(RelayError):
    """Raised on filesystem or network transport failures."""


class MediaDownloadError(RelayIOError):
    """Raised when an attachment cannot be downloaded or stored locally."""


class MediaReadError(RelayIOError):
    """Raised when a stored attachment cannot be read back for encoding."""


class AnalysisTransportError(RelayIOError):
    """Raised when the analysis API cannot be reached (connect, timeout, ...)."""


# ---------------------------------------------------------------------------
# Analysis API failures
# ---------------------------------------------------------------------------

class AnalysisStatusError(RelayError):
    """Raised when the analysis API answers with a non-200 status."""
    def __init__(self, status_code: int, body: str, error=None):
        super().__init__(f"Analysis API returned non-200 status: {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body
        # Structured {type, message} payload when the body could be decoded
        self.error = error


class AnalysisDecodeError(RelayError):
    """Raised when the analysis API response body is not the expected JSON."""


class AnalysisAPIError(RelayError):
    """Raised when the decoded response carries an error payload."""
    def __init__(self, kind: Optional[str], message: Optional[str]):
        super().__init__(f"Analysis API error: {kind} - {message}")
        self.kind = kind
        self.api_message = message
