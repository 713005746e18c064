"""
Anthropic Messages API client for invoice extraction.

Talks to the API over plain HTTP (httpx) rather than the SDK so that the
status check, body decoding and error-payload check each fail with their
own exception type.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from invoice_relay.config import Settings
from invoice_relay.errors import (
    AnalysisAPIError,
    AnalysisDecodeError,
    AnalysisStatusError,
    AnalysisTransportError,
)
from invoice_relay.models.analysis import AnalysisRequest, AnalysisResponse

logger = logging.getLogger(__name__)


def _decode(body: str) -> AnalysisResponse:
    try:
        return AnalysisResponse.model_validate_json(body)
    except ValidationError as e:
        raise AnalysisDecodeError(f"Failed to parse analysis response: {e}")


def _strip_code_fence(text: str) -> str:
    # Claude sometimes wraps JSON output in ```json ... ``` fences
    # Only the outer wrapper is removed; fences inside the reply are kept
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.split("\n")[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def extract_reply_text(response: AnalysisResponse) -> str:
    """
    Return the extracted text from a successful response.

    Takes the first text block and strips any markdown code fence.

    Raises:
        AnalysisDecodeError: if the response has no text block.
    """
    text = response.first_text()
    if text is None:
        raise AnalysisDecodeError("Analysis response contained no text content")
    return _strip_code_fence(text)


class AnalysisClient:
    """Sends AnalysisRequests to the configured Messages API endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.Client):
        self._settings = settings
        self._http = http_client

    def _headers(self) -> dict:
        return {
            "x-api-key": self._settings.anthropic_api_key,
            "anthropic-version": self._settings.anthropic_version,
            "content-type": "application/json",
        }

    def send(self, request: AnalysisRequest) -> AnalysisResponse:
        """
        POST the request and decode the response.

        Raises:
            AnalysisTransportError: the API could not be reached.
            AnalysisStatusError: HTTP status was not 200. ``.error`` holds the
                structured error payload when the body could be decoded.
            AnalysisDecodeError: a 200 body was not a valid response.
            AnalysisAPIError: a 200 body carried an error payload.
        """
        try:
            response = self._http.post(
                self._settings.anthropic_api_url,
                json=request.to_payload(),
                headers=self._headers(),
            )
            # Read the full body before looking at the status
            body = response.text
        except httpx.HTTPError as e:
            raise AnalysisTransportError(f"Failed to reach analysis API: {e}")

        if response.status_code != httpx.codes.OK:
            self._log_failed_response(response, body)
            error = None
            try:
                error = _decode(body).error
            except AnalysisDecodeError:
                pass  # Unstructured body, e.g. a proxy error page
            raise AnalysisStatusError(response.status_code, body, error=error)

        decoded = _decode(body)
        if decoded.has_error:
            raise AnalysisAPIError(decoded.error.type, decoded.error.message)

        logger.info(
            f"Analysis response {decoded.id!r} model={decoded.model!r} "
            f"stop_reason={decoded.stop_reason!r}"
        )
        return decoded

    @staticmethod
    def _log_failed_response(response: httpx.Response, body: Optional[str]) -> None:
        headers = "\n".join(f"  {k}: {v}" for k, v in response.headers.items())
        logger.warning(
            "Analysis API returned status %s\nResponse headers:\n%s\nResponse body: %s",
            response.status_code,
            headers,
            body,
        )
