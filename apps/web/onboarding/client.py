"""Submission endpoint client - posts onboarding payloads over HTTP."""

import logging
from typing import Any

from django.conf import settings

import httpx

from apps.web.onboarding.exceptions import (
    SubmissionRejectedError,
    SubmissionTransportError,
)

logger = logging.getLogger(__name__)


def _rejection_message(response: httpx.Response) -> str:
    """User-facing message for a non-success response."""
    fallback = f"HTTP error, status {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        logger.warning(
            "Could not parse error response from %s (status %s)",
            response.request.url,
            response.status_code,
        )
        return fallback

    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"] or fallback
    return fallback


class OnboardingClient:
    """
    Client for the onboarding submission endpoint.

    Sends exactly one POST per call; there is no retry. Non-success
    responses raise SubmissionRejectedError, transport failures raise
    SubmissionTransportError.

    Usage:
        client = OnboardingClient("https://example.com/api/onboard")
        reply = await client.submit(submission.to_payload())
    """

    def __init__(
        self,
        url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            url: Submission endpoint. Defaults to settings.ONBOARD_URL.
            http_client: Optional HTTP client for dependency injection (testing).
            timeout: Transport timeout in seconds. Defaults to
                settings.ONBOARD_TIMEOUT_SECONDS, else httpx's default.
        """
        self.url = url or settings.ONBOARD_URL
        if timeout is None:
            timeout = getattr(settings, "ONBOARD_TIMEOUT_SECONDS", None)

        if http_client is None:
            if timeout is None:
                http_client = httpx.AsyncClient()
            else:
                http_client = httpx.AsyncClient(timeout=timeout)
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = http_client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST a payload as JSON.

        Args:
            payload: JSON-serializable request body.

        Returns:
            The parsed JSON reply, or an empty dict if the reply is not JSON.

        Raises:
            SubmissionRejectedError: If the endpoint returns a non-2xx status.
            SubmissionTransportError: If no response was received.
        """
        try:
            response = await self._client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            logger.warning("Submission to %s failed: %s", self.url, e)
            raise SubmissionTransportError(f"Request failed: {e}") from e

        if not response.is_success:
            message = _rejection_message(response)
            logger.warning(
                "Submission rejected by %s: status=%s message=%s",
                self.url,
                response.status_code,
                message,
            )
            raise SubmissionRejectedError(
                message,
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}
