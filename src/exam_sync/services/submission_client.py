"""HTTP client for the remote exam-attempt submission endpoint.

The endpoint deduplicates on the `localId` field of the body, so the same
payload may be posted any number of times without creating duplicate
server-side attempts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from exam_sync.core.settings import settings
from exam_sync.schemas.submission import SubmissionPayload

# Configure logger for this module
logger = logging.getLogger(__name__)

SUBMIT_PATH = "/exam-attempts/submit-authenticated"


class SubmissionClientError(RuntimeError):
    """Base exception for a delivery attempt that did not succeed."""


class SubmissionRejectedError(SubmissionClientError):
    """Raised when the endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        message = f"Submission endpoint responded with {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code


class SubmissionTransportError(SubmissionClientError):
    """Raised when the request never produced a response (network error, timeout)."""


@dataclass(frozen=True)
class SubmissionClientConfig:
    """Immutable configuration for the submission client."""

    base_url: str
    timeout_seconds: float


def load_client_config() -> SubmissionClientConfig:
    """Build configuration object from global settings."""

    return SubmissionClientConfig(
        base_url=settings.api_url,
        timeout_seconds=float(settings.http_timeout_seconds),
    )


class SubmissionClient:
    """Async HTTP client wrapper for submission delivery."""

    def __init__(
        self,
        config: SubmissionClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_client_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    @staticmethod
    def _build_auth_headers(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    async def submit(self, payload: SubmissionPayload, access_token: str) -> dict[str, Any] | None:
        """Deliver one submission.

        Args:
            payload: Wire payload; its `local_id` is the idempotency key.
            access_token: Bearer token of the owning user.

        Returns:
            The decoded JSON acknowledgement, or None when the body is empty
            or not JSON.

        Raises:
            SubmissionRejectedError: On any non-2xx response.
            SubmissionTransportError: On network errors and timeouts.
        """
        client = await self._ensure_client()
        start_time = time.monotonic()

        try:
            response = await client.post(
                SUBMIT_PATH,
                json=payload.to_wire(),
                headers=self._build_auth_headers(access_token),
            )
        except httpx.HTTPError as exc:
            logger.debug(
                "Submission %s transport failure after %.3fs",
                payload.local_id,
                time.monotonic() - start_time,
            )
            raise SubmissionTransportError(f"Submission request failed: {exc}") from exc

        logger.debug(
            "Submission %s answered %s in %.3fs",
            payload.local_id,
            response.status_code,
            time.monotonic() - start_time,
        )

        if not response.is_success:
            raise SubmissionRejectedError(response.status_code, _short_detail(response))

        try:
            body = response.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    async def aclose(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None

    async def __aenter__(self) -> SubmissionClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _short_detail(response: httpx.Response, limit: int = 200) -> str | None:
    text = response.text.strip()
    if not text:
        return None
    return text[:limit]
