from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from record_jobs.core.errors import DispatchTimeoutError, RemoteError

logger = logging.getLogger(__name__)


class JobClient:
    """POSTs job requests to the external job services."""

    def __init__(self, *, timeout_seconds: float = 60.0, client: httpx.AsyncClient | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def run(
        self,
        endpoint: str,
        payload: dict[str, Any],
        *,
        deadline_seconds: float | None = None,
    ) -> httpx.Response:
        """Send one job request.

        With ``deadline_seconds`` the whole request is bounded by a deadline;
        when it expires the in-flight request is cancelled and
        ``DispatchTimeoutError`` is raised. Non-2xx answers raise
        ``RemoteError`` carrying the status code.
        """
        effective_timeout = deadline_seconds if deadline_seconds is not None else self.timeout_seconds
        try:
            if deadline_seconds is None:
                response = await self._post(endpoint, payload, effective_timeout)
            else:
                response = await asyncio.wait_for(
                    self._post(endpoint, payload, effective_timeout),
                    timeout=deadline_seconds,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise DispatchTimeoutError(
                f"Request timed out after {effective_timeout:g} seconds",
                timeout_seconds=effective_timeout,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"API request to {endpoint} failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "job request failed endpoint=%s status=%s body=%s",
                endpoint,
                response.status_code,
                response.text[:300],
            )
            raise RemoteError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def _post(self, endpoint: str, payload: dict[str, Any], timeout_seconds: float) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(endpoint, json=payload)
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            return await client.post(endpoint, json=payload)
