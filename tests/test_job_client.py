from __future__ import annotations

import asyncio

import httpx
import pytest

from record_jobs.core.errors import DispatchTimeoutError, RemoteError
from record_jobs.services.job_client import JobClient

ENDPOINT = "https://jobs.example.test/job/url2text/run"


def _run(handler, **kwargs) -> httpx.Response:
    async def run() -> httpx.Response:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await JobClient(timeout_seconds=7.5, client=http).run(ENDPOINT, {"record_id": "rec1"}, **kwargs)

    return asyncio.run(run())


def test_connection_failure_raises_remote_error_without_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteError, match="connection refused") as exc_info:
        _run(handler)

    assert exc_info.value.status_code is None


def test_http_timeout_without_deadline_raises_dispatch_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(DispatchTimeoutError, match="7.5 seconds") as exc_info:
        _run(handler)

    assert exc_info.value.timeout_seconds == 7.5


def test_success_returns_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=201, json={"queued": True}, request=request)

    response = _run(handler, deadline_seconds=1.0)

    assert response.status_code == 201
