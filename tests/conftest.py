from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from record_jobs.services.memory_store import InMemoryRecordStore

BASE_ID = "base1"
TABLE_ID = "tbl1"
RECORD_ID = "rec1"


class JobRecorder:
    """Mock job service that records every POSTed payload."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        delay_seconds: float = 0.0,
        failing_columns: dict[str, int] | None = None,
    ) -> None:
        self.status_code = status_code
        self.delay_seconds = delay_seconds
        self.failing_columns = failing_columns or {}
        self.requests: list[dict[str, Any]] = []

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [item["json"] for item in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append({"method": request.method, "url": str(request.url), "json": payload})
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        status_code = self.failing_columns.get(payload.get("output_column"), self.status_code)
        return httpx.Response(status_code=status_code, json={"accepted": status_code < 400}, request=request)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def store() -> InMemoryRecordStore:
    store = InMemoryRecordStore(base_id=BASE_ID)
    places = store.add_table("Places", table_id=TABLE_ID)
    places.add_record(
        {
            "Template": "castle",
            "Prompt": "sunset",
            "Keyword": "medieval castles",
            "Url": "https://example.com/castles",
            "Title": "Castles",
            "Body": "<p>About castles</p>",
            "Content JSON": '{"slug": "castles", "meta": "<p>castles</p>"}',
        },
        record_id=RECORD_ID,
    )
    prompts = store.add_table("Prompts", table_id="tblPrompts")
    prompts.add_record({"Name": "summarize", "Prompt": "Summarize the input."})
    prompts.add_record({"Name": "empty", "Prompt": ""})
    return store


@pytest.fixture
def recorder() -> JobRecorder:
    return JobRecorder()


@pytest.fixture
def make_recorder() -> type[JobRecorder]:
    return JobRecorder
