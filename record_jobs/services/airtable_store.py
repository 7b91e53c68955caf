from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

import httpx

from record_jobs.core.errors import RecordNotFoundError, RecordStoreError
from record_jobs.services.record_store import Record

logger = logging.getLogger(__name__)

MAX_FORMULA_RECORD_IDS = 100


class AirtableTable:
    def __init__(self, store: AirtableRecordStore, table_id: str, name: str) -> None:
        self._store = store
        self.id = table_id
        self.name = name

    async def select_record(self, record_id: str) -> Record:
        payload = await self._store.request("GET", f"/v0/{self._store.base_id}/{self.id}/{record_id}")
        return _to_record(payload)

    async def select_records(
        self,
        record_ids: Sequence[str] | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]:
        base_params: list[tuple[str, str]] = [("fields[]", name) for name in fields or ()]
        if record_ids is not None:
            if not record_ids:
                return []
            if len(record_ids) > MAX_FORMULA_RECORD_IDS:
                raise RecordStoreError(f"cannot select more than {MAX_FORMULA_RECORD_IDS} records by id")
            clauses = ",".join(f"RECORD_ID()='{formula_string(record_id)}'" for record_id in record_ids)
            base_params.append(("filterByFormula", f"OR({clauses})"))

        records: list[Record] = []
        offset: str | None = None
        while True:
            params = list(base_params)
            if offset:
                params.append(("offset", offset))
            payload = await self._store.request("GET", f"/v0/{self._store.base_id}/{self.id}", params=params)
            records.extend(_to_record(item) for item in payload.get("records", []))
            offset = payload.get("offset")
            if not offset:
                return records

    async def has_field(self, name: str) -> bool:
        schema = await self._store.table_schema(self.id)
        return any(item.get("name") == name for item in schema.get("fields", []))

    async def create_field(self, name: str, field_type: str, options: dict[str, Any] | None = None) -> None:
        body: dict[str, Any] = {"name": name, "type": field_type}
        if options:
            body["options"] = options
        await self._store.request(
            "POST",
            f"/v0/meta/bases/{self._store.base_id}/tables/{self.id}/fields",
            json=body,
        )
        logger.info("created field name=%s type=%s table=%s", name, field_type, self.id)


class AirtableRecordStore:
    """Record store backed by the Airtable REST and metadata APIs."""

    def __init__(
        self,
        base_id: str,
        api_key: str | None,
        *,
        api_url: str = "https://api.airtable.com",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client

    async def get_table(self, table_id_or_name: str) -> AirtableTable:
        schema = await self.table_schema(table_id_or_name)
        return AirtableTable(self, schema["id"], schema.get("name", schema["id"]))

    async def table_schema(self, table_id_or_name: str) -> dict[str, Any]:
        payload = await self.request("GET", f"/v0/meta/bases/{self.base_id}/tables")
        for table in payload.get("tables", []):
            if table_id_or_name in {table.get("id"), table.get("name")}:
                return table
        raise RecordNotFoundError(f"table not found: {table_id_or_name}")

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.api_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.request(method, url, params=params, json=json, headers=self.headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.request(method, url, params=params, json=json, headers=self.headers)
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"airtable request failed: {method} {path}: {exc}") from exc

        if response.status_code == 404:
            raise RecordNotFoundError(f"airtable resource not found: {path}")
        if response.is_error:
            logger.error(
                "airtable %s %s failed status=%s body=%s",
                method,
                path,
                response.status_code,
                response.text[:300],
            )
            raise RecordStoreError(f"airtable {method} {path} failed with status {response.status_code}")
        return response.json()


def _to_record(payload: dict[str, Any]) -> Record:
    raw_fields = payload.get("fields")
    return Record(id=payload["id"], fields=dict(raw_fields) if isinstance(raw_fields, dict) else {})


def formula_string(value: str) -> str:
    """Escape ``value`` for use inside a single-quoted formula string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")
