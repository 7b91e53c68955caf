from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any
from uuid import uuid4

from record_jobs.core.errors import RecordNotFoundError, RecordStoreError
from record_jobs.services.record_store import CellValue, Record


class InMemoryTable:
    def __init__(self, table_id: str, name: str, field_names: Iterable[str] = ()) -> None:
        self.id = table_id
        self.name = name
        self.field_types: dict[str, str] = {field_name: "singleLineText" for field_name in field_names}
        self.records: dict[str, dict[str, CellValue]] = {}
        self.created_fields: list[str] = []

    def add_record(self, fields: dict[str, CellValue], record_id: str | None = None) -> str:
        record_id = record_id or f"rec{uuid4().hex[:14]}"
        for field_name in fields:
            self.field_types.setdefault(field_name, "singleLineText")
        self.records[record_id] = dict(fields)
        return record_id

    async def select_record(self, record_id: str) -> Record:
        fields = self.records.get(record_id)
        if fields is None:
            raise RecordNotFoundError(f"record not found: {record_id}")
        return Record(id=record_id, fields=dict(fields))

    async def select_records(
        self,
        record_ids: Sequence[str] | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]:
        ids = list(record_ids) if record_ids is not None else list(self.records)
        selected: list[Record] = []
        for record_id in ids:
            values = self.records.get(record_id)
            if values is None:
                continue
            if fields is not None:
                values = {key: value for key, value in values.items() if key in fields}
            selected.append(Record(id=record_id, fields=dict(values)))
        return selected

    async def has_field(self, name: str) -> bool:
        return name in self.field_types

    async def create_field(self, name: str, field_type: str, options: dict[str, Any] | None = None) -> None:
        if name in self.field_types:
            raise RecordStoreError(f"field already exists: {name}")
        self.field_types[name] = field_type
        self.created_fields.append(name)


class InMemoryRecordStore:
    """Dict-backed record store for tests and local dry runs."""

    def __init__(self, base_id: str = "appLocal") -> None:
        self.base_id = base_id
        self.tables: dict[str, InMemoryTable] = {}

    def add_table(self, name: str, table_id: str | None = None, field_names: Iterable[str] = ()) -> InMemoryTable:
        table = InMemoryTable(table_id or f"tbl{uuid4().hex[:14]}", name, field_names)
        self.tables[table.id] = table
        return table

    async def get_table(self, table_id_or_name: str) -> InMemoryTable:
        table = self.tables.get(table_id_or_name)
        if table is not None:
            return table
        for candidate in self.tables.values():
            if candidate.name == table_id_or_name:
                return candidate
        raise RecordNotFoundError(f"table not found: {table_id_or_name}")
