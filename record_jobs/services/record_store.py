from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

CellValue = Union[str, int, float, bool, list[Any], dict[str, Any], None]


@dataclass(slots=True)
class Record:
    id: str
    fields: dict[str, CellValue] = field(default_factory=dict)

    def get(self, name: str) -> CellValue:
        """Raw cell value; absent fields read as ``None``."""
        return self.fields.get(name)

    def get_as_string(self, name: str) -> str:
        return cell_as_string(self.fields.get(name))


def cell_as_string(value: CellValue) -> str:
    """Render a cell the way the record store UI shows it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "checked" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ", ".join(part for part in (cell_as_string(item) for item in value) if part)
    if isinstance(value, dict):
        for key in ("name", "url", "email", "id"):
            if isinstance(value.get(key), str):
                return value[key]
        return ""
    return str(value)


def is_empty(value: CellValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


class Table(Protocol):
    id: str
    name: str

    async def select_record(self, record_id: str) -> Record: ...

    async def select_records(
        self,
        record_ids: Sequence[str] | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]: ...

    async def has_field(self, name: str) -> bool: ...

    async def create_field(self, name: str, field_type: str, options: dict[str, Any] | None = None) -> None: ...


class RecordStore(Protocol):
    base_id: str

    async def get_table(self, table_id_or_name: str) -> Table: ...
