import asyncio

import pytest

from record_jobs.core.errors import RecordNotFoundError, RecordStoreError
from record_jobs.services.memory_store import InMemoryRecordStore
from record_jobs.services.record_store import Record, cell_as_string, is_empty


def test_cell_as_string_renders_common_cell_types() -> None:
    assert cell_as_string(None) == ""
    assert cell_as_string("text") == "text"
    assert cell_as_string(3.0) == "3"
    assert cell_as_string(2.5) == "2.5"
    assert cell_as_string(True) == "checked"
    assert cell_as_string(["a", None, "b"]) == "a, b"
    assert cell_as_string([{"id": "att1", "url": "https://x.test/a.png"}]) == "https://x.test/a.png"
    assert cell_as_string({"id": "usr1", "name": "Ada"}) == "Ada"


def test_is_empty_matches_blank_cells() -> None:
    assert is_empty(None)
    assert is_empty("  ")
    assert is_empty([])
    assert is_empty({})
    assert not is_empty(0)
    assert not is_empty(False)
    assert not is_empty("x")


def test_record_reads_absent_fields_as_none() -> None:
    record = Record(id="rec1", fields={"Name": "Ada"})

    assert record.get("Other") is None
    assert record.get_as_string("Other") == ""
    assert record.get_as_string("Name") == "Ada"


def test_in_memory_store_looks_up_tables_by_id_or_name() -> None:
    store = InMemoryRecordStore()
    table = store.add_table("Places", table_id="tbl1")

    assert asyncio.run(store.get_table("tbl1")) is table
    assert asyncio.run(store.get_table("Places")) is table
    with pytest.raises(RecordNotFoundError):
        asyncio.run(store.get_table("Other"))


def test_in_memory_table_refuses_duplicate_fields() -> None:
    table = InMemoryRecordStore().add_table("Places", field_names=["Title"])

    with pytest.raises(RecordStoreError):
        asyncio.run(table.create_field("Title", "number"))


def test_in_memory_select_records_filters_ids_and_fields() -> None:
    table = InMemoryRecordStore().add_table("Places")
    first = table.add_record({"Name": "a", "Extra": 1})
    table.add_record({"Name": "b"})

    records = asyncio.run(table.select_records(record_ids=[first, "recMissing"], fields=["Name"]))

    assert [record.fields for record in records] == [{"Name": "a"}]
