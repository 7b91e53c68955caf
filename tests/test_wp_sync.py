from __future__ import annotations

import asyncio

import pytest

from record_jobs.core.errors import ValidationError
from record_jobs.jobs.wp_sync import ensure_field, sync_wp_post
from record_jobs.services.job_client import JobClient

WP_ENDPOINT = "https://jobs.example.test/jobs/wp_post_mymap/run"
POST_COLUMNS = {"title": "Title", "content": "Body"}


def _sync(store, recorder, lang: str) -> None:
    async def run() -> None:
        async with recorder.http_client() as http:
            await sync_wp_post(
                store,
                post_columns=POST_COLUMNS,
                lang=lang,
                record_id="rec1",
                table_id="tbl1",
                base_id="base1",
                client=JobClient(client=http),
                endpoint=WP_ENDPOINT,
            )

    asyncio.run(run())


def test_sync_creates_post_id_field_once(store, recorder) -> None:
    table = store.tables["tbl1"]

    _sync(store, recorder, "fr")
    _sync(store, recorder, "fr")

    assert table.created_fields == ["post_id_fr"]
    assert table.field_types["post_id_fr"] == "number"
    assert len(recorder.requests) == 2


def test_sync_payload_links_english_post(store, recorder) -> None:
    table = store.tables["tbl1"]
    table.field_types["post_id_en"] = "number"
    table.records["rec1"]["post_id_en"] = 101

    _sync(store, recorder, "fr")

    assert recorder.payloads == [
        {
            "post": {"title": "Castles", "content": "<p>About castles</p>"},
            "post_en_id": 101,
            "post_lang": "fr",
            "base_id": "base1",
            "table_id": "tbl1",
            "record_id": "rec1",
            "post_id_column": "post_id_fr",
        }
    ]


def test_sync_sends_existing_post_id_for_updates(store, recorder) -> None:
    table = store.tables["tbl1"]
    table.field_types["post_id_en"] = "number"
    table.records["rec1"]["post_id_en"] = 101

    _sync(store, recorder, "en")

    payload = recorder.payloads[0]
    assert payload["post"]["id"] == 101
    assert payload["post_en_id"] is None
    assert payload["post_id_column"] == "post_id_en"
    assert table.created_fields == []


def test_sync_requires_post_columns(store, recorder) -> None:
    store.tables["tbl1"].records["rec1"]["Body"] = ""

    with pytest.raises(ValidationError) as exc_info:
        _sync(store, recorder, "de")

    assert exc_info.value.fields == ["Body"]
    assert recorder.requests == []


def test_sync_requires_language(store, recorder) -> None:
    with pytest.raises(ValidationError, match="Missing post language"):
        _sync(store, recorder, " ")

    assert store.tables["tbl1"].created_fields == []


def test_ensure_field_reports_whether_it_created(store) -> None:
    table = store.tables["tbl1"]

    assert asyncio.run(ensure_field(table, "post_id_es")) is True
    assert asyncio.run(ensure_field(table, "post_id_es")) is False
