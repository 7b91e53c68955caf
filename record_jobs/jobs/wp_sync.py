from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from record_jobs.core.errors import ValidationError
from record_jobs.jobs.dispatch import FieldInput, JobContext, read_inputs, send
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import RecordStore, Table, is_empty

logger = logging.getLogger(__name__)

SOURCE_LANGUAGE = "en"
POST_ID_FIELD_TYPE = "number"
POST_ID_FIELD_OPTIONS = {"precision": 0}


def post_id_column(lang: str) -> str:
    return f"post_id_{lang}"


async def ensure_field(
    table: Table,
    name: str,
    field_type: str = POST_ID_FIELD_TYPE,
    options: dict[str, Any] | None = None,
) -> bool:
    """Create ``name`` on the table unless it exists. Returns True when created."""
    if await table.has_field(name):
        return False
    await table.create_field(name, field_type, options if options is not None else POST_ID_FIELD_OPTIONS)
    logger.info("provisioned field name=%s table=%s", name, table.id)
    return True


async def sync_wp_post(
    store: RecordStore,
    *,
    post_columns: Mapping[str, str],
    lang: str,
    record_id: str,
    table_id: str,
    base_id: str,
    client: JobClient,
    endpoint: str,
) -> None:
    """Publish the record as a WordPress post in ``lang``.

    ``post_columns`` maps post keys (title, content, ...) to record columns.
    The post service writes the post id back into ``post_id_<lang>``, which is
    created as a numeric field first when the table lacks it. An existing post
    id is sent as ``post["id"]`` so the service updates instead of creating,
    and the English post id links translations to their source post.
    """
    lang = lang.strip()
    if not lang:
        raise ValidationError("Missing post language", fields=["lang"])

    table = await store.get_table(table_id)
    id_column = post_id_column(lang)
    await ensure_field(table, id_column)
    # fetched after provisioning so the post id field is visible
    record = await table.select_record(record_id)

    post: dict[str, Any] = dict(read_inputs(record, {key: FieldInput(column) for key, column in post_columns.items()}))
    existing_post_id = record.get(id_column)
    if not is_empty(existing_post_id):
        post["id"] = existing_post_id

    post_en_id = None
    if lang != SOURCE_LANGUAGE:
        source_post_id = record.get(post_id_column(SOURCE_LANGUAGE))
        post_en_id = None if is_empty(source_post_id) else source_post_id

    payload: dict[str, Any] = {"post": post, "post_en_id": post_en_id, "post_lang": lang}
    payload.update(JobContext(base_id, table_id, record_id, id_column).as_payload("post_id_column"))

    logger.info("syncing post record=%s lang=%s", record_id, lang)
    await send(client, endpoint, payload)
