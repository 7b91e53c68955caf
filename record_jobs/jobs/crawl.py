from __future__ import annotations

import logging

from record_jobs.jobs.dispatch import FieldInput, JobContext, dispatch
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import RecordStore

logger = logging.getLogger(__name__)


async def crawl_url_content(
    store: RecordStore,
    *,
    input_column: str,
    output_column: str,
    record_id: str,
    table_id: str,
    base_id: str,
    client: JobClient,
    endpoint: str,
) -> None:
    await dispatch(
        store,
        JobContext(base_id, table_id, record_id, output_column),
        {"url": FieldInput(input_column)},
        endpoint,
        client=client,
        missing_message="No URL found",
    )
    logger.info("url content crawled record=%s output_column=%s", record_id, output_column)
