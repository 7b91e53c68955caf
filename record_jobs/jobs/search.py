from __future__ import annotations

import logging

from record_jobs.jobs.dispatch import FieldInput, JobContext, dispatch
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import RecordStore

logger = logging.getLogger(__name__)


async def keywords_search(
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
    """Run a web search for the keywords in ``input_column``."""
    await dispatch(
        store,
        JobContext(base_id, table_id, record_id, output_column),
        {"keywords": FieldInput(input_column, as_string=True)},
        endpoint,
        client=client,
        missing_message="No keywords found",
    )
    logger.info("keyword search requested record=%s output_column=%s", record_id, output_column)
