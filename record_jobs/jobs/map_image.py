from __future__ import annotations

import logging
from typing import Any

from record_jobs.jobs.dispatch import FieldInput, JobContext, dispatch
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import CellValue, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0


def build_visuals_payload(values: dict[str, CellValue]) -> dict[str, Any]:
    return {"visuals": [{"tpl": values["tpl"], "prompt": values["prompt"]}]}


async def create_map_image(
    store: RecordStore,
    *,
    tpl_column: str,
    prompt_column: str,
    output_column: str,
    record_id: str,
    table_id: str,
    base_id: str,
    client: JobClient,
    endpoint: str,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Generate a map image from a template and prompt.

    The image service stores the resulting URL in ``output_column``. The call
    is bounded by ``timeout_seconds`` and raises ``DispatchTimeoutError`` when
    the service is slower than that.
    """
    await dispatch(
        store,
        JobContext(base_id, table_id, record_id, output_column),
        {"tpl": FieldInput(tpl_column), "prompt": FieldInput(prompt_column)},
        endpoint,
        client=client,
        build_payload=build_visuals_payload,
        timeout_seconds=timeout_seconds,
        missing_message="Missing template or prompt",
    )
    logger.info("map image created record=%s output_column=%s", record_id, output_column)
