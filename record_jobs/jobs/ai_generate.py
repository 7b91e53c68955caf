from __future__ import annotations

from collections.abc import Sequence
import logging

from record_jobs.core.errors import ValidationError
from record_jobs.jobs.dispatch import FieldInput, JobContext, dispatch
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import CellValue, RecordStore, is_empty

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
PROMPTS_TABLE = "Prompts"


async def get_system_prompt(
    store: RecordStore,
    prompt_name: str,
    *,
    prompts_table: str = PROMPTS_TABLE,
) -> CellValue:
    """Return the ``Prompt`` of the first row whose ``Name`` matches."""
    table = await store.get_table(prompts_table)
    for record in await table.select_records(fields=["Name", "Prompt"]):
        if record.get_as_string("Name") == prompt_name:
            prompt = record.get("Prompt")
            return None if is_empty(prompt) else prompt
    logger.info("no prompt found with name=%s", prompt_name)
    return None


def wrap_columns(values: dict[str, CellValue], input_columns: Sequence[str]) -> str:
    return "\n".join(f"<{column}>{values[column]}</{column}>" for column in input_columns)


async def ai_generate(
    store: RecordStore,
    *,
    input_columns: Sequence[str],
    system_prompt_name: str,
    output_column: str,
    record_id: str,
    table_id: str,
    base_id: str,
    client: JobClient,
    endpoint: str,
    model: str = DEFAULT_MODEL,
    openai_json_format: bool = False,
    prompts_table: str = PROMPTS_TABLE,
) -> None:
    """Generate text for ``output_column`` from the record's input columns.

    Each input column is sent as ``<column>value</column>`` in the user
    message. The named system prompt must exist in the prompts table; otherwise
    ``ValidationError`` is raised before any request is made.
    """
    system_prompt = await get_system_prompt(store, system_prompt_name, prompts_table=prompts_table)
    if system_prompt is None:
        raise ValidationError(f"Failed to retrieve system prompt: {system_prompt_name}", fields=[system_prompt_name])

    logger.info("generating content for column=%s record=%s", output_column, record_id)
    await dispatch(
        store,
        JobContext(base_id, table_id, record_id, output_column),
        {column: FieldInput(column, required=False, as_string=True) for column in input_columns},
        endpoint,
        client=client,
        build_payload=lambda values: {"user_msg": wrap_columns(values, input_columns)},
        extra_params={
            "model": model,
            "system_prompt": system_prompt,
            "openai_json_format": openai_json_format,
        },
    )
    logger.info("content generation completed for column=%s", output_column)
