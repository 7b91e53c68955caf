from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import json
import logging

from record_jobs.core.errors import RecordJobError, TranslationBatchError
from record_jobs.jobs.ai_generate import DEFAULT_MODEL
from record_jobs.jobs.dispatch import FieldInput, JobContext, read_inputs, send
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Language:
    column: str
    name: str


def translation_prompt(language_name: str) -> str:
    return f"""
I am an SEO writing master in {language_name}. I am here to translate a page content into {language_name}. Make sure you read the entire content first, not just translate sentence by sentence. Write like native speakers.

Guideline
- Do not translate the "slug" key
- The input is JSON. The values in keys such as "What_is", "Why_use", "How_to_use", "meta" are already DOM. Make sure you only translate the values in the HTML tag.
- Translate values in all JSON keys.
- Output the JSON only, no extra message or code block.
- Maintain SEO best practices and adapt content appropriately for a {language_name}-speaking audience.
- keep original json key name, do not change key names in your output!
"""


async def translate_i18n(
    store: RecordStore,
    *,
    input_json_column: str,
    languages: Sequence[Language],
    record_id: str,
    table_id: str,
    base_id: str,
    client: JobClient,
    endpoint: str,
    model: str = DEFAULT_MODEL,
    openai_json_format: bool = False,
    stop_on_error: bool = True,
) -> None:
    """Translate a JSON column into one column per language.

    Languages are requested one after another. By default the first failure
    propagates and the remaining languages are skipped; with
    ``stop_on_error=False`` every language is attempted and a
    ``TranslationBatchError`` lists the ones that failed.
    """
    table = await store.get_table(table_id)
    record = await table.select_record(record_id)
    values = read_inputs(
        record,
        {"input_json": FieldInput(input_json_column)},
        missing_message="No input JSON found",
    )
    user_msg = json.dumps(values["input_json"], ensure_ascii=False)

    failures: dict[str, RecordJobError] = {}
    for language in languages:
        logger.info("translating to %s column=%s", language.name, language.column)
        payload = {
            "model": model,
            "system_prompt": translation_prompt(language.name),
            "user_msg": user_msg,
            "openai_json_format": openai_json_format,
        }
        payload.update(JobContext(base_id, table_id, record_id, language.column).as_payload())
        try:
            await send(client, endpoint, payload)
        except RecordJobError as exc:
            logger.error("translation failed for %s: %s", language.name, exc)
            if stop_on_error:
                raise
            failures[language.name] = exc
            continue
        logger.info("translation completed for %s", language.name)

    if failures:
        raise TranslationBatchError(failures)
    logger.info("all translations completed record=%s languages=%s", record_id, len(languages))
