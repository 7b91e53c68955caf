from __future__ import annotations

from collections.abc import Callable
from typing import Any

from record_jobs.core.config import Settings
from record_jobs.jobs.ai_generate import ai_generate
from record_jobs.jobs.crawl import crawl_url_content
from record_jobs.jobs.map_image import create_map_image
from record_jobs.jobs.search import keywords_search
from record_jobs.jobs.translate import Language, translate_i18n
from record_jobs.jobs.wp_sync import sync_wp_post
from record_jobs.schemas.jobs import (
    JOB_REQUESTS,
    AIGenerateRequest,
    JobTarget,
    KeywordsSearchRequest,
    MapImageRequest,
    TranslateRequest,
    UrlCrawlRequest,
    WpSyncRequest,
)
from record_jobs.services.airtable_store import AirtableRecordStore
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import RecordStore

StoreFactory = Callable[[str], RecordStore]


class UnknownJobKindError(ValueError):
    """Raised for a job kind with no registered request schema."""


def parse_job_request(kind: str, data: dict[str, Any]) -> JobTarget:
    schema = JOB_REQUESTS.get(kind)
    if schema is None:
        raise UnknownJobKindError(f"unknown job kind: {kind}")
    return schema.model_validate(data)


def airtable_store_factory(settings: Settings) -> StoreFactory:
    def build(base_id: str) -> RecordStore:
        return AirtableRecordStore(
            base_id,
            settings.airtable_api_key,
            api_url=settings.airtable_api_url,
            timeout_seconds=settings.airtable_timeout_seconds,
        )

    return build


async def execute_job(
    request: JobTarget,
    *,
    store: RecordStore,
    client: JobClient,
    settings: Settings,
) -> None:
    target = {"record_id": request.record_id, "table_id": request.table_id, "base_id": request.base_id}

    if isinstance(request, MapImageRequest):
        await create_map_image(
            store,
            tpl_column=request.tpl_column,
            prompt_column=request.prompt_column,
            output_column=request.output_column,
            client=client,
            endpoint=settings.map_image_endpoint,
            timeout_seconds=settings.map_image_timeout_seconds,
            **target,
        )
    elif isinstance(request, AIGenerateRequest):
        await ai_generate(
            store,
            input_columns=request.input_columns,
            system_prompt_name=request.system_prompt_name,
            output_column=request.output_column,
            client=client,
            endpoint=settings.ai_generate_endpoint,
            model=request.model or settings.default_model,
            openai_json_format=request.openai_json_format,
            prompts_table=settings.prompts_table,
            **target,
        )
    elif isinstance(request, TranslateRequest):
        await translate_i18n(
            store,
            input_json_column=request.input_json_column,
            languages=[Language(column=item.column, name=item.name) for item in request.languages],
            client=client,
            endpoint=settings.translate_endpoint,
            model=request.model or settings.default_model,
            openai_json_format=request.openai_json_format,
            stop_on_error=request.stop_on_error,
            **target,
        )
    elif isinstance(request, KeywordsSearchRequest):
        await keywords_search(
            store,
            input_column=request.input_column,
            output_column=request.output_column,
            client=client,
            endpoint=settings.keywords_search_endpoint,
            **target,
        )
    elif isinstance(request, UrlCrawlRequest):
        await crawl_url_content(
            store,
            input_column=request.input_column,
            output_column=request.output_column,
            client=client,
            endpoint=settings.url_crawl_endpoint,
            **target,
        )
    elif isinstance(request, WpSyncRequest):
        await sync_wp_post(
            store,
            post_columns=request.post_columns,
            lang=request.lang,
            client=client,
            endpoint=settings.wp_sync_endpoint,
            **target,
        )
    else:
        raise UnknownJobKindError(f"unsupported job request: {type(request).__name__}")
