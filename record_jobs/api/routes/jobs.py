import logging

from fastapi import APIRouter, Depends, status

from record_jobs.api.deps import get_job_client, get_store_factory
from record_jobs.core.config import Settings, get_settings
from record_jobs.jobs.executor import StoreFactory, execute_job
from record_jobs.schemas.jobs import (
    AIGenerateRequest,
    JobAccepted,
    JobTarget,
    KeywordsSearchRequest,
    MapImageRequest,
    TranslateRequest,
    UrlCrawlRequest,
    WpSyncRequest,
)
from record_jobs.services.job_client import JobClient

router = APIRouter()
logger = logging.getLogger(__name__)


async def _run(
    kind: str,
    payload: JobTarget,
    store_factory: StoreFactory,
    client: JobClient,
    settings: Settings,
) -> JobAccepted:
    await execute_job(payload, store=store_factory(payload.base_id), client=client, settings=settings)
    logger.info("job dispatched kind=%s record=%s", kind, payload.record_id)
    return JobAccepted(kind=kind, base_id=payload.base_id, table_id=payload.table_id, record_id=payload.record_id)


@router.post("/map_image", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def map_image(
    payload: MapImageRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("map_image", payload, store_factory, client, settings)


@router.post("/ai_generate", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def ai_generate(
    payload: AIGenerateRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("ai_generate", payload, store_factory, client, settings)


@router.post("/translate", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def translate(
    payload: TranslateRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("translate", payload, store_factory, client, settings)


@router.post("/keywords_search", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def keywords_search(
    payload: KeywordsSearchRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("keywords_search", payload, store_factory, client, settings)


@router.post("/url_crawl", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def url_crawl(
    payload: UrlCrawlRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("url_crawl", payload, store_factory, client, settings)


@router.post("/wp_sync", response_model=JobAccepted, status_code=status.HTTP_202_ACCEPTED)
async def wp_sync(
    payload: WpSyncRequest,
    store_factory: StoreFactory = Depends(get_store_factory),
    client: JobClient = Depends(get_job_client),
    settings: Settings = Depends(get_settings),
) -> JobAccepted:
    return await _run("wp_sync", payload, store_factory, client, settings)
