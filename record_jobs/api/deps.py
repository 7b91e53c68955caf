from record_jobs.core.config import get_settings
from record_jobs.jobs.executor import StoreFactory, airtable_store_factory
from record_jobs.services.job_client import JobClient


def get_store_factory() -> StoreFactory:
    return airtable_store_factory(get_settings())


def get_job_client() -> JobClient:
    return JobClient(timeout_seconds=get_settings().http_timeout_seconds)
