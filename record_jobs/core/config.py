from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "record-jobs"
    environment: str = "dev"
    airtable_api_url: str = "https://api.airtable.com"
    airtable_api_key: str | None = None
    airtable_timeout_seconds: float = 10.0
    prompts_table: str = "Prompts"
    default_model: str = "gpt-4o"
    http_timeout_seconds: float = 60.0
    map_image_endpoint: str = "https://jobs.mymap.ai/jobs/new_map_image/run"
    map_image_timeout_seconds: float = 120.0
    ai_generate_endpoint: str = "https://jobs.mymap.ai/job/ai2col/run"
    translate_endpoint: str = "https://jobs.mymap.ai/jobs/ai2col/run"
    keywords_search_endpoint: str = "https://jobs.mymap.ai/job/keywords_search/run"
    url_crawl_endpoint: str = "https://jobs.mymap.ai/job/url2text/run"
    wp_sync_endpoint: str = "https://jobs.mymap.ai/jobs/wp_post_mymap/run"
    otel_enabled: bool = True
    otel_service_name: str = "record-jobs"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: dict[str, str] = {}
    otel_trace_sample_ratio: float = 1.0

    model_config = SettingsConfigDict(env_prefix="RECORD_JOBS_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
