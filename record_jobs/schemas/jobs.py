from pydantic import BaseModel, Field


class JobTarget(BaseModel):
    base_id: str = Field(min_length=1)
    table_id: str = Field(min_length=1)
    record_id: str = Field(min_length=1)


class MapImageRequest(JobTarget):
    tpl_column: str
    prompt_column: str
    output_column: str


class AIGenerateRequest(JobTarget):
    input_columns: list[str] = Field(min_length=1)
    system_prompt_name: str
    output_column: str
    model: str | None = None
    openai_json_format: bool = False


class LanguageIn(BaseModel):
    column: str = Field(min_length=1)
    name: str = Field(min_length=1)


class TranslateRequest(JobTarget):
    input_json_column: str
    languages: list[LanguageIn] = Field(min_length=1)
    model: str | None = None
    openai_json_format: bool = False
    stop_on_error: bool = True


class KeywordsSearchRequest(JobTarget):
    input_column: str
    output_column: str


class UrlCrawlRequest(JobTarget):
    input_column: str
    output_column: str


class WpSyncRequest(JobTarget):
    post_columns: dict[str, str] = Field(min_length=1)
    lang: str = Field(min_length=1)


class JobAccepted(BaseModel):
    kind: str
    base_id: str
    table_id: str
    record_id: str
    status: str = "accepted"


JOB_REQUESTS: dict[str, type[JobTarget]] = {
    "map_image": MapImageRequest,
    "ai_generate": AIGenerateRequest,
    "translate": TranslateRequest,
    "keywords_search": KeywordsSearchRequest,
    "url_crawl": UrlCrawlRequest,
    "wp_sync": WpSyncRequest,
}
