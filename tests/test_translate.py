from __future__ import annotations

import asyncio
import json

import pytest

from record_jobs.core.errors import RemoteError, TranslationBatchError, ValidationError
from record_jobs.jobs.translate import Language, translate_i18n, translation_prompt
from record_jobs.services.job_client import JobClient

TRANSLATE_ENDPOINT = "https://jobs.example.test/jobs/ai2col/run"
LANGUAGES = [
    Language(column="Content fr", name="French"),
    Language(column="Content de", name="German"),
    Language(column="Content ja", name="Japanese"),
]


def _translate(store, recorder, **overrides) -> None:
    params = {
        "input_json_column": "Content JSON",
        "languages": LANGUAGES,
        "record_id": "rec1",
        "table_id": "tbl1",
        "base_id": "base1",
        "endpoint": TRANSLATE_ENDPOINT,
    }
    params.update(overrides)

    async def run() -> None:
        async with recorder.http_client() as http:
            await translate_i18n(store, client=JobClient(client=http), **params)

    asyncio.run(run())


def test_translate_issues_one_request_per_language(store, recorder) -> None:
    _translate(store, recorder)

    assert [payload["output_column"] for payload in recorder.payloads] == [
        "Content fr",
        "Content de",
        "Content ja",
    ]
    for payload, language in zip(recorder.payloads, LANGUAGES):
        assert payload["base_id"] == "base1"
        assert payload["table_id"] == "tbl1"
        assert payload["record_id"] == "rec1"
        assert payload["model"] == "gpt-4o"
        assert payload["system_prompt"] == translation_prompt(language.name)
        assert json.loads(payload["user_msg"]) == '{"slug": "castles", "meta": "<p>castles</p>"}'


def test_translate_stops_on_first_failure_by_default(store, make_recorder) -> None:
    recorder = make_recorder(failing_columns={"Content de": 500})

    with pytest.raises(RemoteError) as exc_info:
        _translate(store, recorder)

    assert exc_info.value.status_code == 500
    assert [payload["output_column"] for payload in recorder.payloads] == ["Content fr", "Content de"]


def test_translate_can_continue_past_failures(store, make_recorder) -> None:
    recorder = make_recorder(failing_columns={"Content fr": 502})

    with pytest.raises(TranslationBatchError) as exc_info:
        _translate(store, recorder, stop_on_error=False)

    assert len(recorder.payloads) == 3
    assert list(exc_info.value.failures) == ["French"]
    assert exc_info.value.failures["French"].status_code == 502


def test_translate_requires_input_json(store, recorder) -> None:
    with pytest.raises(ValidationError, match="No input JSON found"):
        _translate(store, recorder, input_json_column="Missing JSON")

    assert recorder.requests == []


def test_translation_prompt_names_language() -> None:
    prompt = translation_prompt("Korean")

    assert "SEO writing master in Korean" in prompt
    assert 'Do not translate the "slug" key' in prompt
