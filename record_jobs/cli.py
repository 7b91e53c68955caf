"""Run a single record job from an automation trigger.

Example::

    record-jobs keywords_search --input '{"base_id": "app1", "table_id": "tbl1",
        "record_id": "rec1", "input_column": "Keyword", "output_column": "Results"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from record_jobs.core.config import Settings, get_settings
from record_jobs.core.errors import RecordJobError
from record_jobs.core.telemetry import configure_logging, setup_telemetry, shutdown_telemetry
from record_jobs.jobs.executor import StoreFactory, airtable_store_factory, execute_job, parse_job_request
from record_jobs.schemas.jobs import JOB_REQUESTS
from record_jobs.services.job_client import JobClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="record-jobs", description="Dispatch one record job to its job service.")
    parser.add_argument("kind", choices=sorted(JOB_REQUESTS), help="Job to run")
    parser.add_argument(
        "--input",
        default="-",
        help="Job request as a JSON object, or '-' to read it from stdin",
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def load_request_data(raw: str) -> dict[str, Any]:
    text = sys.stdin.read() if raw == "-" else raw
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("job request must be a JSON object")
    return data


async def run_job(
    kind: str,
    data: dict[str, Any],
    *,
    settings: Settings,
    store_factory: StoreFactory | None = None,
    client: JobClient | None = None,
) -> None:
    request = parse_job_request(kind, data)
    store = (store_factory or airtable_store_factory(settings))(request.base_id)
    await execute_job(
        request,
        store=store,
        client=client or JobClient(timeout_seconds=settings.http_timeout_seconds),
        settings=settings,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    settings = get_settings()
    telemetry_runtime = setup_telemetry(settings)
    try:
        data = load_request_data(args.input)
        asyncio.run(run_job(args.kind, data, settings=settings))
    except ValueError as exc:
        logger.error("invalid %s request: %s", args.kind, exc)
        return 2
    except RecordJobError as exc:
        logger.error("%s job failed: %s", args.kind, exc)
        return 1
    finally:
        shutdown_telemetry(telemetry_runtime)
    logger.info("%s job dispatched", args.kind)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
