from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import logging
from typing import Any

from record_jobs.core.errors import ValidationError
from record_jobs.core.telemetry import job_span
from record_jobs.services.job_client import JobClient
from record_jobs.services.record_store import CellValue, Record, RecordStore, is_empty

logger = logging.getLogger(__name__)

PayloadBuilder = Callable[[dict[str, CellValue]], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class JobContext:
    """Identifies the record cell the remote job writes its result into."""

    base_id: str
    table_id: str
    record_id: str
    output_column: str

    def as_payload(self, output_key: str = "output_column") -> dict[str, Any]:
        return {
            "base_id": self.base_id,
            "table_id": self.table_id,
            "record_id": self.record_id,
            output_key: self.output_column,
        }


@dataclass(frozen=True, slots=True)
class FieldInput:
    column: str
    required: bool = True
    as_string: bool = False


def read_inputs(
    record: Record,
    inputs: Mapping[str, FieldInput],
    *,
    missing_message: str | None = None,
) -> dict[str, CellValue]:
    values: dict[str, CellValue] = {}
    missing: list[str] = []
    for key, field_input in inputs.items():
        value: CellValue = (
            record.get_as_string(field_input.column) if field_input.as_string else record.get(field_input.column)
        )
        if field_input.required and is_empty(value):
            missing.append(field_input.column)
        values[key] = value

    if missing:
        logger.info("missing required inputs record=%s fields=%s", record.id, missing)
        raise ValidationError(missing_message or f"Missing required input: {', '.join(missing)}", fields=missing)
    return values


async def dispatch(
    store: RecordStore,
    context: JobContext,
    inputs: Mapping[str, FieldInput],
    endpoint: str,
    *,
    client: JobClient,
    build_payload: PayloadBuilder | None = None,
    extra_params: Mapping[str, Any] | None = None,
    timeout_seconds: float | None = None,
    missing_message: str | None = None,
    output_key: str = "output_column",
) -> None:
    """Read a record's inputs and hand them to a job service.

    The remote job writes its result into ``context.output_column`` itself, so
    nothing is returned on success.
    """
    table = await store.get_table(context.table_id)
    record = await table.select_record(context.record_id)
    values = read_inputs(record, inputs, missing_message=missing_message)

    payload: dict[str, Any] = dict(build_payload(values) if build_payload is not None else values)
    payload.update(extra_params or {})
    # record identifiers take precedence over inputs and extra params
    payload.update(context.as_payload(output_key))

    await send(client, endpoint, payload, timeout_seconds=timeout_seconds)


async def send(
    client: JobClient,
    endpoint: str,
    payload: dict[str, Any],
    *,
    timeout_seconds: float | None = None,
) -> None:
    with job_span(endpoint, payload):
        await client.run(endpoint, payload, deadline_seconds=timeout_seconds)
        logger.info("job accepted endpoint=%s", endpoint)
