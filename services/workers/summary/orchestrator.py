"""Runs one summarizer invocation: trigger record in, three summaries out.

The orchestrator owns nothing between calls. Its collaborators (object store
and text generator) are handed in by the entry point, which builds them once
per process.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Protocol, Union
from urllib.parse import unquote_plus

from services.common.errors import InvalidTriggerError, UnsupportedFormatError

from .app import run_pipeline
from .core.constants import _EXTENSION_FORMATS
from .core.state import PhaseCallback
from .core.types import OutputArtifact, PipelineResult
from .nodes.summary import TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_PREFIX = "summaries"


class ObjectStore(Protocol):
    def get(self, bucket: str, key: str) -> bytes: ...

    def put(self, bucket: str, key: str, body: Union[str, bytes], content_type: str = ...) -> None: ...


@dataclass(frozen=True)
class TriggerRecord:
    bucket: str
    key: str


@dataclass
class InvocationResult:
    source: TriggerRecord
    output_bucket: str
    output_keys: List[str] = field(default_factory=list)
    pipeline: Optional[PipelineResult] = None


def parse_trigger(event: Mapping[str, Any]) -> TriggerRecord:
    """Extract the first object-created record, URL-decoding its key."""
    records = event.get("Records") if isinstance(event, Mapping) else None
    if not isinstance(records, list) or not records:
        raise InvalidTriggerError("event carries no Records")
    if len(records) > 1:
        logger.warning(
            "notification batch holds %d records; only the first is processed, %d not handled",
            len(records),
            len(records) - 1,
        )

    s3_info = records[0].get("s3") if isinstance(records[0], Mapping) else None
    if not isinstance(s3_info, Mapping):
        raise InvalidTriggerError("record is missing its s3 section")
    bucket_info = s3_info.get("bucket")
    object_info = s3_info.get("object")
    if not isinstance(bucket_info, Mapping) or not isinstance(object_info, Mapping):
        raise InvalidTriggerError("record requires s3.bucket and s3.object sections")
    bucket = bucket_info.get("name")
    raw_key = object_info.get("key")
    if not bucket or not raw_key:
        raise InvalidTriggerError("record requires s3.bucket.name and s3.object.key")

    return TriggerRecord(bucket=str(bucket), key=unquote_plus(str(raw_key)))


def source_format_for(key: str) -> str:
    for suffix, source_format in _EXTENSION_FORMATS:
        if key.endswith(suffix):
            return source_format
    raise UnsupportedFormatError(f"Unsupported file type: {key}")


def base_name_for(key: str) -> str:
    # Cut at the first dot: "report.v2.csv" -> "report".
    return key.split("/")[-1].split(".")[0]


def output_key_for(base_name: str, artifact: OutputArtifact, prefix: str = DEFAULT_SUMMARY_PREFIX) -> str:
    return f"{prefix}/{base_name}.{artifact.extension}"


class SummaryOrchestrator:
    def __init__(
        self,
        store: ObjectStore,
        generator: TextGenerator,
        output_bucket: str,
        *,
        prefix: str = DEFAULT_SUMMARY_PREFIX,
        on_phase: Optional[PhaseCallback] = None,
    ) -> None:
        self.store = store
        self.generator = generator
        self.output_bucket = output_bucket
        self.prefix = prefix
        self.on_phase = on_phase

    def process(self, record: TriggerRecord) -> InvocationResult:
        source_format = source_format_for(record.key)
        base_name = base_name_for(record.key)

        body = self.store.get(record.bucket, record.key)
        logger.info("fetched s3://%s/%s (%d bytes)", record.bucket, record.key, len(body))

        result = run_pipeline(
            {"bucket": record.bucket, "key": record.key},
            body,
            source_format=source_format,
            generator=self.generator,
            on_phase=self.on_phase,
        )
        logger.info(
            "profiled %d rows, %d numeric columns", result.profile.row_count, len(result.profile.numeric_cols)
        )

        invocation = InvocationResult(source=record, output_bucket=self.output_bucket, pipeline=result)
        for artifact in result.artifacts:
            out_key = output_key_for(base_name, artifact, self.prefix)
            self.store.put(self.output_bucket, out_key, artifact.payload, artifact.content_type)
            invocation.output_keys.append(out_key)
            logger.info("saved %s to %s", out_key, self.output_bucket)
        return invocation
