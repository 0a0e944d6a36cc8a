"""Lambda that summarizes tabular uploads as soon as they land in S3.

Triggered by an S3 object-created notification. Writes a narrative, a JSON
insight document and a flattened statistics CSV under ``summaries/`` in the
output bucket.
"""

import json
from typing import Any, Dict, Mapping

import boto3
from openai import OpenAI

from services.common.config import Settings
from services.common.generation import OpenAITextGenerator
from services.common.storage import S3ObjectStore
from services.workers.summary.orchestrator import SummaryOrchestrator, parse_trigger

SETTINGS = Settings.from_env()
OUTPUT_BUCKET = SETTINGS.output_bucket
INPUT_BUCKET = SETTINGS.input_bucket

s3 = boto3.client("s3", region_name=SETTINGS.region)
openai_client = OpenAI(api_key=SETTINGS.openai_api_key)

SUCCESS_BODY = "Summaries generated successfully"


def _default_callback(key: str):
    def _callback(phase: str, payload: Mapping[str, Any], index: int, total: int) -> None:
        progress = int(((index + 1) / total) * 100)
        print(f"[SummarizerFn] {key}: phase {phase} done ({progress}%)")

    return _callback


def _build_orchestrator(key: str) -> SummaryOrchestrator:
    return SummaryOrchestrator(
        S3ObjectStore(s3),
        OpenAITextGenerator(openai_client, model=SETTINGS.openai_model),
        OUTPUT_BUCKET,
        prefix=SETTINGS.summary_prefix,
        on_phase=_default_callback(key),
    )


def handler(event: Dict[str, Any], _context) -> Dict[str, Any]:
    print(f"[SummarizerFn] Event received: {json.dumps(event, default=str)}")

    try:
        record = parse_trigger(event)
        print(f"[SummarizerFn] File received: {record.key} from {record.bucket}")
        if INPUT_BUCKET and record.bucket != INPUT_BUCKET:
            print(f"[SummarizerFn] Warning: {record.bucket} is not the configured input bucket {INPUT_BUCKET}")

        result = _build_orchestrator(record.key).process(record)
    except Exception as e:
        print(f"[SummarizerFn] ERROR: {type(e).__name__}: {e}")
        raise

    for key in result.output_keys:
        print(f"[SummarizerFn] Saved {key} to {OUTPUT_BUCKET}")

    return {"statusCode": 200, "body": SUCCESS_BODY, "outputs": list(result.output_keys)}
