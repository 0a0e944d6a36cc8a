from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .generation import DEFAULT_MODEL


@dataclass(frozen=True)
class Settings:
    output_bucket: str
    input_bucket: Optional[str] = None
    region: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    summary_prefix: str = "summaries"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            output_bucket=env["OUTPUT_BUCKET"],
            input_bucket=env.get("INPUT_BUCKET") or None,
            region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or None,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            openai_model=env.get("OPENAI_MODEL") or DEFAULT_MODEL,
            summary_prefix=(env.get("SUMMARY_PREFIX") or "summaries").strip("/"),
        )
