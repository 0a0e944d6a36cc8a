"""Tabular summarizer pipeline: decode, profile and derive summary artifacts."""
from .app import build_graph, run_pipeline
from .core.types import ColumnStat, DatasetProfile, OutputArtifact, PipelineResult
from .io.decode import decode_rows
from .nodes.export import export_table
from .nodes.profile import build_profile
from .nodes.summary import narrative_summary, structured_insight
from .orchestrator import (
    SummaryOrchestrator,
    TriggerRecord,
    base_name_for,
    output_key_for,
    parse_trigger,
    source_format_for,
)

__all__ = [
    "build_graph",
    "run_pipeline",
    "ColumnStat",
    "DatasetProfile",
    "OutputArtifact",
    "PipelineResult",
    "decode_rows",
    "export_table",
    "build_profile",
    "narrative_summary",
    "structured_insight",
    "SummaryOrchestrator",
    "TriggerRecord",
    "base_name_for",
    "output_key_for",
    "parse_trigger",
    "source_format_for",
]
