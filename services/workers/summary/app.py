from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from langgraph.graph import END, START, StateGraph

from .nodes import (
    decode_node, profile_node, narrative_summary_node, structured_insight_node,
    export_table_node, finalize_node,
)
from .nodes.summary import TextGenerator
from .core.state import PhaseCallback, SummaryState
from .core.types import BinaryInput, DatasetProfile, PipelineResult
from .core.utils import _ensure_bytes

_ARTIFACT_BRANCHES = ["narrative_summary", "structured_insight", "export_table"]


def build_graph():
    g = StateGraph(SummaryState)
    g.add_node("decode", decode_node)
    g.add_node("profile", profile_node)
    g.add_node("narrative_summary", narrative_summary_node)
    g.add_node("structured_insight", structured_insight_node)
    g.add_node("export_table", export_table_node)
    g.add_node("finalize", finalize_node)

    g.add_edge(START, "decode")
    g.add_edge("decode", "profile")
    # the three artifacts only share the profile, so they fan out and join
    for branch in _ARTIFACT_BRANCHES:
        g.add_edge("profile", branch)
    g.add_edge(_ARTIFACT_BRANCHES, "finalize")
    g.add_edge("finalize", END)
    return g.compile()


PIPELINE = build_graph()


def run_pipeline(
    source: Mapping[str, Any],
    body: BinaryInput,
    *,
    source_format: str,
    generator: TextGenerator,
    on_phase: Optional[PhaseCallback] = None,
) -> PipelineResult:
    """Decode, profile and derive the three summary artifacts for one payload."""
    initial_state: Dict[str, Any] = {
        "source": dict(source),
        "source_format": source_format,
        "raw_input": _ensure_bytes(body),
        "phase_outputs": {},
        "generator": generator,
        "callback": on_phase,
    }

    final_state = PIPELINE.invoke(initial_state)

    profile: DatasetProfile = final_state["dataset_profile"]
    return PipelineResult(
        rows=profile.row_count,
        profile=profile,
        artifacts=list(final_state.get("artifacts") or []),
        phases=dict(final_state.get("phase_outputs") or {}),
    )
