from __future__ import annotations
from typing import Any, Dict, List, MutableMapping

from ..core.constants import ARTIFACT_NARRATIVE, ARTIFACT_STATS_TABLE, ARTIFACT_STRUCTURED_INSIGHT
from ..core.state import _with_phase, _emit_callback
from ..core.types import OutputArtifact


def finalize_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    """Join the three parallel branches into artifacts, in persist order."""
    artifacts: List[OutputArtifact] = [
        OutputArtifact(kind=ARTIFACT_NARRATIVE, payload=state["narrative_text"]),
        OutputArtifact(kind=ARTIFACT_STRUCTURED_INSIGHT, payload=state["insight_json"]),
        OutputArtifact(kind=ARTIFACT_STATS_TABLE, payload=state["stats_csv"]),
    ]
    payload = {
        "artifacts": [
            {"kind": artifact.kind, "extension": artifact.extension, "contentType": artifact.content_type}
            for artifact in artifacts
        ]
    }
    update = _with_phase("finalize", payload, artifacts=artifacts)
    _emit_callback(state, "finalize", payload)
    return update
