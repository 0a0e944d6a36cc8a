from typing import Annotated, Any, Callable, Dict, List, Mapping, Optional, TypedDict

from .constants import PHASE_ORDER
from .types import DatasetProfile, OutputArtifact, Row

PhaseCallback = Callable[[str, Mapping[str, Any], int, int], None]


def _merge_phase_outputs(left: Optional[dict], right: Optional[dict]) -> dict:
    merged = dict(left or {})
    merged.update(right or {})
    return merged


class SummaryState(TypedDict, total=False):
    source: Dict[str, Any]
    source_format: str
    raw_input: Optional[bytes]
    rows: List[Row]
    dataset_profile: DatasetProfile
    narrative_text: str
    insight_json: str
    stats_csv: str
    artifacts: List[OutputArtifact]
    # parallel branches each report their own phase, so updates are merged
    phase_outputs: Annotated[dict, _merge_phase_outputs]
    generator: Any
    callback: Optional[PhaseCallback]


def _with_phase(phase: str, payload: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    update: Dict[str, Any] = {"phase_outputs": {phase: payload}}
    update.update(extra)
    return update


def _emit_callback(state: Mapping[str, Any], phase: str, payload: Mapping[str, Any]) -> None:
    callback = state.get("callback")
    if not callable(callback):
        return
    index = PHASE_ORDER.index(phase)
    callback(phase, payload, index, len(PHASE_ORDER))
