from __future__ import annotations
from typing import Any, Dict, MutableMapping, Protocol, Sequence
import json
import logging

from services.common.errors import GenerationServiceError, SummaryGenerationError
from services.common.generation import ResponseMode

from ..core.constants import _NARRATIVE_PROMPT_TEMPLATE_NAME, _STRUCTURED_PROMPT_TEMPLATE_NAME
from ..core.state import _with_phase, _emit_callback
from ..core.types import DatasetProfile, Row
from ..core.utils import _JINJA_ENV

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str, mode: ResponseMode = ...) -> str: ...


def _stats_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def render_narrative_prompt(profile: DatasetProfile) -> str:
    template = _JINJA_ENV.get_template(_NARRATIVE_PROMPT_TEMPLATE_NAME)
    return template.render(
        row_count=profile.row_count,
        numeric_cols_json=_stats_json(profile.to_dict()["numericCols"]),
    )


def render_structured_prompt(profile: DatasetProfile) -> str:
    template = _JINJA_ENV.get_template(_STRUCTURED_PROMPT_TEMPLATE_NAME)
    return template.render(profile_json=_stats_json(profile.to_dict()))


def _request(generator: TextGenerator, prompt: str, mode: ResponseMode, label: str) -> str:
    try:
        text = generator.generate(prompt, mode)
    except GenerationServiceError as exc:
        logger.error("%s generation failed: %s", label, exc)
        raise SummaryGenerationError(f"{label} generation failed: {exc}") from exc
    if text is None or not text.strip():
        raise SummaryGenerationError(f"{label} generation returned no content")
    logger.info("%s generated (%d characters)", label, len(text))
    return text.strip()


def narrative_summary(rows: Sequence[Row], profile: DatasetProfile, generator: TextGenerator) -> str:
    """Ask the generator for a plain-English analysis of ``profile``.

    Only the row count and column statistics are embedded in the prompt;
    ``rows`` themselves are not sent.
    """
    return _request(generator, render_narrative_prompt(profile), ResponseMode.FREE_TEXT, "narrative")


def structured_insight(profile: DatasetProfile, generator: TextGenerator) -> str:
    """Ask for a JSON insight document; the reply is passed through unvalidated."""
    return _request(generator, render_structured_prompt(profile), ResponseMode.JSON_OBJECT, "structured insight")


def narrative_summary_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    profile: DatasetProfile = state["dataset_profile"]
    text = narrative_summary(state.get("rows") or [], profile, state["generator"])
    payload = {"characters": len(text)}
    update = _with_phase("narrative_summary", payload, narrative_text=text)
    _emit_callback(state, "narrative_summary", payload)
    return update


def structured_insight_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    profile: DatasetProfile = state["dataset_profile"]
    text = structured_insight(profile, state["generator"])
    payload = {"characters": len(text)}
    update = _with_phase("structured_insight", payload, insight_json=text)
    _emit_callback(state, "structured_insight", payload)
    return update
