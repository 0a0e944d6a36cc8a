# tests/test_pipeline_smoke.py
import io
import json
import threading

import pytest

from services.common.errors import SummaryGenerationError, GenerationServiceError, UnsupportedFormatError
from services.workers.summary import run_pipeline
from services.workers.summary.core.constants import PHASE_ORDER

from tests.utils.llm import INSIGHT_REPLY, FakeTextGenerator


CSV_SMALL = (
    b"sepal_length,sepal_width,petal_length,petal_width,species\n"
    b"5.1,3.5,1.4,0.2,setosa\n"
    b"4.9,3.0,1.4,0.2,setosa\n"
)

ARTIFACT_KINDS = ["narrative", "structuredInsight", "statsTable"]


def _run(body=CSV_SMALL, source_format="delimited", generator=None, on_phase=None):
    return run_pipeline(
        {"bucket": "incoming", "key": "iris.csv"},
        io.BytesIO(body),
        source_format=source_format,
        generator=generator or FakeTextGenerator(),
        on_phase=on_phase,
    )


def test_pipeline_produces_profile_and_artifacts():
    res = _run()

    assert set(res.phases) == set(PHASE_ORDER)
    assert res.phases["decode"]["rows"] == 2
    assert res.phases["decode"]["columns"][0] == "sepal_length"
    assert res.phases["decode"]["sourceFormat"] == "delimited"

    assert res.rows == 2
    assert list(res.profile.numeric_cols) == ["sepal_length", "sepal_width", "petal_length", "petal_width"]
    assert res.profile.numeric_cols["sepal_length"].max == 5.1

    assert [artifact.kind for artifact in res.artifacts] == ARTIFACT_KINDS
    assert [artifact.extension for artifact in res.artifacts] == ["txt", "json", "csv"]
    assert json.loads(res.artifacts[1].payload) == json.loads(INSIGHT_REPLY)
    assert res.artifacts[2].payload.splitlines()[1] == "__ROWCOUNT__,2,,,,"


def test_phase_callback_reports_every_phase():
    seen = []
    lock = threading.Lock()

    def _callback(phase, payload, index, total):
        with lock:
            seen.append((phase, index, total))

    _run(on_phase=_callback)

    assert {phase for phase, _, _ in seen} == set(PHASE_ORDER)
    assert all(total == len(PHASE_ORDER) for _, _, total in seen)
    assert seen[0][0] == "decode"
    assert seen[-1][0] == "finalize"


def test_generation_failure_aborts_pipeline():
    generator = FakeTextGenerator(error=GenerationServiceError("401 unauthorized"))
    with pytest.raises(SummaryGenerationError):
        _run(generator=generator)


def test_unknown_format_aborts_pipeline():
    with pytest.raises(UnsupportedFormatError):
        _run(source_format="pdf")
