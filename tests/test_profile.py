import math

import pytest

from services.workers.summary.core.types import ColumnStat, DatasetProfile
from services.workers.summary.core.utils import parse_number
from services.workers.summary.nodes.profile import build_profile


def test_empty_rows_give_empty_profile():
    profile = build_profile([])
    assert profile == DatasetProfile(row_count=0, numeric_cols={})
    assert profile.to_dict() == {"rowCount": 0, "numericCols": {}}


def test_row_count_matches_input_length():
    rows = [{"a": str(i), "b": "text"} for i in range(7)]
    assert build_profile(rows).row_count == 7


def test_basic_aggregates():
    rows = [{"n": "2"}, {"n": "4"}, {"n": "6"}]
    stat = build_profile(rows).numeric_cols["n"]
    assert stat == ColumnStat(count=3, sum=12.0, avg=4.0, min=2.0, max=6.0)


def test_unparseable_values_are_skipped_not_counted():
    rows = [{"amt": "10"}, {"amt": "20"}, {"amt": "x"}]
    profile = build_profile(rows)
    assert profile.to_dict() == {
        "rowCount": 3,
        "numericCols": {"amt": {"count": 2, "sum": 30.0, "avg": 15.0, "min": 10.0, "max": 20.0}},
    }


def test_all_text_column_is_absent():
    rows = [{"name": "ann", "score": "1"}, {"name": "bob", "score": "2"}]
    profile = build_profile(rows)
    assert "name" not in profile.numeric_cols
    assert list(profile.numeric_cols) == ["score"]


def test_columns_come_from_first_row_in_order():
    rows = [
        {"z": "1", "a": "2"},
        {"z": "3", "a": "4", "late": "99"},
        {"a": "6"},
    ]
    profile = build_profile(rows)
    assert list(profile.numeric_cols) == ["z", "a"]
    assert profile.numeric_cols["z"].count == 2
    assert profile.numeric_cols["a"].count == 3
    assert profile.row_count == 3


def test_non_finite_text_is_discarded():
    rows = [{"v": "inf"}, {"v": "NaN"}, {"v": "1e999"}, {"v": "-5"}]
    stat = build_profile(rows).numeric_cols["v"]
    assert stat.count == 1
    assert stat.min == stat.max == -5.0


def test_min_max_with_negatives_and_exponents():
    rows = [{"v": " -1.5 "}, {"v": "2e2"}, {"v": ".25"}]
    stat = build_profile(rows).numeric_cols["v"]
    assert stat.min == -1.5
    assert stat.max == 200.0
    assert math.isclose(stat.avg, (200.0 - 1.5 + 0.25) / 3)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3.0),
        (" 3.5 ", 3.5),
        ("-1e3", -1000.0),
        ("+.5", 0.5),
        ("5.", 5.0),
        ("1E-2", 0.01),
        (7, 7.0),
        (2.5, 2.5),
    ],
)
def test_parse_number_accepts_decimal_text(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "abc", "10abc", "1_000", "0x10", "inf", "-Infinity", "nan", "1e999", "1,5", None, True, float("nan")],
)
def test_parse_number_rejects(raw):
    assert parse_number(raw) is None


def test_overflowing_sum_is_dropped_but_average_stays_finite():
    stat = build_profile([{"v": "1e308"}, {"v": "1e308"}]).numeric_cols["v"]
    assert stat.count == 2
    assert stat.sum is None
    assert stat.avg == 1e308
    assert stat.min == stat.max == 1e308
