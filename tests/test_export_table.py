import csv
import io

from services.workers.summary.core.types import ColumnStat, DatasetProfile
from services.workers.summary.nodes.export import export_table
from services.workers.summary.nodes.profile import build_profile


def _parse(text: str):
    return list(csv.reader(io.StringIO(text)))


def test_scenario_amt_column():
    profile = build_profile([{"amt": "10"}, {"amt": "20"}, {"amt": "x"}])
    table = export_table(profile)
    assert table == (
        "Column,Count,Sum,Avg,Min,Max\r\n"
        "__ROWCOUNT__,3,,,,\r\n"
        "amt,2,30,15,10,20\r\n"
    )


def test_one_row_per_numeric_column_plus_sentinel():
    profile = DatasetProfile(
        row_count=12,
        numeric_cols={
            "b": ColumnStat(count=2, sum=3.5, avg=1.75, min=1.0, max=2.5),
            "a": ColumnStat(count=1, sum=-4.0, avg=-4.0, min=-4.0, max=-4.0),
        },
    )
    header, *rows = _parse(export_table(profile))
    assert header == ["Column", "Count", "Sum", "Avg", "Min", "Max"]
    assert len(rows) == 1 + len(profile.numeric_cols)
    assert rows[0][0] == "__ROWCOUNT__"
    assert int(rows[0][1]) == profile.row_count
    assert rows[1] == ["b", "2", "3.5", "1.75", "1", "2.5"]
    assert rows[2] == ["a", "1", "-4", "-4", "-4", "-4"]


def test_empty_profile_keeps_sentinel():
    rows = _parse(export_table(DatasetProfile(row_count=0)))
    assert rows == [["Column", "Count", "Sum", "Avg", "Min", "Max"], ["__ROWCOUNT__", "0", "", "", "", ""]]


def test_column_names_are_quoted():
    profile = build_profile([{'total, "net"': "1"}])
    table = export_table(profile)
    assert '"total, ""net"""' in table
    assert _parse(table)[2][0] == 'total, "net"'


def test_export_is_deterministic():
    rows = [{"x": str(i * 0.1), "y": str(i)} for i in range(50)]
    assert export_table(build_profile(rows)) == export_table(build_profile(list(rows)))


def test_overflowing_sum_exports_empty_cell():
    profile = build_profile([{"v": "1e308"}, {"v": "1e308"}])
    assert _parse(export_table(profile))[2] == ["v", "2", "", "1e+308", "1e+308", "1e+308"]
