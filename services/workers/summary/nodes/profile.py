from __future__ import annotations
from typing import Any, Dict, MutableMapping, Sequence

from ..core.state import _with_phase, _emit_callback
from ..core.types import ColumnStat, DatasetProfile, Row, RunningTotals
from ..core.utils import parse_number


def build_profile(rows: Sequence[Row]) -> DatasetProfile:
    """Count rows and aggregate every column that holds at least one number.

    Columns come from the first row, in its order. A value that is missing
    from a later row, or does not parse as a finite number, is skipped for
    that column without affecting the row count.
    """
    if not rows:
        return DatasetProfile(row_count=0, numeric_cols={})

    numeric_cols: Dict[str, ColumnStat] = {}
    for name in rows[0].keys():
        totals = RunningTotals()
        for row in rows:
            number = parse_number(row.get(name))
            if number is not None:
                totals.update(number)
        stat = totals.to_column_stat()
        if stat is not None:
            numeric_cols[name] = stat

    return DatasetProfile(row_count=len(rows), numeric_cols=numeric_cols)


def profile_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    profile = build_profile(state.get("rows") or [])
    payload = profile.to_dict()
    update = _with_phase("profile", payload, dataset_profile=profile)
    _emit_callback(state, "profile", payload)
    return update
