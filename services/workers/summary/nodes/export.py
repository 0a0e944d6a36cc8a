from __future__ import annotations
from typing import Any, Dict, List, MutableMapping
import csv
import io

from ..core.constants import ROWCOUNT_SENTINEL, STATS_TABLE_HEADERS
from ..core.state import _with_phase, _emit_callback
from ..core.types import DatasetProfile
from ..core.utils import format_number


def stats_table_rows(profile: DatasetProfile) -> List[Dict[str, str]]:
    rows: List[Dict[str, str]] = [
        {
            "Column": ROWCOUNT_SENTINEL,
            "Count": str(profile.row_count),
            "Sum": "",
            "Avg": "",
            "Min": "",
            "Max": "",
        }
    ]
    for name, stat in profile.numeric_cols.items():
        rows.append(
            {
                "Column": name,
                "Count": str(stat.count),
                "Sum": "" if stat.sum is None else format_number(stat.sum),
                "Avg": format_number(stat.avg),
                "Min": format_number(stat.min),
                "Max": format_number(stat.max),
            }
        )
    return rows


def export_table(profile: DatasetProfile) -> str:
    """Flatten ``profile`` into CSV text: sentinel row first, then one row per column."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=STATS_TABLE_HEADERS)
    writer.writeheader()
    for row in stats_table_rows(profile):
        writer.writerow(row)
    return output.getvalue()


def export_table_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    profile: DatasetProfile = state["dataset_profile"]
    table = export_table(profile)
    payload = {"rows": 1 + len(profile.numeric_cols), "headers": list(STATS_TABLE_HEADERS)}
    update = _with_phase("export_table", payload, stats_csv=table)
    _emit_callback(state, "export_table", payload)
    return update
