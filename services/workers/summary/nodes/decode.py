from __future__ import annotations
from typing import Any, Dict, MutableMapping

from ..core.state import _with_phase, _emit_callback
from ..io.decode import decode_rows


def decode_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    data_bytes: bytes = state.get("raw_input") or b""
    source_format = state["source_format"]

    rows = decode_rows(source_format, data_bytes)
    columns = list(rows[0].keys()) if rows else []

    payload = {
        "rows": len(rows),
        "columns": columns,
        "bytesRead": len(data_bytes),
        "sourceFormat": source_format,
    }
    update = _with_phase("decode", payload, rows=rows, raw_input=None)
    _emit_callback(state, "decode", payload)
    return update
