from __future__ import annotations
import csv
import io
import numbers
import zipfile
from typing import Any, Dict, Iterable, List, Sequence, Set

import pandas as pd

from services.common.errors import DecodeError, UnsupportedFormatError

from ..core.constants import FORMAT_DELIMITED, FORMAT_SPREADSHEET
from ..core.utils import format_number


class _HeaderNormalizer:
    """Normalizes and deduplicates column headers for tabular inputs."""

    def __init__(self) -> None:
        self._base_counts: Dict[str, int] = {}
        self._used: Set[str] = set()

    def _clean(self, raw: Any, index: int) -> str:
        text = "" if raw is None else _stringify_cell(raw)
        text = text.lstrip("\ufeff").strip()
        if not text:
            return f"column_{index + 1}"
        return text

    def _allocate(self, base: str) -> str:
        count = self._base_counts.get(base, 0)
        candidate = base if count == 0 else f"{base}_{count + 1}"
        while candidate in self._used:
            count += 1
            candidate = f"{base}_{count + 1}"
        self._base_counts[base] = count + 1
        self._used.add(candidate)
        return candidate

    def normalize(self, fieldnames: Sequence[Any]) -> List[str]:
        return [self._allocate(self._clean(name, index)) for index, name in enumerate(fieldnames)]

    def generate_default(self, index: int) -> str:
        return self._allocate(f"column_{index + 1}")


def _stringify_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        number = float(value)
        if number != number:  # NaN marks an empty cell
            return ""
        return format_number(number)
    if pd.isna(value):
        return ""
    return str(value)


def _is_blank(cells: Sequence[str]) -> bool:
    return all(cell.strip() == "" for cell in cells)


def _rows_from_records(records: Iterable[Sequence[Any]]) -> List[Dict[str, str]]:
    """First record is the header; the rest become rows keyed by it."""
    iterator = iter(records)
    try:
        first = next(iterator)
    except StopIteration:
        return []

    normalizer = _HeaderNormalizer()
    headers = normalizer.normalize(first)
    rows: List[Dict[str, str]] = []

    for raw in iterator:
        cells = [_stringify_cell(cell) for cell in raw]
        if not cells or _is_blank(cells):
            continue
        if len(cells) < len(headers):
            cells.extend([""] * (len(headers) - len(cells)))
        while len(headers) < len(cells):
            headers.append(normalizer.generate_default(len(headers)))
        rows.append({headers[index]: cells[index] for index in range(len(headers))})
    return rows


def _decode_delimited(data: bytes, delimiter: str = ",") -> List[Dict[str, str]]:
    text = data.decode("utf-8", errors="replace")
    try:
        with io.StringIO(text, newline="") as stream:
            return _rows_from_records(csv.reader(stream, delimiter=delimiter))
    except csv.Error as exc:
        raise DecodeError(f"malformed delimited payload: {exc}") from exc


def _trim_to_used_range(frame: pd.DataFrame) -> pd.DataFrame:
    """Drop leading blank rows and columns so the header is the first filled row."""
    filled = frame.apply(lambda column: column.map(lambda cell: _stringify_cell(cell).strip() != ""))
    used_rows = filled.any(axis=1).to_numpy()
    if not used_rows.any():
        return frame.iloc[0:0, 0:0]
    used_columns = filled.any(axis=0).to_numpy()
    return frame.iloc[int(used_rows.argmax()) :, int(used_columns.argmax()) :]


def _decode_spreadsheet(data: bytes) -> List[Dict[str, str]]:
    try:
        with io.BytesIO(data) as stream:
            frame = pd.read_excel(stream, sheet_name=0, header=None, dtype=object, engine="openpyxl")
    except (zipfile.BadZipFile, ValueError, KeyError, OSError) as exc:
        raise DecodeError(f"unreadable spreadsheet payload: {exc}") from exc

    if frame is None or frame.empty:
        return []
    frame = _trim_to_used_range(frame)
    if frame.empty:
        return []
    return _rows_from_records(frame.itertuples(index=False, name=None))


def decode_rows(source_format: str, payload: bytes) -> List[Dict[str, str]]:
    """Decode ``payload`` into header-keyed rows of cell text."""
    if source_format == FORMAT_DELIMITED:
        return _decode_delimited(payload)
    if source_format == FORMAT_SPREADSHEET:
        return _decode_spreadsheet(payload)
    raise UnsupportedFormatError(f"Unsupported source format: {source_format!r}")
