from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Dict, IO, List, Mapping, Optional, Union

from .constants import ARTIFACT_FORMATS

# type aliases used across the code
BinaryInput = Union[bytes, bytearray, IO[bytes]]
Row = Mapping[str, Any]


@dataclass(frozen=True)
class ColumnStat:
    count: int
    sum: Optional[float]
    avg: float
    min: float
    max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "sum": self.sum,
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class RunningTotals:
    count: int = 0
    total: float = 0.0
    mean: float = 0.0
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def update(self, value: float) -> None:
        self.count += 1
        self.total += value
        # scaled update keeps the mean finite after the total overflows
        self.mean += value / self.count - self.mean / self.count
        self.min_value = value if self.min_value is None else min(self.min_value, value)
        self.max_value = value if self.max_value is None else max(self.max_value, value)

    def to_column_stat(self) -> Optional[ColumnStat]:
        if self.count == 0 or self.min_value is None or self.max_value is None:
            return None
        if not math.isfinite(self.total):
            # sum of finite values overflowed; report no sum rather than inf
            return ColumnStat(count=self.count, sum=None, avg=self.mean, min=self.min_value, max=self.max_value)
        return ColumnStat(
            count=self.count,
            sum=self.total,
            avg=self.total / self.count,
            min=self.min_value,
            max=self.max_value,
        )


@dataclass(frozen=True)
class DatasetProfile:
    row_count: int
    numeric_cols: Dict[str, ColumnStat] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rowCount": self.row_count,
            "numericCols": {name: stat.to_dict() for name, stat in self.numeric_cols.items()},
        }


@dataclass(frozen=True)
class OutputArtifact:
    kind: str
    payload: str

    @property
    def extension(self) -> str:
        return ARTIFACT_FORMATS[self.kind][0]

    @property
    def content_type(self) -> str:
        return ARTIFACT_FORMATS[self.kind][1]


@dataclass
class PipelineResult:
    rows: int
    profile: DatasetProfile
    artifacts: List[OutputArtifact]
    phases: Dict[str, Dict[str, Any]]
