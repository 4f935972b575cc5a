"""
Per-file error statistics.

Counting happens in two phases: while a file streams, `ErrorStats.record`
only creates or increments entries; once the file's record total is known,
`ErrorStats.finalize` stamps it on every entry. The percentage is derived
from the latest count and total whenever it is read, so it cannot drift.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ErrorStat:
    field: str
    error_type: str
    error_description: str
    error_count: int = 0
    record_count: int = 0

    @property
    def error_percent(self) -> float:
        if self.record_count == 0:
            return 0.0
        return self.error_count / self.record_count * 100.0

    def inc(self, n: int = 1) -> None:
        self.error_count += n

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "error_type": self.error_type,
            "error_description": self.error_description,
            "error_count": self.error_count,
            "record_count": self.record_count,
            "error_percent": self.error_percent,
        }


def stat_key(field: str, error_type: str) -> str:
    return f"{field}.{error_type}"


class ErrorStats(Dict[str, ErrorStat]):
    """Mapping of "<field>.<error_type>" to its ErrorStat, scoped to one input file."""

    def record(self, field: str, error_type: str, description: str) -> ErrorStat:
        key = stat_key(field, error_type)
        es = self.get(key)
        if es is None:
            # description comes from the first occurrence only
            es = ErrorStat(field=field, error_type=error_type, error_description=description, error_count=1)
            self[key] = es
        else:
            es.inc()
        return es

    def finalize(self, total_records: int) -> None:
        for es in self.values():
            es.record_count = total_records

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {k: self[k].to_dict() for k in sorted(self)}
