"""
Record stream readers for CSV and JSON input files.

Each reader decodes a file into `Record`s and hands them to a callback in
bounded batches, in file order.
"""
from __future__ import annotations
import csv, json, math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Tuple

from .errors import RecordStreamError, UnsupportedFileError

COLLECTION_FIELD = "_collection"


@dataclass
class SchemaError:
    field: str
    error_type: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "error_type": self.error_type, "description": self.description}


@dataclass
class Record:
    data: Dict[str, Any]
    collection: str = ""


@dataclass
class ValidatedRecord:
    data: Dict[str, Any]
    collection: str = ""
    errors: List[SchemaError] = field(default_factory=list)

    def payload(self, include_collection: bool) -> Dict[str, Any]:
        """Serializable record body, optionally tagged with its collection."""
        out = {k: v for k, v in self.data.items() if k != COLLECTION_FIELD}
        if include_collection and self.collection:
            out[COLLECTION_FIELD] = self.collection
        return out


BatchFn = Callable[[List[Record]], None]
ProcessFileFn = Callable[[Path, int, BatchFn], None]


def _finite_float(s: str) -> float:
    v = float(s)
    if math.isinf(v):
        raise ValueError(f"number out of range: {s}")
    return v


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number not allowed: {name}")


def loads_strict(s: str) -> Any:
    """json.loads that refuses NaN, Infinity and numbers overflowing to inf."""
    return json.loads(s, parse_float=_finite_float, parse_constant=_reject_constant)


def _csv_cell(raw: str) -> Any:
    """
    Decode a CSV cell that reads as JSON (number, boolean, null, object,
    array); anything else stays the raw string.

    The decoded value is what appears in detail output, so the round-trip
    is lossy: `1.50` becomes 1.5, `1E2` becomes 100.0 and a numeric SKU
    such as `12345` becomes an int (and fails a `type: string` schema).
    Leading-zero text like `01234` and non-finite numbers stay strings.
    """
    s = raw.strip()
    if not s:
        return raw
    if s[0] in "{[-0123456789" or s in ("true", "false", "null"):
        try:
            return loads_strict(s)
        except ValueError:
            return raw
    return raw


def _split_collection(data: Dict[str, Any], path: Path, where: str) -> Record:
    if not isinstance(data, dict):
        raise RecordStreamError(f"{path}{where}: expected a JSON object, got {type(data).__name__}")
    collection = data.pop(COLLECTION_FIELD, "")
    if collection is None:
        collection = ""
    return Record(data=data, collection=str(collection))


def iter_csv_records(path: Path) -> Iterator[Record]:
    with Path(path).open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            data: Dict[str, Any] = {}
            for k, v in row.items():
                if k is None:
                    raise RecordStreamError(f"{path}:{reader.line_num}: more cells than header columns")
                data[k] = _csv_cell(v) if v is not None else None
            yield _split_collection(data, path, f":{reader.line_num}")


def iter_json_records(path: Path) -> Iterator[Record]:
    try:
        doc = loads_strict(Path(path).read_text(encoding="utf-8"))
    except ValueError as e:
        raise RecordStreamError(f"{path}: invalid JSON: {e}") from e

    if isinstance(doc, list):
        for i, item in enumerate(doc):
            yield _split_collection(item, path, f"[{i}]")
    elif isinstance(doc, dict):
        for name, items in doc.items():
            if not isinstance(items, list):
                raise RecordStreamError(f"{path}: collection {name!r} must be an array of records")
            for i, item in enumerate(items):
                rec = _split_collection(item, path, f"[{name!r}][{i}]")
                rec.collection = name
                yield rec
    else:
        raise RecordStreamError(f"{path}: expected an array or an object of collections")


def _next_batch(records: Iterator[Record], batch_size: int, path: Path) -> List[Record]:
    batch: List[Record] = []
    try:
        for rec in records:
            batch.append(rec)
            if len(batch) >= batch_size:
                break
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise RecordStreamError(f"{path}: cannot read records: {e}") from e
    return batch


def _process(iter_fn: Callable[[Path], Iterator[Record]]) -> ProcessFileFn:
    def process(path: Path, batch_size: int, fn: BatchFn) -> None:
        if batch_size < 1:
            raise ValueError("batch size must be at least 1")
        records = iter_fn(path)
        while True:
            batch = _next_batch(records, batch_size, path)
            if not batch:
                return
            # errors raised by fn are not wrapped
            fn(batch)
    return process


process_csv_file = _process(iter_csv_records)
process_json_file = _process(iter_json_records)

_READERS: Dict[str, Tuple[ProcessFileFn, bool]] = {
    ".csv": (process_csv_file, False),
    ".json": (process_json_file, True),
}


def reader_for(path: Path) -> Tuple[ProcessFileFn, bool]:
    """Return (process_fn, include_collection) for a file, by extension."""
    ext = Path(path).suffix.lower()
    if ext not in _READERS:
        raise UnsupportedFileError(f"{path} is not a .csv or .json file")
    return _READERS[ext]


def as_schema_error(err: Any) -> SchemaError:
    """Accept SchemaError or a {field, error_type, description} mapping set by a workflow."""
    if isinstance(err, SchemaError):
        return err
    if isinstance(err, dict):
        return SchemaError(
            field=str(err.get("field", "")),
            error_type=str(err.get("error_type", "")),
            description=str(err.get("description", "")),
        )
    raise TypeError(f"unsupported error entry: {err!r}")


@dataclass(frozen=True)
class RecordWrapper:
    """One detail-report entry: a record's errors and its payload."""
    errors: List[SchemaError]
    record: Dict[str, Any]

    @staticmethod
    def wrap(rec: ValidatedRecord, include_collection: bool) -> "RecordWrapper":
        return RecordWrapper(
            errors=[as_schema_error(e) for e in rec.errors],
            record=rec.payload(include_collection),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": [e.to_dict() for e in self.errors], "record": self.record}
