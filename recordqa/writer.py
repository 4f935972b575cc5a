"""
Streaming writer for the per-file detail report.

The report is one JSON array that may hold far more entries than fit in
memory, so elements are appended as they arrive:

    [                     <- open()
      {...},              <- write() batch 1
      {...}               <- write() batch 2
    ]                     <- close()

The writer tracks whether any element has been emitted; a comma is written
only between two elements, so batches with nothing to write leave the file
untouched and an empty report is exactly "[\\n]".
"""
from __future__ import annotations
import json, textwrap
from pathlib import Path
from typing import IO, Any, Iterable, Optional

from .errors import OutputError

_INDENT = "  "


class JsonArrayWriter:
    def __init__(self, path: Path):
        self.path = Path(path)
        self.count = 0
        self._fh: Optional[IO[str]] = None

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self) -> "JsonArrayWriter":
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8")
            self._fh.write("[")
        except OSError as e:
            raise OutputError(f"cannot open {self.path}: {e}") from e
        self.count = 0
        return self

    def write(self, items: Iterable[Any]) -> int:
        """Append items as array elements; returns how many were written."""
        if self._fh is None:
            raise OutputError(f"{self.path} is not open for writing")
        written = 0
        try:
            for item in items:
                encoded = textwrap.indent(json.dumps(item, ensure_ascii=False, indent=2, allow_nan=False), _INDENT)
                if self.count > 0:
                    self._fh.write(",")
                self._fh.write("\n" + encoded)
                self.count += 1
                written += 1
            self._fh.flush()
        except ValueError as e:
            # NaN / Infinity have no JSON form
            raise OutputError(f"cannot encode entry for {self.path}: {e}") from e
        except OSError as e:
            raise OutputError(f"cannot write {self.path}: {e}") from e
        return written

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.write("\n]")
            self._fh.close()
        except OSError as e:
            raise OutputError(f"cannot close {self.path}: {e}") from e
        finally:
            self._fh = None

    def abort(self) -> None:
        """Release the handle without completing the array."""
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "JsonArrayWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()
