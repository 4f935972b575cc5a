from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Iterable, List

from .logging import log

def ensure_dir(path: Path) -> None:
    """Ensure directory exists, creating parents if needed."""
    path.mkdir(parents=True, exist_ok=True)

def write_json(p: Path, obj: Any) -> None:
    """Write object to JSON file."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2, allow_nan=False), encoding="utf-8")

def _walk(directory: Path) -> List[Path]:
    out: List[Path] = []
    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            out.extend(_walk(child))
        else:
            out.append(child)
    return out

def resolve_inputs(paths: Iterable[str]) -> List[Path]:
    """Expand directories recursively and drop missing paths; order kept, duplicates removed."""
    files: List[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            files.extend(_walk(p))
            continue
        if not p.is_file():
            log().warning(f"file does not exist: {p}")
            continue
        log().debug(f"file exists: {p}")
        files.append(p)

    seen = set()
    unique: List[Path] = []
    for f in files:
        if f in seen:
            continue
        seen.add(f)
        unique.append(f)
    return unique
