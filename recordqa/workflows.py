"""
Optional per-record and per-file hooks.

A workflow is picked by identifier:
  ""                  -> NullWorkflow (no hooks)
  a registered name   -> see `register_workflow`
  path/to/file.py     -> module defining `exec_record(record, vars)` and/or
                         `exec_summary(vars, err_stats)`

Hooks may mutate what they are given. Any exception they raise aborts the
run as a WorkflowError.
"""
from __future__ import annotations
import importlib.util
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Protocol

from .errors import WorkflowError
from .records import ValidatedRecord
from .stats import ErrorStats

Vars = Dict[str, Any]


class Workflow(Protocol):
    name: str

    def exec_record(self, record: ValidatedRecord, vars: Vars) -> None: ...

    def exec_summary(self, vars: Vars, err_stats: ErrorStats) -> None: ...


class NullWorkflow:
    name = ""

    def exec_record(self, record: ValidatedRecord, vars: Vars) -> None:
        return None

    def exec_summary(self, vars: Vars, err_stats: ErrorStats) -> None:
        return None


class FunctionWorkflow:
    """Wraps plain hook functions; a missing hook is a no-op."""

    def __init__(self, name: str,
                 exec_record: Optional[Callable[[ValidatedRecord, Vars], Any]] = None,
                 exec_summary: Optional[Callable[[Vars, ErrorStats], Any]] = None):
        self.name = name
        self._record = exec_record
        self._summary = exec_summary

    def exec_record(self, record: ValidatedRecord, vars: Vars) -> None:
        if self._record is None:
            return
        try:
            self._record(record, vars)
        except Exception as e:
            raise WorkflowError(f"workflow {self.name!r} failed on record: {e}") from e

    def exec_summary(self, vars: Vars, err_stats: ErrorStats) -> None:
        if self._summary is None:
            return
        try:
            self._summary(vars, err_stats)
        except Exception as e:
            raise WorkflowError(f"workflow {self.name!r} failed on summary: {e}") from e


_REGISTRY: Dict[str, Callable[[], Workflow]] = {}


def register_workflow(name: str):
    """Decorator registering a zero-argument workflow factory under `name`."""
    def deco(factory: Callable[[], Workflow]):
        _REGISTRY[name] = factory
        return factory
    return deco


def registered_workflows() -> list:
    return sorted(_REGISTRY)


def _load_module(path: Path) -> ModuleType:
    """Dynamically load a Python module from a file path"""
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if not spec or not spec.loader:
        raise WorkflowError(f"could not load workflow module from {path}")
    mod = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(mod)
    except Exception as e:
        raise WorkflowError(f"workflow module {path} failed to import: {e}") from e
    return mod


def get_workflow(identifier: Optional[str]) -> Workflow:
    if not identifier:
        return NullWorkflow()
    if identifier in _REGISTRY:
        return _REGISTRY[identifier]()

    path = Path(identifier)
    if path.suffix == ".py":
        if not path.is_file():
            raise WorkflowError(f"workflow file not found: {path}")
        mod = _load_module(path)
        rec_fn = getattr(mod, "exec_record", None)
        sum_fn = getattr(mod, "exec_summary", None)
        if rec_fn is None and sum_fn is None:
            raise WorkflowError(f"{path} defines neither exec_record nor exec_summary")
        return FunctionWorkflow(path.stem, rec_fn, sum_fn)

    raise WorkflowError(f"unknown workflow: {identifier!r}")
