"""Validate bulk CSV/JSON records against JSON Schema and report per-field error statistics."""
from .config import ValidateConfig
from .errors import (
    OutputError,
    RecordQAError,
    RecordStreamError,
    SchemaMergeError,
    UnsupportedFileError,
    WorkflowError,
)
from .stats import ErrorStat, ErrorStats
from .validate import BatchValidator, run_validation

__version__ = "0.1.0"

__all__ = [
    "BatchValidator",
    "ErrorStat",
    "ErrorStats",
    "OutputError",
    "RecordQAError",
    "RecordStreamError",
    "SchemaMergeError",
    "UnsupportedFileError",
    "ValidateConfig",
    "WorkflowError",
    "run_validation",
]
