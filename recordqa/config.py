from __future__ import annotations
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List

DEFAULT_OUTPUT_DIR = "reports"
DEFAULT_SUMMARY_FILE = "summary"
DEFAULT_BATCH_SIZE = 10000
UNLIMITED = -1

@dataclass
class ValidateConfig:
    inputs: List[str] = field(default_factory=list)
    schemas: List[str] = field(default_factory=list)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    summary_file: str = DEFAULT_SUMMARY_FILE
    batch_size: int = DEFAULT_BATCH_SIZE
    max_errors: int = UNLIMITED
    workflow: str = ""
    include_valid: bool = False
    verbose: bool = False

    @staticmethod
    def from_env(**overrides: Any) -> "ValidateConfig":
        """Build a config from RECORDQA_* variables; non-None overrides win."""
        env = {
            "output_dir": os.environ.get("RECORDQA_OUTPUT_DIR"),
            "summary_file": os.environ.get("RECORDQA_SUMMARY_FILE"),
            "batch_size": os.environ.get("RECORDQA_BATCH_SIZE"),
            "max_errors": os.environ.get("RECORDQA_MAX_ERRORS"),
            "workflow": os.environ.get("RECORDQA_WORKFLOW"),
        }
        values = {k: v for k, v in env.items() if v is not None}
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(ValidateConfig)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"unknown config option(s): {sorted(unknown)}")

        if "output_dir" in values:
            values["output_dir"] = Path(values["output_dir"])
        for key in ("batch_size", "max_errors"):
            if key in values:
                try:
                    values[key] = int(values[key])
                except (TypeError, ValueError):
                    raise ValueError(f"{key} must be an integer, got {values[key]!r}")
        return ValidateConfig(**values)

    def validate(self) -> None:
        if not self.schemas:
            raise ValueError("at least one schema file is required")
        if self.batch_size < 1:
            raise ValueError("batch size must be at least 1")
        if self.max_errors < UNLIMITED:
            raise ValueError("max errors must be -1 (no limit) or a non-negative number")
        if not self.summary_file:
            raise ValueError("summary file name must not be empty")

    @property
    def details_dir(self) -> Path:
        return self.output_dir / "details"

    @property
    def summary_dir(self) -> Path:
        return self.output_dir / "summary"

    @property
    def summary_path(self) -> Path:
        return self.output_dir / f"{self.summary_file}.json"

    def detail_path(self, input_file: Path) -> Path:
        return self.details_dir / f"{Path(input_file).name}.json"

    def file_summary_path(self, input_file: Path) -> Path:
        return self.summary_dir / f"{Path(input_file).name}.json"
