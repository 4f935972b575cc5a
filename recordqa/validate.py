"""
Batch validation of record files against a merged JSON Schema.

For each input file, in order:

  OPENING      pick a reader by extension (unsupported -> skip), start the
               detail report and fresh per-file counters
  STREAMING    validate batch by batch; run the workflow record hook;
               count errors; append capped detail entries
  CLOSING      terminate the detail report's JSON array
  SUMMARIZING  run the workflow summary hook, stamp the record total on
               every stat, write the per-file summary
  DONE

Any RecordQAError other than UnsupportedFileError aborts the run; outputs
of files that already finished are left in place.
"""
from __future__ import annotations
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .config import UNLIMITED, ValidateConfig
from .engine import SchemaValidator
from .errors import OutputError, UnsupportedFileError, WorkflowError
from .io import ensure_dir, resolve_inputs, write_json
from .logging import ProgressTracker, log
from .records import Record, RecordWrapper, ValidatedRecord, as_schema_error, reader_for
from .schemas import SchemaRegistry, check_schema, merge_schema_files
from .stats import ErrorStats
from .workflows import NullWorkflow, Vars, Workflow, get_workflow
from .writer import JsonArrayWriter


class FileStage(enum.Enum):
    OPENING = "opening"
    STREAMING = "streaming"
    CLOSING = "closing"
    SUMMARIZING = "summarizing"
    DONE = "done"


@dataclass
class FileRun:
    """Running state for one input file; dropped once its summary is written."""
    path: Path
    include_collection: bool
    writer: JsonArrayWriter
    stats: ErrorStats = field(default_factory=ErrorStats)
    record_count: int = 0
    records_with_errors: int = 0
    stage: FileStage = FileStage.OPENING

    def enter(self, stage: FileStage) -> None:
        log().debug(f"{self.path.name}: {self.stage.value} -> {stage.value}")
        self.stage = stage


class BatchValidator:
    def __init__(self, cfg: ValidateConfig, registry: SchemaRegistry,
                 workflow: Optional[Workflow] = None, engine: Optional[SchemaValidator] = None):
        self.cfg = cfg
        self.registry = registry
        self.workflow = workflow or NullWorkflow()
        self.engine = engine or SchemaValidator()
        self.vars: Vars = {}
        self.summary: Dict[str, ErrorStats] = {}

    def run(self, files: List[Path]) -> Dict[str, ErrorStats]:
        for f in files:
            self.validate_file(f)
        self.write_overall_summary()
        return self.summary

    def validate_file(self, path: Path) -> Optional[FileRun]:
        path = Path(path)
        try:
            process_file, include_collection = reader_for(path)
        except UnsupportedFileError as e:
            log().warning(f"{e}. Skipping")
            return None
        log().info(f"validating: {path}")

        state = FileRun(path=path, include_collection=include_collection,
                        writer=JsonArrayWriter(self.cfg.detail_path(path)))
        progress = ProgressTracker(path.name)

        with state.writer:
            state.enter(FileStage.STREAMING)

            def on_batch(batch: List[Record]) -> None:
                self._validate_batch(state, batch)
                progress.update(len(batch))
                log().debug(f"{path.name}: batch {progress.batches} ({len(batch)} records)")

            process_file(path, self.cfg.batch_size, on_batch)
            state.enter(FileStage.CLOSING)

        state.enter(FileStage.SUMMARIZING)
        self._summarize(state)
        progress.log_progress()
        state.enter(FileStage.DONE)
        return state

    def _validate_batch(self, state: FileRun, batch: List[Record]) -> None:
        for rec in batch:
            self.registry.observe(rec.collection)

        grouped = self.engine.validate_batch(self.registry, batch)
        for recs in grouped.values():
            for rec in recs:
                self._exec_record(rec)
            state.record_count += len(recs)
            self._write_outputs(state, recs)

    def _exec_record(self, rec: ValidatedRecord) -> None:
        try:
            self.workflow.exec_record(rec, self.vars)
        except WorkflowError:
            raise
        except Exception as e:
            raise WorkflowError(f"workflow failed on record: {e}") from e

    def _keep_errored(self, state: FileRun) -> bool:
        cap = self.cfg.max_errors
        return cap == UNLIMITED or state.records_with_errors <= cap

    def _write_outputs(self, state: FileRun, recs: List[ValidatedRecord]) -> None:
        entries = []
        for rec in recs:
            if not rec.errors:
                if self.cfg.include_valid:
                    entries.append(RecordWrapper.wrap(rec, state.include_collection).to_dict())
                continue

            state.records_with_errors += 1
            # every error is counted, whether or not the record is kept
            for err in rec.errors:
                e = as_schema_error(err)
                state.stats.record(e.field, e.error_type, e.description)

            if self._keep_errored(state):
                entries.append(RecordWrapper.wrap(rec, state.include_collection).to_dict())

        state.writer.write(entries)

    def _summarize(self, state: FileRun) -> None:
        try:
            self.workflow.exec_summary(self.vars, state.stats)
        except WorkflowError:
            raise
        except Exception as e:
            raise WorkflowError(f"workflow failed on summary: {e}") from e

        state.stats.finalize(state.record_count)
        out = self.cfg.file_summary_path(state.path)
        try:
            write_json(out, state.stats.to_dict())
        except (OSError, ValueError) as e:
            raise OutputError(f"cannot write {out}: {e}") from e

        self.summary[state.path.name] = state.stats
        log().info(f"{state.path.name}: {state.record_count:,} records, "
                   f"{state.records_with_errors:,} with errors, {len(state.stats)} distinct error(s)")

    def write_overall_summary(self) -> Path:
        out = self.cfg.summary_path
        data = {name: self.summary[name].to_dict() for name in sorted(self.summary)}
        try:
            write_json(out, data)
        except (OSError, ValueError) as e:
            raise OutputError(f"cannot write {out}: {e}") from e
        return out


def run_validation(cfg: ValidateConfig) -> Dict[str, ErrorStats]:
    """Validate every input of `cfg` and write all reports. Raises RecordQAError on a fatal error."""
    cfg.validate()
    log().info(f"validates the data in: {cfg.inputs} schemas: {cfg.schemas} outDir: {cfg.output_dir}")
    files = resolve_inputs(cfg.inputs)

    schema = merge_schema_files(Path(s) for s in cfg.schemas)
    check_schema(schema)

    try:
        ensure_dir(cfg.output_dir)
        ensure_dir(cfg.details_dir)
        ensure_dir(cfg.summary_dir)
    except OSError as e:
        raise OutputError(f"cannot create output directory {cfg.output_dir}: {e}") from e

    workflow = get_workflow(cfg.workflow)
    validator = BatchValidator(cfg, SchemaRegistry(schema), workflow)
    summary = validator.run(files)

    log().info(f"Done validating records. The report folder is located at {cfg.output_dir}")
    return summary
