#!/usr/bin/env python3
"""
recordqa CLI

Usage:
  recordqa validate data/ file2.csv -s schema1.json -s schema2.yaml -o reports
"""
from __future__ import annotations
import argparse, sys, time
from typing import List, Optional
from rich.text import Text

from .config import ValidateConfig
from .errors import RecordQAError
from .logging import console, set_verbosity
from .validate import run_validation
from .workflows import registered_workflows

def print_success(message: str, duration_ms: float = None):
    """Print a success message with optional timing"""
    if duration_ms is not None:
        text = Text(f"✓ {message} in {duration_ms:.0f}ms", style="green")
    else:
        text = Text(f"✓ {message}", style="green")
    console().print(text)

def print_error(message: str):
    """Print an error message"""
    console().print(Text(f"❌ {message}", style="red bold"))

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="recordqa", description="Validate CSV/JSON records against JSON schemas")
    sub = ap.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser(
        "validate",
        help="Validate input files and write detail and summary reports",
        description=(
            "Validates the input data files using JSON schema files and creates reports. "
            "When several schema files are given, later ones are merged into earlier ones "
            "with JSON Merge Patch. CSV cells that read as JSON (numbers, booleans, null, "
            "objects, arrays) are decoded before validation, so detail output shows the decoded "
            "value: 1.50 becomes 1.5 and a numeric SKU like 12345 becomes a number."
        ),
    )
    v.add_argument("inputs", nargs="+", help="Input files or directories (searched recursively)")
    v.add_argument("-s", "--schema", dest="schemas", action="append", required=True,
                   help="JSON or YAML schema file; repeat to merge, the latter overrides the former")
    v.add_argument("-o", "--output-dir", default=None, help="Reports output directory (default: reports)")
    v.add_argument("-y", "--summary-file", default=None, help="Name of the overall summary file (default: summary)")
    v.add_argument("-b", "--batch-size", type=int, default=None, help="Records per batch (default: 10000)")
    v.add_argument("-m", "--max", dest="max_errors", type=int, default=None,
                   help="Max records with errors kept in each detail file; -1 means no limit")
    v.add_argument("-w", "--workflow", default=None,
                   help="Workflow to run: a registered name or a path to a .py file")
    v.add_argument("--include-valid", action="store_true", default=None,
                   help="Also write records without errors to the detail files")
    v.add_argument("--verbose", action="store_true")

    sub.add_parser("workflows", help="List registered workflow names")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.cmd == "workflows":
        for name in registered_workflows():
            print(name)
        return 0

    set_verbosity(args.verbose)
    try:
        cfg = ValidateConfig.from_env(
            inputs=args.inputs,
            schemas=args.schemas,
            output_dir=args.output_dir,
            summary_file=args.summary_file,
            batch_size=args.batch_size,
            max_errors=args.max_errors,
            workflow=args.workflow,
            include_valid=args.include_valid,
            verbose=args.verbose,
        )
        cfg.validate()
    except ValueError as e:
        print_error(str(e))
        return 2

    start = time.time()
    try:
        summary = run_validation(cfg)
    except RecordQAError as e:
        print_error(f"{e}")
        print_error("aborting validation.")
        return 1

    print_success(f"validated {len(summary)} file(s), reports in {cfg.output_dir}", (time.time() - start) * 1000)
    return 0

if __name__ == "__main__":
    sys.exit(main())
