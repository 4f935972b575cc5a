"""Exceptions raised while running a validation.

Schema findings on individual records are data, not errors; they never
surface through this hierarchy.
"""
from __future__ import annotations


class RecordQAError(Exception):
    """Base class; anything derived from it aborts the run unless noted."""


class SchemaMergeError(RecordQAError):
    """A schema file could not be read, merged or compiled."""


class OutputError(RecordQAError):
    """An output directory or report file could not be written."""


class RecordStreamError(RecordQAError):
    """An input file could not be read or decoded."""


class WorkflowError(RecordQAError):
    """The workflow could not be loaded or one of its hooks failed."""


class UnsupportedFileError(RecordQAError):
    """Input file has an extension with no reader. Recoverable: the file is skipped."""
