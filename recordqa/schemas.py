"""
Schema loading, merging and per-collection lookup.

Several schema files can be given; they are combined left to right with
JSON Merge Patch (RFC 7386), so later files override earlier ones and a
`null` value removes a key.
"""
from __future__ import annotations
import copy, json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import json_merge_patch
import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .errors import SchemaMergeError
from .logging import log

DEFAULT_COLLECTION = "default"
YAML_SUFFIXES = (".yaml", ".yml")


def yaml_to_json(text: str) -> Any:
    """Parse YAML and normalize it to plain JSON data (string keys, no dates)."""
    data = yaml.safe_load(text)
    if data is None:
        raise ValueError("empty YAML document")
    return json.loads(json.dumps(data, default=str))


def load_schema_document(path: Path) -> Optional[Any]:
    """Read one schema file. Returns None when a YAML file cannot be converted."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaMergeError(f"cannot read schema {path}: {e}") from e

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml_to_json(text)
        except (yaml.YAMLError, ValueError) as e:
            log().warning(f"error converting YAML to JSON for {path}, skipping: {e}")
            return None

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaMergeError(f"invalid JSON in schema {path}: {e}") from e


def merge_schemas(docs: Iterable[Any]) -> Any:
    merged: Any = None
    first = True
    for doc in docs:
        if first:
            merged = copy.deepcopy(doc)
            first = False
            continue
        try:
            merged = json_merge_patch.merge(merged, copy.deepcopy(doc))
        except (TypeError, ValueError, AttributeError) as e:
            raise SchemaMergeError(f"cannot merge schema: {e}") from e
    if first:
        raise SchemaMergeError("no schema could be loaded")
    return merged


def merge_schema_files(paths: Iterable[Path]) -> Any:
    """Load and merge schema files in priority order (last wins)."""
    docs: List[Any] = []
    for p in paths:
        doc = load_schema_document(Path(p))
        if doc is None:
            continue
        log().debug(f"loaded schema {p}")
        docs.append(doc)
    return merge_schemas(docs)


def check_schema(schema: Any) -> None:
    """Check the schema against its meta-schema."""
    cls = validator_for(schema, default=Draft202012Validator)
    try:
        cls.check_schema(schema)
    except SchemaError as e:
        raise SchemaMergeError(f"merged schema is invalid: {e.message}") from e


class SchemaRegistry:
    """
    Collection name -> schema document.

    Always holds DEFAULT_COLLECTION. `resolve` falls back to it for any
    collection without an explicit schema; `observe` records a collection
    seen in the stream as an alias of the default one.
    """

    def __init__(self, default_schema: Any):
        self._schemas: Dict[str, Any] = {DEFAULT_COLLECTION: default_schema}

    @property
    def default(self) -> Any:
        return self._schemas[DEFAULT_COLLECTION]

    def register(self, collection: str, schema: Any) -> None:
        self._schemas[collection] = schema

    def observe(self, collection: str) -> None:
        if collection and collection not in self._schemas:
            self._schemas[collection] = self._schemas[DEFAULT_COLLECTION]

    def resolve(self, collection: str) -> Any:
        return self._schemas.get(collection or DEFAULT_COLLECTION, self._schemas[DEFAULT_COLLECTION])

    def collections(self) -> List[str]:
        return list(self._schemas)

    def __contains__(self, collection: str) -> bool:
        return collection in self._schemas
