"""JSON Schema validation of record batches, backed by `jsonschema`."""
from __future__ import annotations
from collections import Counter
from typing import Any, Dict, List, Tuple

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for

from .records import Record, SchemaError, ValidatedRecord
from .schemas import DEFAULT_COLLECTION, SchemaRegistry

ROOT_FIELD = "(root)"


def _dotted(path) -> str:
    return ".".join(str(p) for p in path)


class SchemaValidator:
    """Validates records and converts library errors into SchemaError rows."""

    def __init__(self):
        # keyed by id() of the schema document; registry aliases share one validator
        self._compiled: Dict[int, Tuple[Any, Any]] = {}

    def _validator(self, schema: Any):
        hit = self._compiled.get(id(schema))
        if hit is not None and hit[0] is schema:
            return hit[1]
        cls = validator_for(schema, default=Draft202012Validator)
        v = cls(schema, format_checker=FormatChecker())
        self._compiled[id(schema)] = (schema, v)
        return v

    def errors_for(self, schema: Any, data: Dict[str, Any]) -> List[SchemaError]:
        out: List[SchemaError] = []
        seen_required: Counter = Counter()
        for err in self._validator(schema).iter_errors(data):
            out.append(self._to_schema_error(err, seen_required))
        return out

    @staticmethod
    def _to_schema_error(err: ValidationError, seen_required: Counter) -> SchemaError:
        field = _dotted(err.absolute_path)
        if err.validator == "required" and isinstance(err.instance, dict):
            # one error per missing property, yielded in declaration order;
            # each `required` keyword is indexed on its own schema location
            missing = [p for p in err.validator_value if p not in err.instance]
            key = (field, tuple(err.absolute_schema_path))
            idx = seen_required[key]
            seen_required[key] += 1
            if idx < len(missing):
                field = f"{field}.{missing[idx]}" if field else str(missing[idx])
        return SchemaError(field=field or ROOT_FIELD, error_type=str(err.validator), description=err.message)

    def validate_batch(self, registry: SchemaRegistry, records: List[Record]) -> Dict[str, List[ValidatedRecord]]:
        """Validate a batch; results grouped by collection in first-seen order."""
        grouped: Dict[str, List[ValidatedRecord]] = {}
        for rec in records:
            name = rec.collection or DEFAULT_COLLECTION
            errors = self.errors_for(registry.resolve(rec.collection), rec.data)
            grouped.setdefault(name, []).append(
                ValidatedRecord(data=rec.data, collection=rec.collection, errors=errors)
            )
        return grouped
