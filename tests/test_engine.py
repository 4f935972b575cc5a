from recordqa.engine import ROOT_FIELD, SchemaValidator
from recordqa.records import Record, SchemaError
from recordqa.schemas import SchemaRegistry

from conftest import PRODUCT_SCHEMA

def test_valid_record_has_no_errors():
    assert SchemaValidator().errors_for(PRODUCT_SCHEMA, {"name": "A", "price": 1}) == []

def test_required_errors_name_the_missing_field():
    errs = SchemaValidator().errors_for(PRODUCT_SCHEMA, {})
    assert [(e.field, e.error_type) for e in errs] == [("name", "required"), ("price", "required")]
    assert errs[0].description == "'name' is a required property"

def test_nested_paths_are_dotted():
    schema = {
        "type": "object",
        "properties": {
            "address": {"type": "object", "required": ["city"], "properties": {"zip": {"type": "string"}}},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }
    errs = SchemaValidator().errors_for(schema, {"address": {"zip": 1}, "tags": ["ok", 2]})
    fields = sorted((e.field, e.error_type) for e in errs)
    assert fields == [("address.city", "required"), ("address.zip", "type"), ("tags.1", "type")]

def test_root_errors_use_root_field():
    errs = SchemaValidator().errors_for({"type": "object", "maxProperties": 1}, {"a": 1, "b": 2})
    assert errs == [SchemaError(ROOT_FIELD, "maxProperties", errs[0].description)]

def test_format_is_checked():
    schema = {"properties": {"email": {"type": "string", "format": "email"}}}
    errs = SchemaValidator().errors_for(schema, {"email": "not-an-email"})
    assert [(e.field, e.error_type) for e in errs] == [("email", "format")]

def test_validate_batch_groups_by_collection_in_first_seen_order():
    reg = SchemaRegistry(PRODUCT_SCHEMA)
    batch = [
        Record({"name": "A", "price": 1}, "products"),
        Record({"name": "B"}),
        Record({"price": -1}, "products"),
    ]
    grouped = SchemaValidator().validate_batch(reg, batch)
    assert list(grouped) == ["products", "default"]
    assert [len(r.errors) for r in grouped["products"]] == [0, 2]
    assert grouped["default"][0].errors[0].field == "price"
    assert grouped["products"][0].collection == "products"

def test_validator_is_compiled_once_per_schema():
    eng = SchemaValidator()
    eng.errors_for(PRODUCT_SCHEMA, {})
    eng.errors_for(PRODUCT_SCHEMA, {"name": "x"})
    assert len(eng._compiled) == 1

def test_same_property_required_twice_is_counted_under_that_field():
    schema = {"allOf": [{"required": ["price"]}, {"required": ["price"]}]}
    errs = SchemaValidator().errors_for(schema, {"name": "A"})
    assert [(e.field, e.error_type) for e in errs] == [("price", "required"), ("price", "required")]

def test_required_in_array_items_indexed_per_item():
    schema = {"type": "array", "items": {"type": "object", "required": ["a", "b"]}}
    errs = SchemaValidator().errors_for(schema, [{}, {"a": 1}])
    assert [e.field for e in errs] == ["0.a", "0.b", "1.b"]
