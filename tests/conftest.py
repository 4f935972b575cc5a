"""Pytest configuration and fixtures for recordqa tests"""
import json
from pathlib import Path
import pytest

from recordqa.config import ValidateConfig

PRODUCT_SCHEMA = {
    "type": "object",
    "required": ["name", "price"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "price": {"type": "number", "minimum": 0},
        "sku": {"type": "string"},
    },
}

def write_json(p: Path, obj) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")
    return p

@pytest.fixture
def schema_file(tmp_path):
    """Product schema requiring name and a non-negative price"""
    return write_json(tmp_path / "schemas" / "product.json", PRODUCT_SCHEMA)

@pytest.fixture
def valid_json(tmp_path):
    return write_json(tmp_path / "in" / "valid.json", [
        {"name": "Apple", "price": 1.5},
        {"name": "Pear", "price": 2},
    ])

@pytest.fixture
def invalid_json(tmp_path):
    """Three records whose price has the wrong type, one fine record"""
    return write_json(tmp_path / "in" / "invalid.json", [
        {"name": "Kiwi", "price": "cheap"},
        {"name": "Plum", "price": "free"},
        {"name": "Fig", "price": 3},
        {"name": "Lime", "price": "n/a"},
    ])

@pytest.fixture
def make_config(tmp_path, schema_file):
    def _make(inputs, **kw):
        kw.setdefault("schemas", [str(schema_file)])
        kw.setdefault("output_dir", tmp_path / "reports")
        return ValidateConfig(inputs=[str(p) for p in inputs], **kw)
    return _make
