import json
import pytest

from recordqa.errors import OutputError
from recordqa.writer import JsonArrayWriter

def test_empty_array_is_bracket_newline_bracket(tmp_path):
    out = tmp_path / "d.json"
    with JsonArrayWriter(out):
        pass
    assert out.read_text(encoding="utf-8") == "[\n]"
    assert json.loads(out.read_text()) == []

def test_empty_batches_write_nothing(tmp_path):
    out = tmp_path / "d.json"
    with JsonArrayWriter(out) as w:
        assert w.write([]) == 0
        w.write([{"a": 1}])
        w.write([])
        w.write([])
        w.write([{"a": 2}, {"a": 3}])
        w.write([])
    text = out.read_text(encoding="utf-8")
    assert json.loads(text) == [{"a": 1}, {"a": 2}, {"a": 3}]
    assert ",," not in text
    assert "[," not in text

def test_leading_empty_batch_does_not_emit_comma(tmp_path):
    out = tmp_path / "d.json"
    with JsonArrayWriter(out) as w:
        w.write([])
        w.write([{"a": 1}])
    assert out.read_text(encoding="utf-8").startswith("[\n  {")
    assert json.loads(out.read_text()) == [{"a": 1}]

def test_open_truncates_previous_content(tmp_path):
    out = tmp_path / "d.json"
    out.write_text("garbage that is not json")
    with JsonArrayWriter(out) as w:
        w.write([{"k": "v"}])
    assert json.loads(out.read_text()) == [{"k": "v"}]

def test_count_tracks_elements(tmp_path):
    w = JsonArrayWriter(tmp_path / "d.json").open()
    w.write([1, 2])
    w.write([3])
    w.close()
    assert w.count == 3
    assert not w.is_open

def test_write_before_open_fails(tmp_path):
    with pytest.raises(OutputError):
        JsonArrayWriter(tmp_path / "d.json").write([1])

def test_exception_leaves_array_unterminated(tmp_path):
    out = tmp_path / "d.json"
    with pytest.raises(RuntimeError):
        with JsonArrayWriter(out) as w:
            w.write([{"a": 1}])
            raise RuntimeError("boom")
    assert not out.read_text().endswith("]")

def test_unicode_is_kept(tmp_path):
    out = tmp_path / "d.json"
    with JsonArrayWriter(out) as w:
        w.write([{"name": "Crème brûlée"}])
    assert "Crème brûlée" in out.read_text(encoding="utf-8")

def test_non_finite_values_are_refused(tmp_path):
    out = tmp_path / "d.json"
    w = JsonArrayWriter(out).open()
    w.write([{"a": 1}])
    with pytest.raises(OutputError):
        w.write([{"a": float("inf")}])
    w.close()
    assert json.loads(out.read_text(encoding="utf-8")) == [{"a": 1}]
    assert w.count == 1
