from recordqa.stats import ErrorStat, ErrorStats

def test_record_creates_then_increments():
    stats = ErrorStats()
    stats.record("price", "type", "'x' is not of type 'number'")
    stats.record("price", "type", "'y' is not of type 'number'")
    stats.record("name", "required", "'name' is a required property")

    assert set(stats) == {"price.type", "name.required"}
    es = stats["price.type"]
    assert es.error_count == 2
    # first description wins
    assert es.error_description == "'x' is not of type 'number'"
    assert es.record_count == 0

def test_percent_is_zero_until_finalized():
    stats = ErrorStats()
    stats.record("a", "type", "bad")
    assert stats["a.type"].error_percent == 0.0

def test_finalize_sets_total_and_percent():
    stats = ErrorStats()
    for _ in range(3):
        stats.record("a", "type", "bad")
    stats.record("b", "enum", "bad")
    stats.finalize(12)

    a, b = stats["a.type"], stats["b.enum"]
    assert a.record_count == b.record_count == 12
    assert a.error_percent == 3 / 12 * 100
    assert b.error_percent == 1 / 12 * 100

def test_percent_follows_count_changed_after_finalize():
    es = ErrorStat(field="a", error_type="type", error_description="", error_count=1, record_count=4)
    assert es.error_percent == 25.0
    es.inc()
    assert es.error_percent == 50.0

def test_to_dict_keys_sorted_and_shape():
    stats = ErrorStats()
    stats.record("z", "type", "bad")
    stats.record("a", "type", "bad")
    stats.finalize(2)
    d = stats.to_dict()
    assert list(d) == ["a.type", "z.type"]
    assert d["a.type"] == {
        "field": "a",
        "error_type": "type",
        "error_description": "bad",
        "error_count": 1,
        "record_count": 2,
        "error_percent": 50.0,
    }

