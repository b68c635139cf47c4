import json
import logging

from app.core.logging import JsonFormatter, RequestIdFilter, TextFormatter, record_extras, set_request_id


def make_record(**extra):
    record = logging.LogRecord("chain.minter", logging.INFO, __file__, 1, "mint %s", ("ok",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    RequestIdFilter().filter(record)
    return record


def test_json_formatter_merges_extras():
    set_request_id("req-42")
    try:
        record = make_record(tx_hash="0xabc")
    finally:
        set_request_id(None)

    entry = json.loads(JsonFormatter().format(record))

    assert entry["msg"] == "mint ok"
    assert entry["request_id"] == "req-42"
    assert entry["tx_hash"] == "0xabc"
    assert entry["level"] == "INFO"


def test_text_formatter_without_request():
    line = TextFormatter().format(make_record(job_id="j1", checks=3))

    assert "[-] chain.minter: mint ok" in line
    assert line.endswith("checks=3 job_id=j1")


def test_standard_attributes_are_not_extras():
    assert record_extras(make_record()) == {}
