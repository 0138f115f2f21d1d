# tests/test_serialize.py
import json
from pathlib import Path

import pytest

from jsondatafile import DataFile, DataFileOptions
from jsondatafile.core import codec


def _df(path: Path, record, **options) -> DataFile:
    df = DataFile(path, record)
    for name, value in options.items():
        df.set_option(name, value)
    return df


def test_compact_output(data_path: Path):
    assert _df(data_path, {"a": 1, "b": [True, None]}).serialize() == '{"a":1,"b":[true,null]}'


def test_slashes_escaped_by_default(data_path: Path):
    assert _df(data_path, {"url": "a/b"}).serialize() == r'{"url":"a\/b"}'


def test_raw_text_changes_output(data_path: Path):
    df = _df(data_path, {"url": "a/b", "name": "é"})
    before = df.serialize()
    df.set_option("raw_text", True)
    after = df.serialize()
    assert before == '{"url":"a\\/b","name":"\\u00e9"}'
    assert after == '{"url":"a/b","name":"é"}'


def test_spec_chars_escaped_by_default(data_path: Path):
    out = _df(data_path, {"s": "<b>&'\""}).serialize()
    assert out == '{"s":"\\u003Cb\\u003E\\u0026\\u0027\\u0022"}'
    assert json.loads(out) == {"s": "<b>&'\""}


def test_spec_chars_not_escaped_when_disabled(data_path: Path):
    out = _df(data_path, {"s": "<b>&'\"/"}, encode_spec_chars=False).serialize()
    assert out == '{"s":"<b>&\'\\"\\/"}'


def test_raw_text_wins_over_spec_chars(data_path: Path):
    out = _df(data_path, {"s": "<a/>"}, raw_text=True, encode_spec_chars=True).serialize()
    assert out == '{"s":"<a/>"}'


def test_escaped_backslash_is_not_confused_with_quote(data_path: Path):
    out = _df(data_path, {"end": "a\\", "mid": '\\"'}).serialize()
    assert out == '{"end":"a\\\\","mid":"\\\\\\u0022"}'
    assert json.loads(out) == {"end": "a\\", "mid": '\\"'}


def test_numeric_strings_become_numbers(data_path: Path):
    record = {
        "n": "42",
        "f": "1.50",
        "neg": "-3",
        "e": "1e3",
        "spaced": " 12 ",
        "txt": "42abc",
        "hex": "0x1A",
        "dot": ".",
        "empty": "",
        "big": "123456789012345678901",
        "inf": "1e999",
        "obj": {"7": "8"},
        "list": ["1", "x"],
        "flag": True,
    }
    df = _df(data_path, record)
    parsed = json.loads(df.serialize())
    assert parsed["n"] == 42 and isinstance(parsed["n"], int)
    assert parsed["f"] == 1.5
    assert parsed["neg"] == -3
    assert parsed["e"] == 1000.0
    assert parsed["spaced"] == 12
    assert parsed["txt"] == "42abc"
    assert parsed["hex"] == "0x1A"
    assert parsed["dot"] == "."
    assert parsed["empty"] == ""
    assert parsed["big"] == "123456789012345678901"
    assert parsed["inf"] == "1e999"
    assert parsed["obj"] == {"7": 8}
    assert parsed["list"] == [1, "x"]
    assert parsed["flag"] is True
    # запись в памяти не меняется
    assert df.get("n") == "42"


def test_absent_record_serializes_to_null(data_path: Path):
    assert DataFile(data_path, 0).serialize() == "null"


def test_serialize_propagates_encoder_errors(data_path: Path):
    df = DataFile(data_path)
    df.set("bad", object())
    with pytest.raises(TypeError):
        df.serialize()


def test_saved_file_uses_options(data_path: Path):
    df = _df(data_path, {"path": "/tmp/x"}, raw_text=True)
    df.save()
    assert data_path.read_text(encoding="utf-8") == '{"path":"/tmp/x"}'


# =========================
# codec напрямую
# =========================


def test_decode_keeps_int64_boundaries():
    assert codec.decode(str(2**63 - 1)) == 2**63 - 1
    assert codec.decode(str(2**63)) == str(2**63)
    assert codec.decode(str(-(2**63))) == -(2**63)
    assert codec.decode("1.25") == 1.25


def test_numeric_check_leaves_keys_alone():
    assert codec.numeric_check({"1": "2", "a": ("3", None)}) == {"1": 2, "a": [3, None]}


def test_encode_with_defaults():
    assert codec.encode({"x": "</"}, DataFileOptions()) == '{"x":"\\u003C\\/"}'


def test_decode_rejects_documents_deeper_than_limit():
    assert codec.decode("[" * codec.MAX_DEPTH + "]" * codec.MAX_DEPTH) is not None
    with pytest.raises(ValueError, match="depth"):
        codec.decode("[" * (codec.MAX_DEPTH + 1) + "]" * (codec.MAX_DEPTH + 1))


def test_numeric_check_rejects_cycles_and_deep_values():
    loop: dict = {}
    loop["self"] = loop
    with pytest.raises(ValueError, match="Circular"):
        codec.numeric_check(loop)

    deep: list = []
    for _ in range(codec.MAX_DEPTH + 1):
        deep = [deep]
    with pytest.raises(ValueError, match="depth"):
        codec.numeric_check(deep)
