# core/codec.py: разбор и сериализация JSON для DataFile
from __future__ import annotations

import json
import math
import re
from functools import partial
from typing import Any

from jsondatafile.core.options import DataFileOptions

JsonValue = None | bool | int | float | str | list["JsonValue"] | dict[str, "JsonValue"]

# как depth=512 у json_decode/json_encode
MAX_DEPTH = 512

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_NUMERIC_RE = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII)
_INTEGER_RE = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)

# escape-пары (\x) съедаются целиком, чтобы не задеть экранированный обратный слэш
_ESCAPE_RE = re.compile(r"\\.|[/<>&']")
_HEX_ESCAPES = {
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "'": "\\u0027",
    '\\"': "\\u0022",
}


def _parse_int(literal: str) -> int | str:
    n = int(literal)
    return n if INT64_MIN <= n <= INT64_MAX else literal


def _too_deep(value: Any) -> bool:
    # обход без рекурсии: разобранный документ сам по себе может быть очень глубоким
    stack = [(value, 1)]
    while stack:
        item, depth = stack.pop()
        if isinstance(item, dict):
            children = item.values()
        elif isinstance(item, list):
            children = item
        else:
            continue
        if depth > MAX_DEPTH:
            return True
        stack.extend((child, depth + 1) for child in children)
    return False


def decode(text: str) -> Any:
    """
    Parse JSON text; integers outside the signed 64-bit range stay strings.

    Documents nested deeper than MAX_DEPTH raise ValueError.
    """
    value = json.loads(text, parse_int=_parse_int)
    if _too_deep(value):
        raise ValueError(f"Maximum nesting depth of {MAX_DEPTH} exceeded")
    return value


def _numeric(s: str) -> int | float | str:
    if not _NUMERIC_RE.fullmatch(s):
        return s
    if _INTEGER_RE.fullmatch(s):
        n = int(s)
        return n if INT64_MIN <= n <= INT64_MAX else s
    f = float(s)
    return f if math.isfinite(f) else s


def numeric_check(value: Any, _depth: int = 0, _active: set[int] | None = None) -> Any:
    """
    Возвращает копию значения, где строки-числа ("42", "-1.5", "1e3") заменены
    числами. Ключи объектов не трогаем. Целые вне int64 и переполнение float
    остаются строками, чтобы не терять точность.

    ValueError: вложенность больше MAX_DEPTH или контейнер содержит сам себя.
    """
    if isinstance(value, str):
        return _numeric(value)
    if not isinstance(value, dict | list | tuple):
        return value

    if _depth >= MAX_DEPTH:
        raise ValueError(f"Maximum nesting depth of {MAX_DEPTH} exceeded")
    active = set() if _active is None else _active
    if id(value) in active:
        raise ValueError("Circular reference detected")

    # циклы вместо comprehension: один кадр стека на уровень вложенности
    active.add(id(value))
    try:
        if isinstance(value, dict):
            out: dict[Any, Any] = {}
            for k, v in value.items():
                out[k] = numeric_check(v, _depth + 1, active)
            return out
        items: list[Any] = []
        for v in value:
            items.append(numeric_check(v, _depth + 1, active))
        return items
    finally:
        active.discard(id(value))


def _escape(encode_spec_chars: bool, m: re.Match[str]) -> str:
    token = m.group(0)
    if token == "/":
        return "\\/"
    if encode_spec_chars and token in _HEX_ESCAPES:
        return _HEX_ESCAPES[token]
    return token


def encode(value: Any, options: DataFileOptions) -> str:
    """
    Compact JSON for `value` according to `options`.

    Raises TypeError for values json cannot represent and ValueError for
    NaN/Infinity, circular references or nesting deeper than MAX_DEPTH;
    callers decide how to report them.
    """
    text = json.dumps(
        numeric_check(value),
        ensure_ascii=not options.raw_text,
        allow_nan=False,
        separators=(",", ":"),
    )
    if options.raw_text:
        return text
    return _ESCAPE_RE.sub(partial(_escape, options.encode_spec_chars), text)
