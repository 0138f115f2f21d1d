# Назначение: единый JSON-логгер (stderr + опциональный файл JSONDATAFILE_LOG_FILE)
from __future__ import annotations

import datetime as dt
import json
import os
import pathlib
import sys
from contextlib import suppress

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40, "CRITICAL": 50}


def _now_iso():
    return dt.datetime.now(dt.UTC).astimezone().isoformat()


def _threshold() -> int:
    # читаем при каждом вызове, чтобы LOG_LEVEL можно было менять на лету
    return _LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), 20)


def log(level: str, component: str, event: str, msg: str, **fields):
    if _LEVELS[level] < _threshold():
        return
    rec = {
        "ts": _now_iso(),
        "level": level,
        "component": component,
        "event": event,
        "msg": msg,
        **fields,
    }
    line = json.dumps(rec, ensure_ascii=False, default=str)
    print(line, file=sys.stderr)

    log_file = os.getenv("JSONDATAFILE_LOG_FILE")
    if not log_file:
        return
    # лог вспомогательный: ошибки записи не должны ломать вызывающий код
    with suppress(OSError):
        path = pathlib.Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


def info(component, event, msg, **kw):
    log("INFO", component, event, msg, **kw)


def warn(component, event, msg, **kw):
    log("WARN", component, event, msg, **kw)


def error(component, event, msg, **kw):
    log("ERROR", component, event, msg, **kw)


def debug(component, event, msg, **kw):
    log("DEBUG", component, event, msg, **kw)
