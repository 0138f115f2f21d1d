# server/api.py: read-only HTTP-просмотр одного файла данных
from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from jsondatafile import __version__
from jsondatafile.core.datafile import DataFile
from jsondatafile.core.errors import InvalidArgument
from jsondatafile.core.options import load_options
from jsondatafile.utils import json_logger as log

app = FastAPI(title="jsondatafile API", version=__version__)

DEFAULT_DATA_FILE = "data.json"


def data_path() -> Path:
    # читаем при каждом запросе: путь задаётся JSONDATAFILE_PATH относительно CWD
    return Path(os.getenv("JSONDATAFILE_PATH") or DEFAULT_DATA_FILE)


def _open(path: Path) -> DataFile:
    try:
        return DataFile(path, options=load_options())
    except InvalidArgument as e:
        log.warn("api", "open_error", "cannot open data file", path=str(path), error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "ok": True,
        "service": "jsondatafile",
        "ts": datetime.now(UTC).isoformat(),
    }


@app.get("/data")
def get_data(
    mode: Literal["raw", "parsed"] = Query("raw", description="raw|parsed: parsed добавляет JSON в поле 'parsed'"),
) -> JSONResponse:
    """
    Возвращает запись файла данных:
      - 'raw' всегда содержит serialize() (с опциями из env);
      - при mode=parsed добавляется 'parsed' (разобранный объект);
      - если файла нет: ok=True, raw=None и поясняющая note.
    """
    path = data_path()
    if not path.is_file():
        return JSONResponse(content={"ok": True, "raw": None, "note": f"data file not found at {path}"})

    df = _open(path)
    try:
        raw = df.serialize()
    except (TypeError, ValueError) as e:  # pragma: no cover
        raise HTTPException(status_code=500, detail=f"serialize error: {e}") from e

    payload: dict[str, Any] = {
        "ok": True,
        "raw": raw,
        "meta": {"path": str(path), "size": path.stat().st_size},
    }
    if mode == "parsed":
        payload["parsed"] = json.loads(raw)
    return JSONResponse(content=payload)


@app.get("/data/{name}")
def get_member(name: str) -> dict[str, Any]:
    df = _open(data_path())
    if not df.has(name):
        raise HTTPException(status_code=404, detail=f"member not found: {name}")
    return {"ok": True, "name": name, "value": df.get(name)}
