# tests/conftest.py
# Назначение: добавить <repo_root>/src в sys.path, чтобы `import jsondatafile`
# работал при запуске pytest из корня без установки пакета.
# После `pip install -e .` этот conftest можно оставить: он не мешает.

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
_src_str = str(_SRC)

if _SRC.exists() and _src_str not in sys.path:
    sys.path.insert(0, _src_str)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # опции и логгер читают окружение: изолируем тесты от внешних настроек
    for var in ("JSONDATAFILE_ENCODE_SPEC_CHARS", "JSONDATAFILE_RAW_TEXT", "JSONDATAFILE_PATH", "JSONDATAFILE_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARN")


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    return tmp_path / "data.json"
