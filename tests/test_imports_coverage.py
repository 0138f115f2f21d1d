"""
Smoke-проверка импортов: каждый модуль пакета импортируется без побочных
эффектов (не создаёт файлов, не читает data.json при импорте).
"""

import importlib
import types

import pytest


@pytest.mark.parametrize(
    "module_name",
    [
        "jsondatafile",
        "jsondatafile.__main__",
        "jsondatafile.cli",
        "jsondatafile.core.codec",
        "jsondatafile.core.datafile",
        "jsondatafile.core.errors",
        "jsondatafile.core.options",
        "jsondatafile.server",
        "jsondatafile.server.api",
        "jsondatafile.utils.json_logger",
    ],
)
def test_import_module_smoke(module_name: str, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mod = importlib.import_module(module_name)
    assert isinstance(mod, types.ModuleType)
    assert list(tmp_path.iterdir()) == []


def test_public_api():
    pkg = importlib.import_module("jsondatafile")
    for name in pkg.__all__:
        assert hasattr(pkg, name), f"jsondatafile.{name} is missing"
