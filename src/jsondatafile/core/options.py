# core/options.py: параметры представления JSON и их загрузка (YAML + env)
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from jsondatafile.core.errors import InvalidArgument

ENV_PREFIX = "JSONDATAFILE_"


class DataFileOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    encode_spec_chars: bool = True  # < > & ' " -> \u003C ... для вставки в HTML
    raw_text: bool = False  # без экранирования "/" и не-ASCII; главнее encode_spec_chars


OPTION_NAMES: tuple[str, ...] = tuple(DataFileOptions.model_fields)


def coerce_options(value: DataFileOptions | Mapping[str, Any] | None) -> DataFileOptions:
    """Return a private DataFileOptions built from a model, a mapping or None."""
    if value is None:
        return DataFileOptions()
    if isinstance(value, DataFileOptions):
        return value.model_copy()
    if isinstance(value, Mapping):
        try:
            return DataFileOptions.model_validate(dict(value))
        except ValidationError as e:
            raise InvalidArgument(f"Invalid options: {e}") from e
    raise InvalidArgument(f"Options must be a mapping or DataFileOptions, got {type(value).__name__}.")


def load_options(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> DataFileOptions:
    """
    Собирает DataFileOptions по слоям:
      1) значения по умолчанию модели;
      2) YAML-файл `path` (плоская мапа option -> bool), если указан;
      3) переменные окружения JSONDATAFILE_ENCODE_SPEC_CHARS / JSONDATAFILE_RAW_TEXT.

    Любая ошибка (нет файла, битый YAML, неизвестный ключ, не-bool) -> InvalidArgument.
    """
    values: dict[str, Any] = {}

    if path:
        try:
            raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise InvalidArgument(f"Cannot read options file \"{path}\": {e}") from e
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise InvalidArgument(f"Options file \"{path}\" must contain a mapping.")
        values.update(raw)

    environ = os.environ if env is None else env
    for name in OPTION_NAMES:
        v = environ.get(ENV_PREFIX + name.upper())
        if v:
            values[name] = v

    return coerce_options(values)
