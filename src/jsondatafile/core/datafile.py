# core/datafile.py: JSON-документ в одном файле (load -> get/set/array* -> save)
from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from jsondatafile.core import codec
from jsondatafile.core.codec import JsonValue
from jsondatafile.core.errors import DataFileError, InvalidArgument
from jsondatafile.core.options import OPTION_NAMES, DataFileOptions, coerce_options
from jsondatafile.utils import json_logger as log

COMPONENT = "datafile"

_FILENAME_RE = re.compile(r"[A-Za-z0-9_.~-]+")


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _object_key(key: Any) -> str:
    # ключи JSON-объекта всегда строки; 5 и "5" адресуют один элемент
    return key if isinstance(key, str) else str(key)


def _array_key(key: Any) -> Any:
    # True/False адресуют позиции 1/0, как целые
    return int(key) if isinstance(key, bool) else key


_INT_KEY_RE = re.compile(r"-?(?:0|[1-9][0-9]*)")


def _next_index(member: dict[str, Any]) -> str:
    """Следующий целый ключ для append в объект: max(целые ключи) + 1, либо "0"."""
    ints = [int(k) for k in member if _INT_KEY_RE.fullmatch(k)]
    return str(max(ints) + 1) if ints else "0"


def _record_from_default(default: Any) -> dict[str, JsonValue] | None:
    if default is None:
        return {}
    if isinstance(default, BaseModel):
        return default.model_dump(mode="json")
    if isinstance(default, Mapping):
        return copy.deepcopy(dict(default))
    return None


class DataFile:
    """
    Обёртка над JSON-файлом.

    При создании читает файл (если он есть) или берёт `default`; дальше все
    операции идут по записи в памяти, а save() целиком перезаписывает файл.

    Методы array_* работают с членами-контейнерами: list (целые позиции) или
    dict (строковые ключи). Если запись отсутствует или не является объектом,
    методы чтения возвращают значение по умолчанию, а изменения ничего не делают.
    Запись по ключу, который не является позицией списка, превращает список
    в объект {"0": ..., "1": ...}.

    Битый JSON при чтении даёт пустую запись (None). OSError при чтении
    (нет прав, сбой диска) не перехватывается: иначе последующий save()
    затёр бы файл, который просто не удалось прочитать.
    """

    def __init__(
        self,
        path: str | Path,
        default: Mapping[str, Any] | BaseModel | None = None,
        options: DataFileOptions | Mapping[str, Any] | None = None,
    ):
        if path is None or (isinstance(path, str) and not path):
            raise InvalidArgument("File name required.")

        file_path = Path(path)
        opts = coerce_options(options)

        if file_path.is_file():
            record = self._load(file_path)
        else:
            if not file_path.parent.is_dir():
                raise InvalidArgument(f'Invalid file path "{file_path.parent}" (directory does not exist).')
            if not _FILENAME_RE.fullmatch(file_path.name):
                raise InvalidArgument(
                    f'Invalid file name "{file_path.name}" '
                    "(only english letters, numbers, underscore, dash, tilde and dot allowed)."
                )
            record = _record_from_default(default)
            log.debug(COMPONENT, "init_default", "data file not found, using default", path=str(file_path))

        self._record: Any = record
        self._filename = path
        self._path = file_path
        self._options = opts

    @staticmethod
    def _load(file_path: Path) -> Any:
        try:
            text = file_path.read_text(encoding="utf-8")
            record = codec.decode(text)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, UnicodeDecodeError и слишком глубокая вложенность: файл остаётся, запись пустая
            log.warn(COMPONENT, "load_error", "data file is not valid JSON", path=str(file_path), error=str(e))
            return None
        if not isinstance(record, dict):
            log.warn(COMPONENT, "load_non_object", "data file does not hold a JSON object", path=str(file_path))
        log.debug(COMPONENT, "load", "data file loaded", path=str(file_path), size=len(text))
        return record

    # =========================
    # ЧЛЕНЫ ЗАПИСИ
    # =========================

    def has(self, name: str) -> bool:
        return isinstance(self._record, dict) and name in self._record

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def get(self, name: str, default: Any = None) -> Any:
        if not self.has(name):
            return default
        return self._record[name]

    def set(self, name: str, value: Any = None) -> None:
        if self._record is None:
            self._record = {}
        if not isinstance(self._record, dict):
            log.warn(COMPONENT, "set_skipped", "record is not a JSON object", name=name)
            return
        self._record[name] = value

    def remove(self, name: str) -> None:
        if self.has(name):
            del self._record[name]

    # =========================
    # ЧЛЕНЫ-КОНТЕЙНЕРЫ (array_*)
    # =========================

    def array_has(self, array_name: str, value: Any) -> bool:
        if value is None or not self.has(array_name):
            return False
        member = self._record[array_name]
        return isinstance(member, list) and value in member

    def array_has_key(self, array_name: str, key: str | int | None) -> bool:
        key = _array_key(key)
        if key is None or not self.has(array_name):
            return False
        member = self._record[array_name]
        if isinstance(member, list):
            return _is_index(key) and 0 <= key < len(member)
        if isinstance(member, dict):
            return _object_key(key) in member
        return False

    def array_get(self, array_name: str, key: str | int | None, default: Any = None) -> Any:
        key = _array_key(key)
        if not self.array_has_key(array_name, key):
            return default
        member = self._record[array_name]
        if isinstance(member, list):
            return member[key]
        return member[_object_key(key)]

    def array_add(self, array_name: str, value: Any, key: str | int | None = None) -> None:
        """Add `value` only if it (key=None) or `key` is not there yet."""
        key = _array_key(key)
        if not isinstance(self._record, dict) or (key is None and value is None):
            return
        if key is None and self.array_has(array_name, value):
            return
        if key is not None and self.array_has_key(array_name, key):
            return
        self._put(array_name, value, key)

    def array_set(self, array_name: str, value: Any, key: str | int | None = None) -> None:
        """Upsert `value` at `key`, or append it when key is None."""
        key = _array_key(key)
        if not isinstance(self._record, dict) or (key is None and value is None):
            return
        self._put(array_name, value, key)

    def array_remove(self, array_name: str, key: str | int | None) -> None:
        key = _array_key(key)
        if not self.array_has_key(array_name, key):
            return
        member = self._record[array_name]
        if isinstance(member, list):
            del member[key]
        else:
            del member[_object_key(key)]

    def array_remove_value(self, array_name: str, value: Any) -> None:
        """Remove the first element equal to `value`; later duplicates stay."""
        member = self.get(array_name)
        if isinstance(member, list) and value in member:
            member.remove(value)

    def _put(self, array_name: str, value: Any, key: str | int | None) -> None:
        member = self._record.get(array_name)
        if member is None:
            # новый член: список для append/позиции 0, иначе объект
            member = [] if key is None or (_is_index(key) and key == 0) else {}
            self._record[array_name] = member

        if isinstance(member, list):
            if key is None:
                member.append(value)
                return
            if _is_index(key) and 0 <= key < len(member):
                member[key] = value
                return
            if _is_index(key) and key == len(member):
                member.append(value)
                return
            # ключ не является позицией списка: список становится объектом {"0": ..., "1": ...}
            member = {str(i): v for i, v in enumerate(member)}
            self._record[array_name] = member

        if isinstance(member, dict):
            member[_object_key(key) if key is not None else _next_index(member)] = value
            return

        # строка/число/bool: контейнером не является, писать некуда
        log.warn(COMPONENT, "array_skipped", "member is not a list or object", name=array_name)

    # =========================
    # СЕРИАЛИЗАЦИЯ И ФАЙЛ
    # =========================

    def serialize(self) -> str:
        """
        JSON-текст записи с учётом опций.

        TypeError/ValueError из кодировщика пробрасываются как есть;
        save() превращает их в DataFileError.
        """
        return codec.encode(self._record, self._options)

    def save(self) -> None:
        if not self._filename:
            return

        try:
            text = self.serialize()
        except (TypeError, ValueError, RecursionError) as e:
            log.error(COMPONENT, "save_error", "record cannot be serialized", path=str(self._path), error=str(e))
            raise DataFileError(f"Error attempt to save data: bad/corrupted data ({e}).") from e

        # прямая перезапись (не атомарно): сбой посреди записи может оставить усечённый файл
        try:
            self._path.write_text(text, encoding="utf-8")
        except OSError as e:
            log.error(COMPONENT, "save_error", "data file cannot be written", path=str(self._path), error=str(e))
            raise DataFileError(f'Error attempt to save data: could not write to file "{self._path}" ({e}).') from e

        log.debug(COMPONENT, "save", "data file saved", path=str(self._path), size=len(text))

    # =========================
    # ОПЦИИ И МЕТАДАННЫЕ
    # =========================

    def set_option(self, name: str, value: bool) -> None:
        if name not in OPTION_NAMES:
            raise InvalidArgument(f'Invalid option name "{name}".')
        try:
            setattr(self._options, name, value)
        except ValidationError as e:
            raise InvalidArgument(f'Invalid value for option "{name}": {value!r}.') from e

    def get_option(self, name: str) -> bool:
        if name not in OPTION_NAMES:
            raise InvalidArgument(f'Invalid option name "{name}".')
        return getattr(self._options, name)

    @property
    def options(self) -> DataFileOptions:
        return self._options.model_copy()

    @property
    def record(self) -> Any:
        """Deep copy of the in-memory record."""
        return copy.deepcopy(self._record)

    def get_filename(self) -> str:
        return str(self._filename)

    @property
    def filename(self) -> str:
        return str(self._filename)

    def __repr__(self) -> str:
        return f"DataFile({str(self._path)!r})"
