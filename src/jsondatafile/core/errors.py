# core/errors.py: исключения пакета
from __future__ import annotations


class JsonDataFileError(Exception):
    """Base class for every error raised by jsondatafile."""


class InvalidArgument(JsonDataFileError, ValueError):
    """Malformed constructor input or an unknown/invalid option."""


class DataFileError(JsonDataFileError, OSError):
    """save() could not serialize the record or write the file."""
