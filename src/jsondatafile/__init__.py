# jsondatafile: JSON-документ в одном файле как объект
from __future__ import annotations

from jsondatafile.core.datafile import DataFile
from jsondatafile.core.errors import DataFileError, InvalidArgument, JsonDataFileError
from jsondatafile.core.options import DataFileOptions, load_options

__version__ = "0.1.0"

__all__: list[str] = [
    "DataFile",
    "DataFileError",
    "DataFileOptions",
    "InvalidArgument",
    "JsonDataFileError",
    "load_options",
]
