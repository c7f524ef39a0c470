"""Fixture adapters: build engine inputs from JSON/YAML files on disk."""

from .records import record_from_file, records_from_directory
from .requests import load_payload, request_from_files

__all__ = [
    "record_from_file",
    "records_from_directory",
    "load_payload",
    "request_from_files",
]
