"""Data layer utilities for loading and writing JSON definitions."""

from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_definitions_path, get_repo_root

__all__ = [
    "DataLoadError",
    "DataError",
    "DataValidationError",
    "get_definitions_path",
    "get_repo_root",
]
