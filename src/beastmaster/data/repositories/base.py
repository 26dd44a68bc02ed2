"""Base repository implementation for JSON definition data."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, TypeVar

from beastmaster.data.errors import DataValidationError
from beastmaster.data.json_loader import load_json
from beastmaster.data import paths

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories.

    Definitions keep the order they have in the file. When ``optional`` is set a
    missing file is treated as an empty definition set.
    """

    def __init__(self, filename: str, base_path: Path | str | None = None, *, optional: bool = False) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._optional = optional
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        if self._optional and not file_path.exists():
            return {}
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def contains(self, def_id: str) -> bool:
        self._ensure_loaded()
        assert self._definitions is not None
        return def_id in self._definitions

    def as_dict(self) -> Dict[str, T]:
        """Return all definitions keyed by id, in file order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return dict(self._definitions)

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str) or not value.strip():
            raise DataValidationError(f"{context} must be a non-empty string when provided.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_float(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be true or false.")
        return value
