"""Repository exports."""

from .items_repo import ItemsRepository
from .mob_types_repo import MobTypesRepository
from .drop_tables_repo import DropTablesRepository

__all__ = [
    "DropTablesRepository",
    "ItemsRepository",
    "MobTypesRepository",
]
