"""Service layer exports."""

from .errors import CatalogError, FactoryError, MobTypeInUseError
from .catalog import Catalog, CatalogSnapshot
from .drop_selector import choose_equipment, choose_mob_type, generate_stack, roll_drops, select_one
from .catalog_validator import Issue, format_issue, validate_catalog
from .catalog_writer import CatalogWriter
from .mob_configurator import ConfigureReport, DeathDrops, MobConfigurator

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogSnapshot",
    "CatalogWriter",
    "ConfigureReport",
    "DeathDrops",
    "FactoryError",
    "Issue",
    "MobConfigurator",
    "MobTypeInUseError",
    "choose_equipment",
    "choose_mob_type",
    "format_issue",
    "generate_stack",
    "roll_drops",
    "select_one",
    "validate_catalog",
]
