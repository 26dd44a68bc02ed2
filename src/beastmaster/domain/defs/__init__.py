"""Domain definition exports."""

from .drop_def import NOTHING_ID, DropEntry, DropKind, DropTable
from .item_def import SPECIAL_ITEM_IDS, ItemDef, ItemStack

__all__ = [
    "DropEntry",
    "DropKind",
    "DropTable",
    "ItemDef",
    "ItemStack",
    "NOTHING_ID",
    "SPECIAL_ITEM_IDS",
]
