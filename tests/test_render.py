from beastmaster.domain.defs import DropEntry, DropKind, DropTable, ItemDef
from beastmaster.presentation.cli import render
from beastmaster.services.catalog import Catalog


def _snapshot():
    catalog = Catalog(
        items=[
            ItemDef(id="gold_coin", material="gold_nugget", display_name="Gold Coin"),
            ItemDef(id="signet", material="gold_ingot"),
            ItemDef(id="phantom"),
        ]
    )
    catalog.add_mob_type("zombie-baron", "zombie")
    catalog.add_mob_type("orphan", "ghost")
    catalog.set_property("zombie", "health", 20)
    catalog.set_property("zombie-baron", "name", "Baron")
    return catalog.snapshot()


def _item(item_id: str, chance: float, min_qty: int = 1, max_qty: int = 1, objective=None) -> DropEntry:
    return DropEntry(
        kind=DropKind.ITEM,
        payload_id=item_id,
        chance=chance,
        min_qty=min_qty,
        max_qty=max_qty,
        objective=objective,
    )


def test_describe_drop_items() -> None:
    snapshot = _snapshot()

    assert render.describe_drop(_item("gold_coin", 0.5, 1, 3), snapshot) == "gold_coin: 50% [1,3] Gold Coin (gold_nugget)"
    assert render.describe_drop(_item("signet", 1.0, 2, 2), snapshot) == "signet: 100% 2 gold_ingot"
    assert render.describe_drop(_item("phantom", 0.5), snapshot) == "phantom: 50% 1 nothing"
    assert render.describe_drop(_item("default", 0.5), snapshot) == "default: 50%"
    assert render.describe_drop(_item("missing", 0.5), snapshot) == "missing: 50% 1 missing (unknown item)"


def test_describe_drop_objective_mob_and_nothing() -> None:
    snapshot = _snapshot()
    mob = DropEntry(kind=DropKind.MOB, payload_id="zombie", chance=0.25)

    assert render.describe_drop(_item("signet", 0.1, objective="signet"), snapshot) == (
        "signet: (objective: signet) 10% 1 gold_ingot"
    )
    assert render.describe_drop(mob, snapshot) == "zombie: 25% 1 mob zombie"
    assert render.describe_drop(DropEntry.nothing(), snapshot) == "nothing: 0% nothing"


def test_describe_drop_table() -> None:
    snapshot = _snapshot()

    assert render.describe_drop_table(DropTable(id="empty"), snapshot) == [
        "Drop table empty (single, 0 entries)",
        "  (empty)",
    ]
    lines = render.describe_drop_table(DropTable(id="t", entries=(_item("signet", 1.0),), single=False), snapshot)
    assert lines == ["Drop table t (multiple, 1 entries)", "  signet: 100% 1 gold_ingot"]


def test_describe_mob_type() -> None:
    snapshot = _snapshot()

    assert render.describe_mob_type(snapshot.get_mob_type("zombie"), snapshot) == "zombie"
    assert render.describe_mob_type(snapshot.get_mob_type("zombie-baron"), snapshot) == (
        "id: zombie-baron, parent-type: zombie"
    )
    assert render.describe_mob_type(snapshot.get_mob_type("orphan"), snapshot) == (
        "id: orphan, parent-type: ghost (missing)"
    )


def test_describe_property_shows_owner() -> None:
    snapshot = _snapshot()
    baron = snapshot.get_mob_type("zombie-baron")

    assert render.describe_property(baron, "name", snapshot) == "name: Baron"
    assert render.describe_property(baron, "health", snapshot) == "health: 20 (inherited from zombie)"
    assert render.describe_property(baron, "glowing", snapshot) == "glowing: (unset)"
    assert render.describe_property(baron, "wings", snapshot) == "wings: unknown property"
