import json
from pathlib import Path

from beastmaster.domain.defs import DropEntry, DropKind, DropTable, ItemDef
from beastmaster.domain.value_kinds import SoundEffect
from beastmaster.services.catalog import Catalog
from beastmaster.services.catalog_writer import CatalogWriter


def _build_catalog() -> Catalog:
    loot = DropTable(
        id="baron-loot",
        single=False,
        entries=(
            DropEntry(kind=DropKind.ITEM, payload_id="gold_coin", chance=1.0, min_qty=5, max_qty=10),
            DropEntry(kind=DropKind.MOB, payload_id="zombie", chance=0.25, objective="minion"),
            DropEntry(kind=DropKind.NOTHING, payload_id=None, chance=0.5, min_qty=0, max_qty=0),
        ),
    )
    catalog = Catalog(drop_tables=[loot], items=[ItemDef(id="gold_coin", material="gold_nugget", display_name="Gold")])
    catalog.add_mob_type("zombie-baron", "zombie")
    catalog.set_property("zombie-baron", "health", 200.0)
    catalog.set_property("zombie-baron", "groups", ["undead", "boss"])
    catalog.set_property("zombie-baron", "spawn-sound", SoundEffect(sound="entity.zombie.ambient", pitch=0.6))
    catalog.set_property("zombie-baron", "drops", "baron-loot")
    catalog.set_property("zombie", "speed", 0.3)
    return catalog


def test_serialize_mob_types_skips_untouched_predefined_types() -> None:
    payload = CatalogWriter().serialize_mob_types(_build_catalog().snapshot())

    assert set(payload) == {"zombie", "zombie-baron"}
    assert payload["zombie"] == {"properties": {"speed": 0.3}}
    baron = payload["zombie-baron"]["properties"]
    assert baron["parent-type"] == "zombie"
    assert baron["groups"] == ["boss", "undead"]
    assert baron["spawn-sound"] == {"sound": "entity.zombie.ambient", "volume": 1.0, "pitch": 0.6}


def test_serialize_items_excludes_special_items() -> None:
    payload = CatalogWriter().serialize_items(_build_catalog().snapshot())

    assert payload == {"gold_coin": {"material": "gold_nugget", "name": "Gold"}}


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    definitions_dir = tmp_path / "definitions"
    original = _build_catalog().snapshot()

    CatalogWriter(definitions_dir).save(original)
    loaded = Catalog.load(definitions_dir).snapshot()

    for mob_type_id in ("zombie", "zombie-baron"):
        expected = original.get_mob_type(mob_type_id)
        actual = loaded.get_mob_type(mob_type_id)
        assert actual.predefined == expected.predefined
        assert [(slot.id, slot.value) for slot in actual] == [(slot.id, slot.value) for slot in expected]

    table = loaded.lookup_drop_table("baron-loot")
    assert table == original.lookup_drop_table("baron-loot")
    assert [entry.key for entry in table.entries] == ["gold_coin", "zombie", "nothing"]
    assert loaded.lookup_item("gold_coin") == original.lookup_item("gold_coin")


def test_saved_drop_tables_have_explicit_fields(tmp_path: Path) -> None:
    CatalogWriter(tmp_path).save(_build_catalog().snapshot())

    payload = json.loads((tmp_path / "drop_tables.json").read_text(encoding="utf-8"))
    assert payload["baron-loot"]["single"] is False
    assert payload["baron-loot"]["drops"]["zombie"] == {
        "type": "mob",
        "chance": 0.25,
        "min": 1,
        "max": 1,
        "objective": "minion",
    }
    assert not (tmp_path / "drop_tables.json.tmp").exists()
