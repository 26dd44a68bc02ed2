import json
import logging
from pathlib import Path

import pytest

from beastmaster.data.errors import DataLoadError, DataValidationError
from beastmaster.data.repositories import DropTablesRepository, ItemsRepository, MobTypesRepository
from beastmaster.domain.defs import DropKind
from beastmaster.services.catalog import Catalog


def test_missing_files_give_predefined_types_and_special_items(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)

    mob_types = MobTypesRepository(base_path=definitions_dir)
    items = ItemsRepository(base_path=definitions_dir)
    tables = DropTablesRepository(base_path=definitions_dir)

    assert mob_types.as_dict()["zombie"].predefined
    assert set(items.as_dict()) == {"default", "nothing"}
    assert tables.as_dict() == {}


def test_mob_types_repo_loads_custom_and_predefined_overrides(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "mob_types.json",
        {
            "zombie": {"properties": {"health": 30, "entity-type": "zombie"}},
            "zombie-baron": {
                "properties": {
                    "parent-type": "zombie",
                    "health": 200.0,
                    "groups": ["undead", "boss"],
                    "spawn-sound": {"sound": "entity.zombie.ambient", "volume": 1.0, "pitch": 0.6},
                }
            },
        },
    )
    repo = MobTypesRepository(base_path=definitions_dir)

    zombie = repo.as_dict()["zombie"]
    baron = repo.as_dict()["zombie-baron"]
    assert zombie.get_property("health").value == 30.0
    assert baron.parent_type_id == "zombie"
    assert not baron.predefined
    assert baron.get_property("groups").value == frozenset({"undead", "boss"})
    assert baron.get_property("spawn-sound").value.pitch == 0.6


def test_mob_types_repo_skips_unknown_and_immutable_properties(tmp_path: Path, caplog) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "mob_types.json",
        {
            "zombie": {"properties": {"parent-type": "skeleton", "wings": True}},
            "lonely": {},
        },
    )
    repo = MobTypesRepository(base_path=definitions_dir)

    with caplog.at_level(logging.WARNING, logger="beastmaster"):
        zombie = repo.as_dict()["zombie"]

    assert zombie.parent_type_id is None
    messages = caplog.text
    assert "wings" in messages
    assert "parent-type" in messages
    assert "lonely" in messages


def test_mob_types_repo_invalid_value_raises(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "mob_types.json", {"custom": {"properties": {"baby-percent": 150}}})

    with pytest.raises(DataValidationError):
        MobTypesRepository(base_path=definitions_dir).as_dict()["custom"]


def test_drop_tables_repo_preserves_order_and_infers_kinds(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "drop_tables.json",
        {
            "baron-loot": {
                "single": False,
                "drops": {
                    "zombie": {"chance": 0.2},
                    "gold_coin": {"chance": 1.0, "min": 5, "max": 10, "objective": "loot"},
                    "nothing": {"chance": 0.5},
                    "skeleton": {"type": "item", "chance": 0.1},
                },
            }
        },
    )
    mob_types = MobTypesRepository(base_path=definitions_dir)
    table = DropTablesRepository(base_path=definitions_dir, mob_types_repo=mob_types).as_dict()["baron-loot"]

    assert not table.single
    assert [entry.key for entry in table.entries] == ["zombie", "gold_coin", "nothing", "skeleton"]
    assert [entry.kind for entry in table.entries] == [
        DropKind.MOB,
        DropKind.ITEM,
        DropKind.NOTHING,
        DropKind.ITEM,
    ]
    gold = table.get_entry("gold_coin")
    assert (gold.min_qty, gold.max_qty, gold.objective) == (5, 10, "loot")
    assert table.get_entry("nothing").payload_id is None
    assert table.get_entry("zombie").min_qty == table.get_entry("zombie").max_qty == 1


@pytest.mark.parametrize(
    "entry",
    [
        {"chance": 1.5},
        {"chance": 0.5, "min": 3, "max": 2},
        {"chance": 0.5, "min": -1},
        {"chance": "high"},
        {"chance": 0.5, "weight": 3},
        {"chance": 0.5, "type": "potion"},
    ],
)
def test_drop_tables_repo_rejects_invalid_entries(tmp_path: Path, entry: dict) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "drop_tables.json", {"bad": {"drops": {"gold_coin": entry}}})

    with pytest.raises(DataValidationError):
        DropTablesRepository(base_path=definitions_dir).as_dict()["bad"]


def test_drop_tables_repo_nothing_type_requires_nothing_id(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "drop_tables.json", {"bad": {"drops": {"gold": {"type": "nothing"}}}})

    with pytest.raises(DataValidationError):
        DropTablesRepository(base_path=definitions_dir).as_dict()["bad"]


def test_items_repo_loads_items_and_rejects_special_ids(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", {"gold_coin": {"material": "gold_nugget", "name": "Gold Coin"}})

    item = ItemsRepository(base_path=definitions_dir).as_dict()["gold_coin"]
    assert item.material == "gold_nugget"
    assert item.display_name == "Gold Coin"

    _write_json(definitions_dir / "items.json", {"default": {"material": "stone"}})
    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=definitions_dir).as_dict()["default"]


def test_items_repo_rejects_unknown_fields(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", {"gold_coin": {"material": "gold_nugget", "price": 3}})

    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=definitions_dir).as_dict()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "items.json").write_text("{ not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        ItemsRepository(base_path=definitions_dir).as_dict()


def test_top_level_must_be_object(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "mob_types.json", ["zombie"])

    with pytest.raises(DataValidationError):
        MobTypesRepository(base_path=definitions_dir).as_dict()


def test_catalog_load_from_definitions(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "mob_types.json", {"zombie-baron": {"properties": {"parent-type": "zombie"}}})
    _write_json(definitions_dir / "drop_tables.json", {"gold": {"drops": {"gold_coin": {"chance": 1.0}}}})
    _write_json(definitions_dir / "items.json", {"gold_coin": {"material": "gold_nugget"}})

    snapshot = Catalog.load(definitions_dir).snapshot()

    assert snapshot.get_mob_type("zombie-baron").parent_type_id == "zombie"
    assert snapshot.lookup_drop_table("gold").single
    assert snapshot.lookup_item("gold_coin").material == "gold_nugget"
    assert snapshot.lookup_item("nothing").is_special()


def test_catalog_reload_failure_keeps_current_snapshot(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    catalog = Catalog.load(definitions_dir)
    before = catalog.snapshot()
    (definitions_dir / "mob_types.json").write_text("[", encoding="utf-8")

    with pytest.raises(DataLoadError):
        catalog.reload(definitions_dir)
    assert catalog.snapshot() is before


def test_catalog_load_warns_about_each_parent_loop_once(tmp_path: Path, caplog) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "mob_types.json",
        {
            "a": {"properties": {"parent-type": "b"}},
            "b": {"properties": {"parent-type": "a"}},
            "c": {"properties": {"parent-type": "a"}},
            "zombie-baron": {"properties": {"parent-type": "zombie"}},
        },
    )

    with caplog.at_level(logging.WARNING, logger="beastmaster"):
        catalog = Catalog.load(definitions_dir)

    loops = [record.getMessage() for record in caplog.records if "loop" in record.getMessage()]
    assert loops == ["Mob types inherit from each other in a loop: a -> b -> a."]
    assert catalog.lookup_mob_type("c") is not None


def test_repository_sample_definitions_load() -> None:
    snapshot = Catalog.load().snapshot()
    baron = snapshot.get_mob_type("zombie-baron")

    assert snapshot.derived_value(baron, "health") == 200.0
    assert snapshot.drops_for(baron).id == "baron-loot"


def _write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir
