import threading

import pytest

from beastmaster.domain.defs import DropEntry, DropKind, DropTable
from beastmaster.domain.errors import CyclicInheritanceError, ImmutablePropertyError, UnknownPropertyError
from beastmaster.domain.mob_type import MobType
from beastmaster.services.catalog import Catalog, snapshot_ids
from beastmaster.services.errors import CatalogError, MobTypeInUseError


def test_default_catalog_has_predefined_types_and_special_items() -> None:
    snapshot = Catalog().snapshot()

    zombie = snapshot.get_mob_type("zombie")
    assert zombie.predefined
    assert snapshot.lookup_item("default").is_special()
    assert snapshot.lookup_item("nothing").is_special()
    assert snapshot.lookup_mob_type(None) is None
    with pytest.raises(KeyError):
        snapshot.get_mob_type("ghost")


def test_add_and_remove_custom_type() -> None:
    catalog = Catalog()
    baron = catalog.add_mob_type("zombie-baron", "zombie")

    assert catalog.lookup_mob_type("zombie-baron") is baron
    assert baron.parent_type_id == "zombie"

    catalog.remove_mob_type("zombie-baron")
    assert catalog.lookup_mob_type("zombie-baron") is None


def test_add_duplicate_or_blank_id_rejected() -> None:
    catalog = Catalog()

    with pytest.raises(CatalogError):
        catalog.add_mob_type("zombie", None)
    with pytest.raises(CatalogError):
        catalog.add_mob_type("  ", None)


def test_remove_predefined_unknown_or_parent_rejected() -> None:
    catalog = Catalog()
    catalog.add_mob_type("zombie-baron", "zombie")
    catalog.add_mob_type("zombie-squire", "zombie-baron")

    with pytest.raises(CatalogError):
        catalog.remove_mob_type("zombie")
    with pytest.raises(CatalogError):
        catalog.remove_mob_type("ghost")
    with pytest.raises(MobTypeInUseError) as excinfo:
        catalog.remove_mob_type("zombie-baron")
    assert excinfo.value.child_ids == ("zombie-squire",)


def test_set_property_swaps_snapshot_without_touching_old_one() -> None:
    catalog = Catalog()
    catalog.add_mob_type("zombie-baron", "zombie")
    before = catalog.snapshot()

    catalog.set_property("zombie-baron", "health", 200.0)
    after = catalog.snapshot()

    assert before.get_mob_type("zombie-baron").get_property("health").value is None
    assert after.get_mob_type("zombie-baron").get_property("health").value == 200.0
    assert after.derived_value(after.get_mob_type("zombie-baron"), "health") == 200.0


def test_set_property_errors_leave_catalog_unchanged() -> None:
    catalog = Catalog()
    catalog.add_mob_type("zombie-baron", "zombie")
    before = catalog.snapshot()

    with pytest.raises(ImmutablePropertyError):
        catalog.set_property("zombie", "parent-type", "skeleton")
    with pytest.raises(UnknownPropertyError):
        catalog.set_property("zombie-baron", "wings", True)
    with pytest.raises(CatalogError):
        catalog.set_property("ghost", "health", 1.0)
    assert catalog.snapshot() is before


def test_parent_change_creating_cycle_is_rejected() -> None:
    catalog = Catalog()
    catalog.add_mob_type("a", "zombie")
    catalog.add_mob_type("b", "a")
    before = catalog.snapshot()

    with pytest.raises(CyclicInheritanceError) as excinfo:
        catalog.set_property("a", "parent-type", "b")
    assert excinfo.value.cycle == ("a", "b", "a")
    assert catalog.snapshot() is before
    assert catalog.lookup_mob_type("a").parent_type_id == "zombie"


def test_drops_for_uses_derived_drops_property() -> None:
    table = DropTable(id="gold", entries=(DropEntry(kind=DropKind.ITEM, payload_id="gold", chance=1.0),))
    catalog = Catalog(drop_tables=[table])
    catalog.set_property("zombie", "drops", "gold")
    catalog.add_mob_type("zombie-baron", "zombie")
    snapshot = catalog.snapshot()

    assert snapshot.drops_for(snapshot.get_mob_type("zombie-baron")) is table
    assert snapshot.drops_for(snapshot.get_mob_type("skeleton")) is None


def test_put_and_remove_drop_table() -> None:
    catalog = Catalog()
    catalog.put_drop_table(DropTable(id="empty"))

    assert catalog.lookup_drop_table("empty") is not None
    catalog.remove_drop_table("empty")
    assert catalog.lookup_drop_table("empty") is None
    with pytest.raises(CatalogError):
        catalog.remove_drop_table("empty")


def test_snapshot_ids_lists_predefined_then_custom() -> None:
    catalog = Catalog()
    catalog.add_mob_type("alpha", "zombie")
    ids = snapshot_ids(catalog.snapshot())

    assert ids[-1] == "alpha"
    assert ids[0] == "bat"
    assert "alpha" not in ids[:-1]


def test_concurrent_edits_are_not_lost() -> None:
    catalog = Catalog()
    ids = [f"custom-{index}" for index in range(20)]

    threads = [threading.Thread(target=catalog.add_mob_type, args=(mob_id, "zombie")) for mob_id in ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = catalog.snapshot()
    assert {mob_type.id for mob_type in snapshot.custom_mob_types()} == set(ids)


def test_adding_type_that_closes_a_dangling_parent_loop_is_rejected() -> None:
    catalog = Catalog(mob_types=[MobType("a", "b")])
    before = catalog.snapshot()

    with pytest.raises(CyclicInheritanceError) as excinfo:
        catalog.add_mob_type("b", "a")
    assert excinfo.value.cycle == ("b", "a", "b")
    assert catalog.snapshot() is before
    assert catalog.lookup_mob_type("b") is None

    catalog.add_mob_type("b", "zombie")
    assert catalog.lookup_mob_type("b").parent_type_id == "zombie"
