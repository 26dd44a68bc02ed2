from beastmaster.domain.defs import DropEntry, DropKind, DropTable, ItemDef
from beastmaster.domain.mob_type import MobType
from beastmaster.services.catalog import Catalog
from beastmaster.services.catalog_validator import Issue, format_issue, has_errors, validate_catalog


def _codes(issues: list[Issue]) -> list[str]:
    return sorted(issue.code for issue in issues)


def test_clean_catalog_has_no_issues() -> None:
    catalog = Catalog(
        drop_tables=[
            DropTable(id="gold", entries=(DropEntry(kind=DropKind.ITEM, payload_id="gold_coin", chance=1.0),))
        ],
        items=[ItemDef(id="gold_coin", material="gold_nugget")],
    )
    catalog.add_mob_type("zombie-baron", "zombie")
    catalog.set_property("zombie-baron", "drops", "gold")

    assert validate_catalog(catalog.snapshot()) == []


def test_dangling_parent_and_empty_custom_type() -> None:
    catalog = Catalog()
    catalog.add_mob_type("orphan", "ghost")

    issues = validate_catalog(catalog.snapshot())

    assert _codes(issues) == ["DANGLING_PARENT", "NO_OVERRIDES"]
    assert not has_errors(issues)
    dangling = next(issue for issue in issues if issue.code == "DANGLING_PARENT")
    assert dangling.severity == "WARNING"
    assert dangling.context == {"mob_type": "orphan", "parent_type": "ghost"}


def test_cycle_reported_once_as_error() -> None:
    first = MobType("a", "b")
    second = MobType("b", "a")
    first.set_property("health", 1)
    second.set_property("health", 2)
    catalog = Catalog(mob_types=[first, second])

    issues = validate_catalog(catalog.snapshot())

    assert _codes(issues) == ["INHERITANCE_CYCLE"]
    assert has_errors(issues)


def test_missing_references_are_warnings() -> None:
    catalog = Catalog()
    catalog.add_mob_type("boss", "zombie")
    catalog.set_property("boss", "drops", "no-such-table")
    catalog.set_property("boss", "helmet", "no-such-item")
    catalog.set_property("boss", "passenger", "skeleton")
    catalog.set_property("boss", "potion-buffs", "strength")

    issues = validate_catalog(catalog.snapshot())

    missing = [issue for issue in issues if issue.code == "MISSING_REFERENCE"]
    assert sorted(issue.context["property"] for issue in missing) == ["drops", "helmet"]
    assert all(issue.severity == "WARNING" for issue in missing)


def test_drop_table_entry_problems() -> None:
    table = DropTable(
        id="bad",
        entries=(
            DropEntry(kind=DropKind.ITEM, payload_id="default", chance=0.5),
            DropEntry(kind=DropKind.ITEM, payload_id="unknown_item", chance=0.5),
            DropEntry(kind=DropKind.MOB, payload_id="ghost", chance=0.5),
            DropEntry(kind=DropKind.NOTHING, payload_id=None, chance=0.5),
        ),
    )

    issues = validate_catalog(Catalog(drop_tables=[table]).snapshot())

    assert _codes(issues) == ["SPECIAL_ITEM_DROP", "UNKNOWN_DROP_ITEM", "UNKNOWN_DROP_MOB"]
    assert has_errors(issues)


def test_format_issue() -> None:
    issue = Issue(severity="WARNING", code="DANGLING_PARENT", message="Missing parent.", context={"mob_type": "x"})

    assert format_issue(issue) == "[WARNING] DANGLING_PARENT: Missing parent. (mob_type=x)"
    assert format_issue(Issue("INFO", "X", "Note.", {})) == "[INFO] X: Note."
