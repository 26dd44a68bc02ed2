"""Static catalog validation utilities."""
from __future__ import annotations

from dataclasses import dataclass

from beastmaster.core.types import Severity
from beastmaster.domain.defs import DropKind
from beastmaster.services import inheritance
from beastmaster.services.catalog import CatalogSnapshot


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_catalog(snapshot: CatalogSnapshot) -> list[Issue]:
    """Return every problem found in ``snapshot``, errors and warnings alike."""
    issues: list[Issue] = []
    _validate_parents(snapshot, issues)
    _validate_references(snapshot, issues)
    _validate_drop_tables(snapshot, issues)
    return issues


def has_errors(issues: list[Issue]) -> bool:
    return any(issue.severity == "ERROR" for issue in issues)


def _validate_parents(snapshot: CatalogSnapshot, issues: list[Issue]) -> None:
    reported_cycles: set[frozenset[str]] = set()
    for mob_type in snapshot.mob_types.values():
        parent_id = mob_type.parent_type_id
        if parent_id is not None and snapshot.lookup_mob_type(parent_id) is None:
            issues.append(
                Issue(
                    severity="WARNING",
                    code="DANGLING_PARENT",
                    message="Parent mob type does not exist; inheritance is disabled.",
                    context={"mob_type": mob_type.id, "parent_type": parent_id},
                )
            )
        cycle = inheritance.find_inheritance_cycle(mob_type, snapshot.lookup_mob_type)
        if cycle is not None and frozenset(cycle) not in reported_cycles:
            reported_cycles.add(frozenset(cycle))
            issues.append(
                Issue(
                    severity="ERROR",
                    code="INHERITANCE_CYCLE",
                    message="Mob type parent chain loops back on itself.",
                    context={"cycle": " -> ".join(cycle)},
                )
            )
        if not mob_type.predefined and not [
            slot for slot in mob_type.overridden_properties() if slot.id != "parent-type"
        ]:
            issues.append(
                Issue(
                    severity="INFO",
                    code="NO_OVERRIDES",
                    message="Custom mob type overrides no properties.",
                    context={"mob_type": mob_type.id},
                )
            )


def _validate_references(snapshot: CatalogSnapshot, issues: list[Issue]) -> None:
    for mob_type in snapshot.mob_types.values():
        for slot in mob_type.overridden_properties():
            references = slot.kind.references
            if not references or not isinstance(slot.value, str):
                continue
            reference_id = slot.value
            found = (
                ("loot" in references and snapshot.lookup_drop_table(reference_id) is not None)
                or ("item" in references and snapshot.lookup_item(reference_id) is not None)
                or ("mob" in references and snapshot.lookup_mob_type(reference_id) is not None)
            )
            # Potion sets live in a catalog this package does not own.
            if found or references == ("potion_set",):
                continue
            issues.append(
                Issue(
                    severity="WARNING",
                    code="MISSING_REFERENCE",
                    message=f"Property refers to no known {' or '.join(references)}.",
                    context={"mob_type": mob_type.id, "property": slot.id, "referenced_id": reference_id},
                )
            )


def _validate_drop_tables(snapshot: CatalogSnapshot, issues: list[Issue]) -> None:
    for table in snapshot.drop_tables.values():
        for entry in table.entries:
            context = {"drop_table": table.id, "drop": entry.key}
            if entry.kind is DropKind.MOB and snapshot.lookup_mob_type(entry.payload_id) is None:
                issues.append(
                    Issue(
                        severity="WARNING",
                        code="UNKNOWN_DROP_MOB",
                        message="Mob drop refers to an unknown mob type.",
                        context=context,
                    )
                )
            if entry.kind is not DropKind.ITEM:
                continue
            item = snapshot.lookup_item(entry.payload_id)
            if item is None:
                issues.append(
                    Issue(
                        severity="WARNING",
                        code="UNKNOWN_DROP_ITEM",
                        message="Item drop refers to an unknown item.",
                        context=context,
                    )
                )
            elif item.is_special():
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="SPECIAL_ITEM_DROP",
                        message="Special items cannot be dropped as item stacks.",
                        context=context,
                    )
                )
