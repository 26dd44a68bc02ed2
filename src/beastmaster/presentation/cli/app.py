"""Command-line administration of mob types and drop tables."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Sequence

from beastmaster.core.logging_config import setup_logging
from beastmaster.core.rng import RNG
from beastmaster.data.errors import DataError
from beastmaster.domain.errors import BeastmasterError
from beastmaster.domain.mob_type import MobType
from beastmaster.presentation.cli import render
from beastmaster.presentation.cli.config import get_default_config_path, load_config, save_config
from beastmaster.services import Catalog, CatalogError, CatalogWriter, format_issue, select_one, validate_catalog
from beastmaster.services.catalog import snapshot_ids
from beastmaster.services.catalog_validator import has_errors

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_CATALOG = 2


class CliContext:
    """Catalog, writer and RNG shared by one command invocation."""

    def __init__(self, catalog: Catalog, writer: CatalogWriter, rng: RNG) -> None:
        self.catalog = catalog
        self.writer = writer
        self.rng = rng

    def require_mob_type(self, mob_type_id: str) -> MobType:
        mob_type = self.catalog.lookup_mob_type(mob_type_id)
        if mob_type is None:
            raise CatalogError(f"Mob type '{mob_type_id}' does not exist.")
        return mob_type

    def save(self) -> None:
        self.writer.save(self.catalog.snapshot())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="beastmaster", description="Administer mob types and drop tables.")
    parser.add_argument("--definitions", type=Path, help="Directory holding the JSON definition files.")
    parser.add_argument("--config", type=Path, help="Path to the config file.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...).")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file.")
    parser.add_argument("--seed", type=int, help="Seed for random selections.")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List all mob types.")

    info = commands.add_parser("info", help="Show a mob type and the properties it sets.")
    info.add_argument("mob_type")

    get = commands.add_parser("get", help="Show the derived value of a property.")
    get.add_argument("mob_type")
    get.add_argument("property")

    set_cmd = commands.add_parser("set", help="Set a property; omit the value to clear it.")
    set_cmd.add_argument("mob_type")
    set_cmd.add_argument("property")
    set_cmd.add_argument("value", nargs="?")

    add = commands.add_parser("add", help="Add a custom mob type.")
    add.add_argument("mob_type")
    add.add_argument("parent_type")

    remove = commands.add_parser("remove", help="Remove a custom mob type.")
    remove.add_argument("mob_type")

    drops = commands.add_parser("drops", help="Describe a drop table and roll it.")
    drops.add_argument("table")
    drops.add_argument("--guarantee", action="store_true", help="Always select an entry.")
    drops.add_argument("--times", type=int, default=1, help="Number of selections to make.")

    commands.add_parser("validate", help="Check the catalog for problems.")
    commands.add_parser(
        "config",
        help="Store the given --definitions, --log-level and --seed as defaults, then show the config.",
    )
    return parser


def _cmd_list(context: CliContext, args: argparse.Namespace) -> int:
    snapshot = context.catalog.snapshot()
    for mob_type_id in snapshot_ids(snapshot):
        print(render.describe_mob_type(snapshot.mob_types[mob_type_id], snapshot))
    return EXIT_OK


def _cmd_info(context: CliContext, args: argparse.Namespace) -> int:
    snapshot = context.catalog.snapshot()
    mob_type = context.require_mob_type(args.mob_type)
    print(render.describe_mob_type(mob_type, snapshot))
    lines = render.describe_overrides(mob_type)
    print("Overridden properties:" if lines else "No overridden properties.")
    for line in lines:
        print(line)
    return EXIT_OK


def _cmd_get(context: CliContext, args: argparse.Namespace) -> int:
    mob_type = context.require_mob_type(args.mob_type)
    print(render.describe_property(mob_type, args.property, context.catalog.snapshot()))
    return EXIT_OK


def _cmd_set(context: CliContext, args: argparse.Namespace) -> int:
    mob_type = context.require_mob_type(args.mob_type)
    value = None if args.value is None else mob_type.parse_property(args.property, args.value)
    updated = context.catalog.set_property(mob_type.id, args.property, value)
    context.save()
    print(render.describe_property(updated, args.property, context.catalog.snapshot()))
    return EXIT_OK


def _cmd_add(context: CliContext, args: argparse.Namespace) -> int:
    mob_type = context.catalog.add_mob_type(args.mob_type, args.parent_type)
    context.save()
    print(f"Added {render.describe_mob_type(mob_type, context.catalog.snapshot())}")
    return EXIT_OK


def _cmd_remove(context: CliContext, args: argparse.Namespace) -> int:
    context.catalog.remove_mob_type(args.mob_type)
    context.save()
    print(f"Removed mob type {args.mob_type}.")
    return EXIT_OK


def _cmd_drops(context: CliContext, args: argparse.Namespace) -> int:
    snapshot = context.catalog.snapshot()
    table = snapshot.lookup_drop_table(args.table)
    if table is None:
        raise CatalogError(f"Drop table '{args.table}' does not exist.")
    for line in render.describe_drop_table(table, snapshot):
        print(line)
    for roll in range(1, max(args.times, 0) + 1):
        entry = select_one(table, args.guarantee, context.rng)
        print(f"Roll {roll}: {render.describe_drop(entry, snapshot)}")
    return EXIT_OK


def _cmd_validate(context: CliContext, args: argparse.Namespace) -> int:
    issues = validate_catalog(context.catalog.snapshot())
    for issue in issues:
        print(format_issue(issue))
    if not issues:
        print("No problems found.")
    return EXIT_INVALID_CATALOG if has_errors(issues) else EXIT_OK


def _cmd_config(config: Dict[str, Any], config_path: Path, args: argparse.Namespace) -> int:
    updated = dict(config)
    if args.definitions is not None:
        updated["definitions_dir"] = str(args.definitions)
    if args.log_level is not None:
        updated["log_level"] = args.log_level
    if args.seed is not None:
        updated["seed"] = args.seed
    if updated != config:
        try:
            save_config(updated, config_path)
        except OSError as exc:
            print(f"Error: could not write {config_path}: {exc}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("Saved config to %s.", config_path)
    for key, value in sorted(load_config(config_path).items()):
        print(f"{key}: {'(default)' if value is None else value}")
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
    "list": _cmd_list,
    "info": _cmd_info,
    "get": _cmd_get,
    "set": _cmd_set,
    "add": _cmd_add,
    "remove": _cmd_remove,
    "drops": _cmd_drops,
    "validate": _cmd_validate,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run one CLI command and return its exit status."""
    args = build_parser().parse_args(argv)
    config_path = args.config or get_default_config_path()
    config = load_config(config_path)
    setup_logging(args.log_level or config["log_level"], args.log_file)
    if args.command == "config":
        return _cmd_config(config, config_path, args)

    definitions_dir = args.definitions or config["definitions_dir"]
    seed = args.seed if args.seed is not None else config["seed"]
    try:
        catalog = Catalog.load(definitions_dir)
        context = CliContext(catalog, CatalogWriter(definitions_dir), RNG(seed))
        return _COMMANDS[args.command](context, args)
    except (BeastmasterError, CatalogError, DataError) as exc:
        logger.debug("Command %s failed.", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
