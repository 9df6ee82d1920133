"""Command line interface for the Kontent.ai migrator."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .clients import DeliveryClient, ManagementClient
from .config import KontentConfig
from .errors import ConfigurationError, KontentMigratorError
from .executor import ItemMigrationExecutor
from .models.mapping import MigrationConfig
from .models.migration import (
    Environment,
    MigrationItem,
    MigrationProgress,
    TypeMigrationConfig,
    TypeMigrationOptions,
    TypeMigrationStatus,
)
from .services.dry_run import DryRunPreview
from .type_migrator import ContentTypeMigrator

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    commands = {
        "types": run_list_types,
        "map": run_mapping,
        "items": run_list_items,
        "preview": run_preview,
        "migrate-items": run_item_migration,
        "compare-types": run_type_comparison,
        "migrate-types": run_type_migration,
    }

    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except KontentMigratorError as e:
        logger.error(str(e))
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kontent-migrator",
        description="Kontent.ai Migrator - Move content items and content types"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # List content types
    subparsers.add_parser("types", help="List content types of the environment")

    # Show generated mappings
    map_parser = subparsers.add_parser("map", help="Show field mappings between two content types")
    _add_type_pair_arguments(map_parser)
    map_parser.add_argument("--output", help="Write the mapping as JSON to this file")

    # List items
    items_parser = subparsers.add_parser("items", help="List content items of a content type")
    items_parser.add_argument("--type", required=True, help="Content type codename")
    items_parser.add_argument("--language", help="Language codename")

    # Dry run
    preview_parser = subparsers.add_parser("preview", help="Preview an item migration")
    _add_type_pair_arguments(preview_parser)
    _add_item_arguments(preview_parser)
    preview_parser.add_argument(
        "--sample", action="store_true", help="Use sample values instead of reading the items"
    )
    preview_parser.add_argument("--output", help="Write the preview as JSON to this file")

    # Item migration
    migrate_parser = subparsers.add_parser("migrate-items", help="Migrate content items")
    _add_type_pair_arguments(migrate_parser)
    _add_item_arguments(migrate_parser)
    migrate_parser.add_argument("--delay", type=float, help="Seconds to wait between items")
    migrate_parser.add_argument("--dry-run", action="store_true", help="Preview without changes")
    migrate_parser.add_argument("--output", help="Write the report as JSON to this file")

    # Content type comparison and migration
    compare_parser = subparsers.add_parser(
        "compare-types", help="Compare content types of two environments"
    )
    _add_environment_arguments(compare_parser)
    compare_parser.add_argument("--output", help="Write the plan as JSON to this file")

    types_parser = subparsers.add_parser(
        "migrate-types", help="Copy content types into another environment"
    )
    _add_environment_arguments(types_parser)
    types_parser.add_argument("--dry-run", action="store_true", help="Only report the plan")
    types_parser.add_argument(
        "--overwrite", action="store_true", help="Request updates of existing content types"
    )
    types_parser.add_argument(
        "--include-groups", action="store_true", help="Copy content groups with the types"
    )
    types_parser.add_argument("--output", help="Write the result as JSON to this file")

    return parser


def _add_type_pair_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--source", required=True, help="Source content type codename")
    parser.add_argument("--target", required=True, help="Target content type codename")
    parser.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="SOURCE=TARGET",
        help="Override a mapping by element codename (empty TARGET unmaps)",
    )


def _add_item_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--items", help="Comma separated item codenames (default: all)")
    parser.add_argument("--language", help="Language codename")


def _add_environment_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--source-env", required=True, help="JSON file with the source environment")
    parser.add_argument("--target-env", required=True, help="JSON file with the target environment")
    parser.add_argument("--types", required=True, help="Comma separated content type codenames")


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _write_output(path: Optional[str], data: Any):
    if not path:
        return
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    print(f"Report saved to {path}")


def _build_migration_config(args, config: KontentConfig, client: ManagementClient) -> MigrationConfig:
    """Fetch both content types, generate mappings and apply --map overrides."""
    source_type = client.get_content_type(args.source)
    target_type = client.get_content_type(args.target)
    language = getattr(args, "language", None) or config.language

    migration_config = MigrationConfig.create(source_type, target_type, language=language)

    for override in args.map:
        source_codename, _, target_codename = override.partition("=")
        source_codename = source_codename.strip()
        target_codename = target_codename.strip()

        if target_codename and target_type.get_element(target_codename) is None:
            raise ConfigurationError(f"Unknown target element: {target_codename}")
        if migration_config.update_field_mapping_by_codename(source_codename, target_codename) is None:
            raise ConfigurationError(f"Unknown source element: {source_codename}")

    return migration_config


def _select_items(args, config: KontentConfig, language: str) -> List[MigrationItem]:
    delivery = DeliveryClient.from_config(config)
    items = delivery.list_items(args.source, language)

    wanted = _split(args.items)
    if wanted:
        items = [item for item in items if item.codename in wanted]
    return items


def _print_mappings(migration_config: MigrationConfig):
    print(f"\n=== {migration_config.source_content_type.name} -> "
          f"{migration_config.target_content_type.name} ===")
    for mapping in migration_config.field_mappings:
        target = mapping.target_field.codename if mapping.target_field else "-"
        print(f"  {mapping.source_field.codename} -> {target}: {mapping.hint}")


def run_list_types(args) -> int:
    """List content types."""
    config = KontentConfig.from_env()
    client = ManagementClient.from_config(config)

    print("\n=== Content Types ===")
    for content_type in client.list_content_types():
        print(f"  {content_type.codename}: {content_type.name} ({len(content_type.elements)} elements)")
    return 0


def run_mapping(args) -> int:
    """Show the generated mappings between two content types."""
    config = KontentConfig.from_env()
    client = ManagementClient.from_config(config)

    migration_config = _build_migration_config(args, config, client)
    _print_mappings(migration_config)
    _write_output(args.output, migration_config.to_dict())
    return 0


def run_list_items(args) -> int:
    """List items of a content type."""
    config = KontentConfig.from_env()
    language = args.language or config.language
    delivery = DeliveryClient.from_config(config)

    items = delivery.list_items(args.type, language)
    print(f"\n=== {args.type} items ({language}) ===")
    for item in items:
        print(f"  {item.codename}: {item.name}")
    return 0


def run_preview(args) -> int:
    """Dry run of an item migration."""
    config = KontentConfig.from_env()
    client = ManagementClient.from_config(config)

    migration_config = _build_migration_config(args, config, client)
    items = _select_items(args, config, migration_config.language)

    preview = DryRunPreview(client=None if args.sample else client)
    results = preview.preview(migration_config, items)

    for result in results:
        print(f"\n=== {result.item_name} ===")
        for field in result.transformed_fields:
            print(f"  {field.source_field} -> {field.target_field} [{field.transformation_type}]")
            print(f"    {field.source_value!r} => {field.transformed_value!r}")
        for warning in result.warnings:
            print(f"  ! {warning}")

    _write_output(args.output, [r.to_dict() for r in results])
    return 0


def run_item_migration(args) -> int:
    """Migrate content items into another content type."""
    if args.dry_run:
        return run_preview(argparse.Namespace(**{**vars(args), "sample": False}))

    config = KontentConfig.from_env()
    client = ManagementClient.from_config(config)

    migration_config = _build_migration_config(args, config, client)
    items = _select_items(args, config, migration_config.language)

    def report(progress: MigrationProgress):
        print(f"  [{progress.processed}/{progress.total}] "
              f"{progress.successful} ok, {progress.failed} failed")

    executor = ItemMigrationExecutor(
        client,
        delay_seconds=args.delay if args.delay is not None else config.item_delay,
        on_progress=report,
    )
    progress = executor.execute(migration_config, items)

    print("\n" + "=" * 60)
    print("MIGRATION COMPLETE")
    print("=" * 60)
    print(f"Items Processed: {progress.processed}")
    print(f"Succeeded: {progress.successful}")
    print(f"Failed: {progress.failed}")
    for error in progress.errors:
        print(f"  - {error.item_name}: {error.error}")
    if progress.duration_seconds:
        print(f"Duration: {progress.duration_seconds:.2f} seconds")

    _write_output(args.output, progress.to_dict())
    return 0 if progress.failed == 0 else 1


def _load_environment(path: str) -> Environment:
    with open(path) as f:
        data: Dict[str, Any] = json.load(f)
    return Environment.from_dict(data)


def _type_migration_config(args) -> TypeMigrationConfig:
    return TypeMigrationConfig(
        source_environment=_load_environment(args.source_env),
        target_environment=_load_environment(args.target_env),
        selected_content_types=_split(args.types),
        options=TypeMigrationOptions(
            include_content_groups=getattr(args, "include_groups", False),
            overwrite_existing=getattr(args, "overwrite", False),
            dry_run=getattr(args, "dry_run", False),
        ),
    )


def run_type_comparison(args) -> int:
    """Compare content types between two environments."""
    migrator = ContentTypeMigrator()
    plan = migrator.compare(_type_migration_config(args))

    print("\n=== Content Type Comparison ===")
    print(f"To create: {', '.join(t.codename for t in plan.to_create) or '-'}")
    print(f"To update: {', '.join(t.codename for t in plan.to_update) or '-'}")
    for conflict in plan.conflicts:
        print(f"  ! {conflict.content_type}: {conflict.reason}")

    _write_output(args.output, plan.to_dict())
    return 0 if not plan.conflicts else 1


def run_type_migration(args) -> int:
    """Copy content types into another environment."""
    def report(status: TypeMigrationStatus):
        print(f"  [{status.progress:3.0f}%] {status.current_step}")

    migrator = ContentTypeMigrator(on_status=report)
    result = migrator.migrate(_type_migration_config(args))

    print("\n" + "=" * 60)
    print("CONTENT TYPE MIGRATION " + ("COMPLETE" if result.success else "FAILED"))
    print("=" * 60)
    print(f"Created: {', '.join(t.codename for t in result.created) or '-'}")
    print(f"Updated: {', '.join(t.codename for t in result.updated) or '-'}")
    print(f"Skipped: {', '.join(t.codename for t in result.skipped) or '-'}")
    for warning in result.warnings:
        print(f"  ! {warning}")
    for error in result.errors:
        print(f"  - {error.content_type}: {error.error}")

    _write_output(args.output, result.to_dict())
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
