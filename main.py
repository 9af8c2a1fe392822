"""
Entry point for the WordPress to TipTap content migration.
"""

import argparse
import sys

from tiptap_migration.migration_tool import MigrationTool
from tiptap_migration.utils.pre_flight_checks import PreFlightCheckError, run_pre_flight_checks

CONFIG_FILE = "config/migration_config.json"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert legacy WordPress posts and pages to TipTap documents."
    )
    parser.add_argument("--kind", choices=["posts", "pages", "all"], default="all")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration file")
    parser.add_argument("--dry-run", action="store_true", help="Convert without writing output files")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--limit", type=int, default=None, help="Convert at most N items per kind")
    parser.add_argument("--workers", type=int, default=None, help="Size of the conversion thread pool")
    parser.add_argument("--extract", metavar="WXR", help="Parse a WordPress XML export first")
    parser.add_argument("--audit-images", action="store_true", help="HEAD-check every converted image URL")
    parser.add_argument("--tag-inventory", action="store_true", help="Report HTML tags in the legacy content")
    parser.add_argument("--redirects", action="store_true", help="Generate redirect rules from url-map.json")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main function to run the migration.
    """
    args = parse_args(argv)
    tool = MigrationTool(config_file=args.config)
    migration = tool.config["migration"]
    if args.dry_run:
        migration["dry_run"] = True
    if args.verbose:
        migration["verbose"] = True
    if args.limit is not None:
        migration["limit"] = args.limit
    if args.workers is not None:
        migration["workers"] = args.workers

    tool.log_message("Starting WordPress to TipTap migration.")

    if args.extract:
        try:
            tool.extract_export(args.extract)
        except (OSError, ValueError) as e:
            tool.log_message(f"Could not extract {args.extract}: {e}", level="ERROR")
            return 1

    kinds = ["posts", "pages"] if args.kind == "all" else [args.kind]
    try:
        run_pre_flight_checks(tool.config, kinds)
    except PreFlightCheckError as e:
        tool.log_message(str(e), level="ERROR")
        return 1

    if args.tag_inventory:
        tool.tag_inventory(kinds)

    table = tool.load_url_table()
    converted = []
    failed = 0
    for kind in kinds:
        stats = tool.migrate(kind, table)
        converted.extend(stats["items"])
        failed += stats["errors"]

    if args.audit_images:
        tool.audit_images(converted)

    if args.redirects:
        try:
            tool.generate_redirects()
        except FileNotFoundError as e:
            tool.log_message(f"Redirects skipped, url-map.json not found: {e}", level="WARNING")

    tool.log_message("Migration process finished.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
