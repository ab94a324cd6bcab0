"""Command line entry point for the OpenAsset client."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from tabulate import tabulate

from openasset_client.admin.move_keywords import DEFAULT_BATCH_SIZE, KeywordFieldMigrator
from openasset_client.api.rest_client import RestClient
from openasset_client.api.rest_options import QueryOptions
from openasset_client.models import OpenAssetError
from openasset_client.utils.auth import create_session
from openasset_client.utils.validator import INSERT_MODES

logger = logging.getLogger(__name__)

URL_ENV = "OPENASSET_URL"


def configure_logging(level: str) -> None:
    """Configure logging output for the given level name.

    Raises:
        ValueError: If the level name is unknown
    """
    value = getattr(logging, level.upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(
        level=value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="OpenAsset REST client")

    # Global arguments
    parser.add_argument(
        "--url",
        default=os.environ.get(URL_ENV),
        help=f"OpenAsset instance address (default: ${URL_ENV})",
    )
    parser.add_argument("--username", help="API username (default: $OPENASSET_USERNAME)")
    parser.add_argument("--password", help="API password (default: $OPENASSET_PASSWORD)")
    parser.add_argument("--dry-run", action="store_true", help="Run without making changes")
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands", required=True)

    move_parser = subparsers.add_parser(
        "move-keywords", help="Move file keywords into a field for every file in an album"
    )
    move_parser.add_argument("album", help="Album id")
    move_parser.add_argument("target_field", help="Target field id")
    move_parser.add_argument(
        "--keyword-category",
        dest="keyword_categories",
        action="append",
        required=True,
        help="Keyword category id (repeat for several categories)",
    )
    move_parser.add_argument(
        "--separator", default=";", help="Separator between keyword names (default: ;)"
    )
    move_parser.add_argument(
        "--insert-mode", choices=INSERT_MODES, default="append", help="append or overwrite"
    )
    move_parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Files per update request (default: {DEFAULT_BATCH_SIZE})",
    )

    fields_parser = subparsers.add_parser("list-fields", help="List fields")
    fields_parser.add_argument("--name", help="Only fields with this exact name")

    subparsers.add_parser("list-keyword-categories", help="List file keyword categories")

    return parser.parse_args(argv)


def build_client(args: argparse.Namespace) -> RestClient:
    if not args.url:
        raise OpenAssetError(f"Please specify --url or set {URL_ENV}")
    try:
        session = create_session(args.username, args.password)
    except ValueError as e:
        raise OpenAssetError(str(e)) from e
    return RestClient(args.url, session=session, dry_run=args.dry_run)


def print_fields(client: RestClient, name: Optional[str] = None) -> None:
    options = QueryOptions({"limit": "0"})
    if name:
        options.add_option("name", name)
        options.add_option("textMatching", "exact")

    fields = client.get_fields(options)
    if not fields:
        print("No fields found")
        return

    rows = [
        [item.id, item.name, item.field_type, item.field_display_type, item.restricted]
        for item in fields
    ]
    headers = ["Id", "Name", "Type", "Display Type", "Restricted"]
    print(tabulate(rows, headers=headers, tablefmt="psql"))


def print_keyword_categories(client: RestClient) -> None:
    categories = client.get_keyword_categories(QueryOptions({"limit": "0"}))
    if not categories:
        print("No keyword categories found")
        return

    rows = [[item.id, item.name, item.category_id] for item in categories]
    print(tabulate(rows, headers=["Id", "Name", "Category Id"], tablefmt="psql"))


def run_move_keywords(client: RestClient, args: argparse.Namespace) -> None:
    migrator = KeywordFieldMigrator(client)
    report = migrator.move_keywords_to_field(
        args.album,
        args.keyword_categories,
        args.target_field,
        args.separator,
        args.insert_mode,
        args.batch_size,
    )

    print("\nBatch summary:")
    print(
        tabulate(
            report.rows(),
            headers=["Batch", "Files", "Changed", "Status"],
            tablefmt="psql",
        )
    )
    print(
        f"\nProcessed {report.files_updated} files in album {report.album.name!r} "
        f"into field {report.target_field.name!r}"
    )
    if report.progress.failed_batches:
        print(f"Failed batches: {', '.join(map(str, report.progress.failed_batches))}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the OpenAsset client CLI."""
    args = parse_arguments(argv)
    configure_logging(args.log_level)

    try:
        client = build_client(args)

        if args.command == "move-keywords":
            run_move_keywords(client, args)
        elif args.command == "list-fields":
            print_fields(client, args.name)
        elif args.command == "list-keyword-categories":
            print_keyword_categories(client)
    except OpenAssetError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
