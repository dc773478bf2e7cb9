"""Command-line entry point for the duplicate store check.

Loads environment variables, builds the configured store catalog and runs
the duplicate check for a proposed store, printing the result as JSON.
"""
from dotenv import load_dotenv
import argparse
import json
import os
import sys
from typing import List, Optional

# Load environment variables first, before any other imports
load_dotenv()

from storedup.catalog import create_catalog
from storedup.config import reload_config
from storedup.dedup import DuplicateStoreDetector, ensure_no_duplicate
from storedup.errors import CatalogError, DuplicateStoreError
from storedup.models import LinkInput
from storedup.utils.logger import configure_logging, log_error, log_info


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check whether a proposed store duplicates an existing one.")
    parser.add_argument('--name', type=str, default="", help='Proposed store name.')
    parser.add_argument('--url', action='append', default=[], help='Proposed link URL (repeatable).')
    parser.add_argument('--handle', action='append', default=[],
                        help='Proposed handle, optionally prefixed by platform: instagram:@mystore (repeatable).')
    parser.add_argument('--links-json', type=str, help='JSON file with a list of {url, handle, platform} links.')
    parser.add_argument('--catalog-backend', choices=['memory', 'file', 'sql'], help='Store catalog backend.')
    parser.add_argument('--catalog-file', type=str, help='JSON store export for the file backend.')
    parser.add_argument('--database-url', type=str, help='SQLAlchemy URL for the sql backend.')
    parser.add_argument('--threshold', type=float, help='Name similarity threshold (0-1).')
    parser.add_argument('--strict', action='store_true', help='Exit with status 1 when a duplicate is found.')
    return parser


def parse_handle(value: str) -> LinkInput:
    """Split ``platform:handle`` into a LinkInput; a bare value has no platform."""
    platform, sep, handle = value.partition(":")
    if not sep:
        return LinkInput(handle=value)
    return LinkInput(handle=handle, platform=platform.lower() or None)


def collect_links(args: argparse.Namespace) -> List[LinkInput]:
    links = [parse_handle(h) for h in args.handle]
    links.extend(LinkInput(url=u) for u in args.url)
    if args.links_json:
        with open(args.links_json, "r", encoding="utf-8") as f:
            links.extend(LinkInput.coerce(item) for item in json.load(f))
    return links


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Apply parsed arguments to environment variables
    if args.catalog_backend is not None:
        os.environ['CATALOG_BACKEND'] = args.catalog_backend
    if args.catalog_file is not None:
        os.environ['CATALOG_FILE_PATH'] = args.catalog_file
    if args.database_url is not None:
        os.environ['CATALOG_DATABASE_URL'] = args.database_url
    if args.threshold is not None:
        os.environ['DEDUP_SIMILARITY_THRESHOLD'] = str(args.threshold)

    config = reload_config()
    configure_logging(config.log_level, config.log_format, config.max_json_output_length)
    config.log_configuration()

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("Configuration issues found:", file=sys.stderr)
        for issue in issues:
            print(f"  - {issue}", file=sys.stderr)
        return 2

    try:
        links = collect_links(args)
    except (OSError, ValueError, AttributeError) as e:
        log_error("Cannot read links file", path=args.links_json, error=str(e))
        return 2

    catalog = create_catalog(config)
    detector = DuplicateStoreDetector(catalog, config)
    try:
        if args.strict:
            result = ensure_no_duplicate(detector, {"name": args.name, "links": links})
        else:
            result = detector.check_for_duplicates(args.name, links)
    except DuplicateStoreError as e:
        print(json.dumps(e.to_dict(), indent=2, ensure_ascii=False))
        return 1
    except CatalogError as e:
        log_error("Store catalog unavailable", backend=e.backend, error=e.message)
        return 2
    finally:
        catalog.close()

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    log_info("Duplicate check finished", has_duplicate=result.has_duplicate)
    return 0


if __name__ == "__main__":
    sys.exit(main())
