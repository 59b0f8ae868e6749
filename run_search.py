#!/usr/bin/env python3
"""
Command-line script to query the live blueprint site.

Usage:
    python run_search.py "mall"
    python run_search.py "smelter" --tags "Iron Ingot,Magnet" --author someone
    python run_search.py --details /blueprints/some-blueprint --include-blueprint
"""

import argparse
import asyncio
import json
import sys

# Load .env file automatically
from dotenv import load_dotenv
load_dotenv()

from blueprint_parser.main import BlueprintService
from blueprint_parser.exceptions import FetchError, InvalidRequestError
from blueprint_parser.schemas import BlueprintSearchParams
from blueprint_parser.logger import setup_logger


async def run(args) -> object:
    service = BlueprintService()
    if args.details:
        details = await service.fetch_details(args.details, include_blueprint=args.include_blueprint)
        return details.model_dump()

    tags = [tag.strip() for tag in (args.tags or "").split(",") if tag.strip()]
    params = BlueprintSearchParams(search=args.search or "", tags=tags, author=args.author or "")
    return [b.model_dump() for b in await service.search(params)]


def main():
    parser = argparse.ArgumentParser(
        description="Search dysonsphereblueprints.com or fetch one blueprint's details"
    )
    parser.add_argument("search", nargs="?", help="Search text")
    parser.add_argument("--tags", "-t", help="Comma-separated tag list")
    parser.add_argument("--author", "-a", help="Author name")
    parser.add_argument("--details", "-d", metavar="PATH", help="Fetch details for /blueprints/<slug>")
    parser.add_argument(
        "--include-blueprint", "-b",
        action="store_true",
        help="Include the raw blueprint string with --details"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    import logging
    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    if not args.search and not args.details:
        parser.error("give search text or --details PATH")

    try:
        result = asyncio.run(run(args))
    except (FetchError, InvalidRequestError) as e:
        print(f"✗ Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
