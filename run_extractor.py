#!/usr/bin/env python3
"""
CLI script to run the extractor on saved pages.

Reads listing or detail HTML files from disk and prints the extracted
records as JSON.  No network access: save a page from the browser first.

Usage:
    python run_extractor.py listing.html
    python run_extractor.py --kind detail blueprint1.html blueprint2.html
    python run_extractor.py --kind detail --include-blueprint page.html -o out.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from blueprint_parser.extractor import BlueprintExtractor
from blueprint_parser.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(description="Extract blueprint records from saved HTML pages")
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument(
        "--kind", "-k",
        choices=["listing", "detail"],
        default="listing",
        help="Page type (default: listing)"
    )
    parser.add_argument(
        "--include-blueprint", "-b",
        action="store_true",
        help="Include the raw blueprint string (detail pages only)"
    )
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)
    extractor = BlueprintExtractor()

    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Extracting: {path.name}", file=sys.stderr)

        try:
            html = path.read_text(encoding="utf-8", errors="replace")

            if args.kind == "listing":
                blueprints = extractor.parse_listing(html)
                records = [b.model_dump() for b in blueprints]
                print(f"  ✓ {len(blueprints)} blueprints", file=sys.stderr)
            else:
                details = extractor.parse_detail(html, include_blueprint=args.include_blueprint)
                records = details.model_dump()
                print(f"  ✓ {len(details.requirements)} requirements, {len(details.tags)} tags",
                      file=sys.stderr)

            results.append({
                "file": path.name,
                "status": "success",
                "records": records
            })

        except OSError as e:
            results.append({
                "file": path.name,
                "status": "error",
                "error": str(e)
            })
            print(f"  ✗ Error: {e}", file=sys.stderr)

    # ensure_ascii=False keeps blueprint names with non-ASCII characters readable
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
