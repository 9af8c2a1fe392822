#!/usr/bin/env python3
"""
Generates the static host's _redirects file (301 rules) and a CSV review
copy from the url-map.json written by the WordPress extractor.

Usage:
  python scripts/generate_redirects.py \\
    --url-map scripts/migration/output/url-map.json \\
    --output apps/web/public/_redirects
"""

import argparse
import json
import sys
from pathlib import Path

# Allow importing tiptap_migration when run as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiptap_migration.utils.redirects import build_redirect_rules, generate_redirects_csv, write_redirects_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate redirect rules from url-map.json")
    parser.add_argument("--url-map", default="scripts/migration/output/url-map.json")
    parser.add_argument("--output", default="apps/web/public/_redirects")
    parser.add_argument("--csv", default="reports/redirect_map.csv")
    parser.add_argument("--new-base", default="", help="Base URL of the new site for the CSV")
    args = parser.parse_args()

    with open(args.url_map, "r", encoding="utf-8") as f:
        url_map = json.load(f)
    print(f"Found {len(url_map)} URL mappings")

    count = write_redirects_file(url_map, args.output)
    _, skipped = build_redirect_rules(url_map)
    generate_redirects_csv(url_map, new_base=args.new_base, out_path=args.csv)

    print(f"Written {count} redirects to: {args.output}")
    print(f"Skipped {skipped} entries (same path or homepage)")


if __name__ == "__main__":
    main()
