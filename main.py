#!/usr/bin/env python3
"""
Accessibility scan runner

Usage:
    python main.py https://example.com [--multi-page] [--max-pages 5]
"""

import argparse
import json
import sys

from a11y_audit import scan_website
from a11y_audit.platform.logger import get_logger
from a11y_audit.platform.utils.url_validator import is_safe_url, validate_url

logger = get_logger("a11y_audit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audit a website for common WCAG violations")
    parser.add_argument("url", help="Page to scan (http or https)")
    parser.add_argument("--multi-page", action="store_true", help="Crawl same-site links from the page")
    parser.add_argument("--max-pages", type=int, default=5, help="Page budget for multi-page scans (default: 5)")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_pages < 1:
        parser.error("--max-pages must be at least 1")

    is_valid, url, error = validate_url(args.url)
    if not is_valid:
        print(f"Invalid URL: {error}", file=sys.stderr)
        return 2
    if not is_safe_url(url):
        print("For security reasons, local or private network URLs cannot be scanned.", file=sys.stderr)
        return 2

    max_pages = args.max_pages if args.multi_page else 1
    result = scan_website(url, is_multi_page=args.multi_page, max_pages=max_pages)
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
