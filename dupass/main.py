#!/usr/bin/env python3
"""
dupass - Duplicate Password Analysis for Identity Risk Data
===========================================================

Command-line interface for listing accounts that share passwords.

Usage:
    # Credentials from the environment
    export FALCON_CLIENT_ID=... FALCON_CLIENT_SECRET=...
    python -m dupass

    # Explicit credentials and a JSON report
    python -m dupass --client-id ID --client-secret SECRET --json -o ./results

Options:
    --client-id         API client ID
    --client-secret     API client secret
    --base-url          API base URL
    --page-size         Entities per page (default: 1000)
    --delay             Seconds between page requests (default: 1.0)
    --max-pages         Stop after this many pages (default: no limit)
    --output, -o        Output directory (default: ./output)
    --json              Write dupass_results.json
    --verbose, -v       Verbose output

Environment Variables:
    FALCON_CLIENT_ID      API client ID
    FALCON_CLIENT_SECRET  API client secret
    FALCON_BASE_URL       API base URL

Exit codes:
    0  complete run
    1  authentication or other fatal error
    2  run finished with partial data
"""

import argparse
import sys

from . import __version__
from .pipeline import run_analysis
from .ingestion.auth import AuthenticationError
from .ingestion.paginator import PAGE_PROGRESS_PREFIX
from .reporting.report_builder import generate_text_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dupass",
        description="dupass - find identities that share duplicate passwords",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Credentials from FALCON_CLIENT_ID / FALCON_CLIENT_SECRET
  %(prog)s

  # Explicit credentials, JSON report
  %(prog)s --client-id ID --client-secret SECRET --json -o ./results
        """
    )

    api_group = parser.add_argument_group("API")
    api_group.add_argument(
        "--client-id",
        dest="client_id",
        help="API client ID (default: $FALCON_CLIENT_ID)"
    )
    api_group.add_argument(
        "--client-secret",
        dest="client_secret",
        help="API client secret (default: $FALCON_CLIENT_SECRET)"
    )
    api_group.add_argument(
        "--base-url",
        dest="base_url",
        help="API base URL (default: $FALCON_BASE_URL or the US-1 cloud)"
    )

    paging_group = parser.add_argument_group("Retrieval")
    paging_group.add_argument(
        "--page-size",
        type=int,
        default=1000,
        help="Entities requested per page (default: 1000)"
    )
    paging_group.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Seconds to wait between page requests (default: 1.0)"
    )
    paging_group.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Stop after this many pages; the run is then reported as partial"
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "-o", "--output",
        default="output",
        help="Output directory for results (default: ./output)"
    )
    output_group.add_argument(
        "--json",
        action="store_true",
        help="Write the results as JSON to the output directory"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"dupass {__version__}"
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    api_config = {}
    if args.base_url:
        api_config["base_url"] = args.base_url

    config = {
        "api": api_config,
        "pagination": {
            "page_size": args.page_size,
            "request_delay": args.delay,
            "max_pages": args.max_pages,
        },
        "output": {
            "output_dir": args.output,
            "generate_json": args.json,
        },
        "verbose": args.verbose,
    }

    try:
        result = run_analysis(
            client_id=args.client_id,
            client_secret=args.client_secret,
            config=config,
            progress_callback=None if args.verbose else _print_progress
        )
    except AuthenticationError as e:
        print(f"\n[!] Authentication failed: {e}")
        return 1
    except Exception as e:
        print(f"\n[!] Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    print(generate_text_report(result))

    if result.report_path:
        print(f"\nResults saved to: {result.report_path}")

    return 0 if result.complete else 2


def _print_progress(message: str) -> None:
    """Show page progress and warnings even without --verbose."""
    if message.startswith(("[!]", "[+]", PAGE_PROGRESS_PREFIX)):
        print(message)


if __name__ == "__main__":
    sys.exit(main())
