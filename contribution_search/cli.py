"""Command-line interface for contribution search."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from .analytics import compute_analytics
from .bulk import BulkSearchOrchestrator, clean_names
from .exceptions import ContributionSearchError
from .exporter import contributions_to_fec_csv
from .filters import SearchFilters
from .loader import load_store
from .schema import DEFAULT_PAGE_SIZE, MAX_BULK_NAMES
from .search import search_contributions

DEFAULT_DATA_DIR = Path(os.environ.get("CONTRIBUTION_DATA_DIR", "data"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        dest="data_dir",
        help=f"Directory of FEC .txt files (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument("--city", help="Case-insensitive city substring")
    parser.add_argument("--state", help="Two-letter state (exact match)")
    parser.add_argument("--min-amount", dest="min_amount", help="Minimum amount (inclusive)")
    parser.add_argument("--max-amount", dest="max_amount", help="Maximum amount (inclusive)")
    parser.add_argument("--start-date", dest="start_date", help="Start date YYYY-MM-DD")
    parser.add_argument("--end-date", dest="end_date", help="End date YYYY-MM-DD")
    parser.add_argument(
        "--fuzzy",
        action="store_true",
        help="Approximate per-token name matching instead of substring matching",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribution_search",
        description="Search FEC contribution records by contributor name",
        epilog="""
Examples:
  %(prog)s search "John Smith" --state NY
  %(prog)s search smith --fuzzy --min-amount 100
  %(prog)s bulk names.txt --output matches.csv
  %(prog)s analytics
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search a single name")
    search_parser.add_argument("name", nargs="?", default=None, help="Contributor name")
    _add_common_arguments(search_parser)
    search_parser.add_argument(
        "--limit", type=int, default=DEFAULT_PAGE_SIZE, help="Results per page (max 1000)"
    )
    search_parser.add_argument("--offset", type=int, default=0, help="Results to skip")

    bulk_parser = subparsers.add_parser(
        "bulk", help=f"Search up to {MAX_BULK_NAMES} names listed one per line"
    )
    bulk_parser.add_argument("names_file", type=Path, help="File with one name per line")
    _add_common_arguments(bulk_parser)
    bulk_parser.add_argument("--output", type=Path, help="Write matched records as CSV")

    analytics_parser = subparsers.add_parser("analytics", help="Dataset-wide statistics")
    analytics_parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        dest="data_dir",
        help=f"Directory of FEC .txt files (default: {DEFAULT_DATA_DIR})",
    )
    return parser


def _filters_from_args(args: argparse.Namespace) -> SearchFilters:
    return SearchFilters.from_params(
        {
            "city": args.city,
            "state": args.state,
            "min_amount": args.min_amount,
            "max_amount": args.max_amount,
            "start_date": args.start_date,
            "end_date": args.end_date,
        }
    )


def _run_search(args: argparse.Namespace) -> int:
    filters = _filters_from_args(args)
    store = load_store(args.data_dir, show_progress=False)
    result = search_contributions(
        store.index,
        args.name,
        filters=filters,
        fuzzy=args.fuzzy,
        limit=args.limit,
        offset=args.offset,
    )
    print(f"Matches: {result.total:,} (showing {len(result.contributions)})")
    for c in result.contributions:
        print(f"  {c.date}  {_format_amount(c.amount):>12}  {c.name} ({c.city}, {c.state})")
    return 0


def _run_bulk(args: argparse.Namespace) -> int:
    filters = _filters_from_args(args)
    names = clean_names(args.names_file.read_text(encoding="utf-8").splitlines())
    store = load_store(args.data_dir, show_progress=False)
    result = BulkSearchOrchestrator(store.index, store.cache).run(
        names, filters, fuzzy=args.fuzzy
    )

    for name, entry in result.results.items():
        print(f"  {name}: {entry.count:,} contribution(s), {_format_amount(entry.total_amount)}")

    summary = result.summary
    print(f"\nNames searched: {summary.total_names:,}")
    print(f"  With results: {summary.names_with_results:,}")
    print(f"  Contributions: {summary.total_contributions:,}")
    print(f"  Total amount: {_format_amount(summary.total_amount)}")

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        csv_text = contributions_to_fec_csv(result.all_contributions)
        args.output.write_text(csv_text, encoding="utf-8")
        print(f"  Created: {args.output}")
    return 0


def _run_analytics(args: argparse.Namespace) -> int:
    store = load_store(args.data_dir, show_progress=False)
    report = compute_analytics(store.records)
    print(f"Contributions: {report.total_contributions:,}")
    print(f"  Total amount: {_format_amount(report.total_amount)}")
    print(f"  Average: {_format_amount(report.average_amount)}")
    print(f"  Contributors: {report.unique_contributors:,}")
    print(f"  Monthly trend: {report.monthly_trend:+.1f}%")
    risk = report.risk_analysis
    print(f"  Risk: {risk.high:,} high, {risk.medium:,} medium, {risk.low:,} low")
    print("\nTop contributions:")
    for c in report.top_contributions:
        print(f"  {_format_amount(c.amount):>12}  {c.name}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(levelname)s: %(message)s",
    )

    if getattr(args, "limit", 1) < 1:
        print("ERROR: --limit must be a positive integer", file=sys.stderr)
        return 1

    handlers = {"search": _run_search, "bulk": _run_bulk, "analytics": _run_analytics}
    print(f"[{datetime.now().isoformat()}] {args.command} ({args.data_dir})")
    try:
        return handlers[args.command](args)
    except ContributionSearchError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


def _format_amount(amount: float) -> str:
    """Format a dollar amount with thousands separators."""
    return f"${amount:,.2f}"


if __name__ == "__main__":
    sys.exit(main())
