"""CLI entrypoint for the daily news aggregation run."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import date

from aggregator import build_aggregator, print_summary
from config import NEWS_TOPICS, get_settings
from utils import configure_package_logging


def _dump(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def main() -> None:
    parser = argparse.ArgumentParser(description="Daily multi-source news aggregator")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default="", help="Also write logs to logs/<name>")
    parser.add_argument("--plain-logs", action="store_true", help="Disable Rich log formatting")
    sub = parser.add_subparsers(dest="command", required=True)

    agg = sub.add_parser("aggregate", help="Collect today's news for every topic")
    agg.add_argument("--force-refresh", action="store_true", help="Ignore today's cache")
    agg.add_argument(
        "--underrepresented",
        nargs="*",
        default=[],
        metavar="NAME",
        help="Topics missing from recent reports (targeted fallback)",
    )
    agg.add_argument("--summary", action="store_true", help="Print a coverage table to stderr")

    clear = sub.add_parser("clear-cache", help="Delete a daily cache file")
    clear.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="YYYY-MM-DD (defaults to today, UTC)",
    )

    sub.add_parser("usage", help="Today's counters of metered providers")
    sub.add_parser("topics", help="List the topic catalog")

    args = parser.parse_args()
    configure_package_logging(
        level=getattr(logging, args.log_level),
        log_file=args.log_file or None,
        use_rich=not args.plain_logs,
    )

    if args.command == "topics":
        _dump([topic.model_dump(mode="json") for topic in NEWS_TOPICS])
        return

    aggregator = build_aggregator(get_settings())

    if args.command == "aggregate":
        results = asyncio.run(
            aggregator.aggregate(
                force_refresh=args.force_refresh,
                underrepresented_topics=args.underrepresented,
            )
        )
        if args.summary:
            print_summary(results, aggregator.topics)
        _dump([content.to_json_dict() for content in results])
        return

    if args.command == "clear-cache":
        cleared = aggregator.clear_cache(args.date)
        _dump({"path": str(aggregator.cache_store.get_path(args.date)), "cleared": cleared})
        return

    if args.command == "usage":
        _dump({"date": aggregator.usage_tracker.today(), "providers": aggregator.usage_report()})


if __name__ == "__main__":
    main()
