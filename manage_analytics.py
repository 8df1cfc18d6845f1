#!/usr/bin/env python3
"""
Analytics management script:
- rollup     materialize daily summaries
- dashboard  print the dashboard for a window
- stats      print the quick stats

Output is printed as JSON.
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from app.analytics.aggregator import AggregationEngine
from app.analytics.errors import AnalyticsError
from app.analytics.session_store import SessionStore
from app.logging_config import setup_logging, stop_logging, get_logger
from config_manager import get_analytics_config, get_paths_config, resolve_data_dir

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analytics management script")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Directory containing analytics data (defaults to configured data_dir)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    rollup = subparsers.add_parser("rollup", help="Materialize daily summaries")
    group = rollup.add_mutually_exclusive_group()
    group.add_argument("--date", type=date.fromisoformat,
                       help="Single date to roll up (YYYY-MM-DD)")
    group.add_argument("--days", type=int, default=1,
                       help="Roll up the last N days, today included")

    dashboard = subparsers.add_parser("dashboard", help="Show dashboard data")
    dashboard.add_argument("--days", type=int, default=None,
                           help="Window in days (defaults to configured value)")

    subparsers.add_parser("stats", help="Show quick stats")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the JSON result
    setup_logging(debug=args.debug, stream=sys.stderr)

    analytics_config = get_analytics_config()
    data_dir = args.data_dir or resolve_data_dir(get_paths_config().data_dir)

    try:
        store = SessionStore(data_dir)
        engine = AggregationEngine(store, top_pages_limit=analytics_config.top_pages_limit)

        if args.command == "rollup":
            if args.date:
                summaries = [engine.materialize_daily_summary(args.date)]
            else:
                summaries = engine.materialize_range(args.days)
            logger.info(f"Rolled up {len(summaries)} day(s) into {store.summaries_dir}")
            result = [s.to_dict() for s in summaries]
        elif args.command == "dashboard":
            days = args.days if args.days is not None else analytics_config.default_dashboard_days
            result = engine.compute_dashboard(days).to_dict()
        else:
            result = engine.compute_quick_stats().to_dict()
    except AnalyticsError as exc:
        logger.error(f"{args.command} failed: {exc.message}")
        return 1
    finally:
        stop_logging()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
