"""CLI printing the hourly stats of an account as JSON series."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from gmail_stats.config import get_settings
from gmail_stats.errors import NotFoundError
from gmail_stats.range_query import range_query
from gmail_stats.record_store import WeaviateStatsTable


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("account", help="Mailbox address the stats were collected for.")
    parser.add_argument("start", type=int, help="First hour (Unix seconds, inclusive).")
    parser.add_argument("end", type=int, help="Last hour (Unix seconds, inclusive).")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    with WeaviateStatsTable.connect(settings.weaviate, collection_name=settings.stats_collection) as table:
        try:
            series = range_query(table, args.account, args.start, args.end)
        except NotFoundError as exc:
            logging.error("%s", exc)
            return 1
    json.dump(series.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
