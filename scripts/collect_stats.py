"""CLI for aggregating one hour of Gmail activity into the stats store."""

from __future__ import annotations

import argparse
import logging

from gmail_stats.classifier import DomainClassifier
from gmail_stats.config import get_settings
from gmail_stats.gmail_client import GmailClient
from gmail_stats.ingestion import collect_hour
from gmail_stats.record_store import StatsRecordStore, WeaviateStatsTable
from gmail_stats.resolver import MxRecordResolver


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--hour",
        type=int,
        default=None,
        help="Unix timestamp of the hour to collect. Defaults to the last completed hour.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    gmail_client = GmailClient(settings=settings)
    classifier = DomainClassifier(MxRecordResolver(settings), provider_domain=settings.provider_domain)

    with WeaviateStatsTable.connect(settings.weaviate, collection_name=settings.stats_collection) as table:
        record = collect_hour(
            gmail_client=gmail_client,
            store=StatsRecordStore(table),
            classifier=classifier,
            hour=args.hour,
        )
    logging.info(
        "Stored %s messages for %s at hour %s.", record.counters.total, record.account, record.hour
    )


if __name__ == "__main__":
    main()
