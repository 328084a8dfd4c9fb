# backend/scripts/run_ingestion.py
import sys
import asyncio
import argparse
from pathlib import Path

# Make sure 'backend' package is importable (run from anywhere)
sys.path.append(str(Path(__file__).resolve().parents[1]))

from sentifi.core.config import settings
from sentifi.db import connect_to_mongo, close_mongo_connection
from sentifi.services.classifier import get_classifier
from sentifi.services.feeds import FEED_SOURCES, fetch_feed
from sentifi.tasks.scheduler import trigger_ingestion


def check_feeds():
    print("== Feed status ==")
    for source in FEED_SOURCES:
        try:
            items = fetch_feed(source, settings.FEED_ITEMS_PER_SOURCE, settings.FEED_TIMEOUT_SECONDS)
            print(f"  {source.name:<12} ok    items={len(items)}")
        except Exception as e:
            print(f"  {source.name:<12} FAIL  {e}")

    print("\n== Classifier ==")
    print(f"  mode={settings.CLASSIFIER_MODE} model={settings.OPENAI_MODEL} "
          f"available={get_classifier().is_available()}")


async def ingest_once():
    await connect_to_mongo()
    try:
        summary = await trigger_ingestion()
    finally:
        await close_mongo_connection()

    if summary is None:
        print("Ingestion cycle failed; see logs")
        return 1
    print(summary.as_dict())
    return 0


def main():
    parser = argparse.ArgumentParser(description="Run one news ingestion cycle outside the scheduler")
    parser.add_argument("--check-feeds", action="store_true", help="only probe feeds and the classifier")
    args = parser.parse_args()

    if args.check_feeds:
        check_feeds()
        return 0
    return asyncio.run(ingest_once())


if __name__ == "__main__":
    sys.exit(main())
