#!/usr/bin/env python3
"""Script to dump the cached repository snapshot to CSV and JSON."""

import logging
import sys
import os
import csv
import json
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from showcase.application.bootstrap import build_cache_store
from showcase.config import Settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "id", "name", "url", "description", "primary_language", "star_count",
    "fork_count", "updated_at", "homepage", "topics", "owner_login",
]


def dump_to_csv(rows, output_file: str):
    """Dump cached records to CSV. Topics are joined with spaces."""
    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction='ignore')
        writer.writeheader()
        for row in rows:
            writer.writerow({**row, "topics": " ".join(row["topics"])})

    logger.info(f"Dumped {len(rows)} repositories to {output_file}")


def dump_to_json(payload, output_file: str):
    """Dump the cache payload to JSON as stored."""
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    logger.info(f"Dumped {len(payload['data'])} repositories to {output_file}")


def main():
    """Dump the cached snapshot to CSV and JSON."""
    try:
        settings = Settings.from_env()
        entry = build_cache_store(settings).read()
        if entry is None:
            logger.warning(f"No cached snapshot for {settings.github_username}")
            return 1

        output_dir = os.getenv("OUTPUT_DIR", "artifacts")
        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_file = os.path.join(output_dir, f"{settings.cache_key}_{timestamp}.csv")
        json_file = os.path.join(output_dir, f"{settings.cache_key}_{timestamp}.json")

        payload = entry.to_payload()
        dump_to_csv(payload["data"], csv_file)
        dump_to_json(payload, json_file)

        logger.info(f"Cache dump completed. Files: {csv_file}, {json_file}")
        return 0
    except Exception as e:
        logger.error(f"Cache dump failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
