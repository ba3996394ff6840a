#!/usr/bin/env python3
"""Script to initialize the PostgreSQL cache table."""

import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from showcase.config import Settings
from showcase.infrastructure.database import PostgresCacheStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Initialize database schema."""
    try:
        settings = Settings.from_env()
        store = PostgresCacheStore(settings.postgres_dsn, settings.cache_key)
        store.connect()
        store.initialize_schema()
        store.close()
        logger.info("Cache schema setup completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Failed to setup cache schema: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
