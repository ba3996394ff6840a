#!/usr/bin/env python3
"""Script to show a user's GitHub projects with search, filter and sort."""

import argparse
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from showcase.application.bootstrap import build_browser
from showcase.config import Settings
from showcase.domain.view import ALL_LANGUAGES, SortMode, ViewState
from showcase.presentation.console import ConsoleRenderer

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Show GitHub projects for the configured user.")
    parser.add_argument("--query", default="", help="Case-insensitive search text")
    parser.add_argument("--language", default=None, help="Only show this primary language")
    parser.add_argument("--tag", default=None, help="Only show projects with this topic")
    parser.add_argument(
        "--sort",
        default=SortMode.RECENCY.value,
        choices=[mode.value for mode in SortMode],
        help="Sort order",
    )
    parser.add_argument("--refresh", action="store_true", help="Ignore the cache and fetch now")
    parser.add_argument(
        "--wait-background",
        action="store_true",
        help="Wait for background revalidation and re-render if it changed anything",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Load projects and print the filtered view."""
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        renderer = ConsoleRenderer(topics_display_cap=settings.topics_display_cap)
        browser = build_browser(settings, renderer)
        browser.state = ViewState(
            query=args.query,
            language_filter=args.language or ALL_LANGUAGES,
            active_tag=args.tag,
            sort_mode=SortMode(args.sort),
        )

        status = browser.load(force_refresh=args.refresh)
        if args.wait_background:
            # Re-renders only if the background fetch changed the dataset
            browser.controller.wait_for_background()
        browser.close()

        return 0 if status is not None and status.error is None else 1

    except Exception as e:
        logger.error(f"Showing projects failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
