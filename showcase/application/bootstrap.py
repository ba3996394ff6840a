"""Wiring of settings into the concrete gateway, store and browser."""

import logging
from typing import Optional

from showcase.application.browser_service import ProjectBrowser, Renderer
from showcase.application.revalidation import RevalidationController
from showcase.config import Settings
from showcase.infrastructure.cache_store import CacheStore, FileCacheStore
from showcase.infrastructure.database import PostgresCacheStore
from showcase.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)


def build_cache_store(settings: Settings) -> CacheStore:
    """Create the cache store selected by ``settings.cache_backend``."""
    if settings.cache_backend == "postgres":
        logger.info(f"Using PostgreSQL cache at {settings.postgres_host}:{settings.postgres_port}")
        return PostgresCacheStore(settings.postgres_dsn, settings.cache_key)
    logger.info(f"Using file cache in {settings.cache_dir}")
    return FileCacheStore(settings.cache_dir, settings.cache_key)


def build_browser(
    settings: Settings,
    renderer: Renderer,
    store: Optional[CacheStore] = None,
) -> ProjectBrowser:
    gateway = GitHubRestClient(
        settings.github_username,
        base_url=settings.api_base_url,
        page_size=settings.page_size,
        timeout=settings.request_timeout_s,
    )
    controller = RevalidationController(
        gateway,
        store or build_cache_store(settings),
        ttl_ms=settings.cache_ttl_ms,
    )
    return ProjectBrowser(controller, renderer, debounce_ms=settings.debounce_ms)
