"""Stale-while-revalidate loading of the repository dataset."""

import itertools
import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from showcase.domain.errors import FetchError, StorageError
from showcase.domain.repository import CacheEntry, RepoRecord
from showcase.domain.view import freshest_update
from showcase.infrastructure.cache_store import CacheStore
from showcase.infrastructure.normalizer import normalize_records

logger = logging.getLogger(__name__)

EMPTY_NOTICE = "Unable to fetch GitHub repos. Check network or rate limits. Try Refresh."


class LoadState(str, Enum):
    EMPTY = "empty"
    SERVING_CACHE = "serving_cache"
    SERVING_STALE = "serving_stale"
    LIVE = "live"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class LoadStatus:
    """Outcome of a load, as shown to the user."""

    state: LoadState
    message: str
    error: Optional[FetchError] = None
    show_empty_notice: bool = False


def epoch_ms() -> int:
    return int(time.time() * 1000)


def _clock_time(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%H:%M:%S")


class RevalidationController:
    """Owns the current dataset and keeps it coherent with the cache and the API.

    Only one foreground load runs at a time; overlapping ``init`` calls are
    ignored. Every fetch takes a sequence number when it starts. Fetched data
    is adopted and persisted only if no newer fetch has been adopted, so a slow
    background revalidation cannot overwrite a later refresh. Serving the cache
    never counts as a fetch: a failed refresh does not discard a background
    result that is still in flight.
    """

    def __init__(
        self,
        gateway,
        store: CacheStore,
        ttl_ms: int = 1000 * 60 * 60,
        clock: Callable[[], int] = epoch_ms,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize revalidation controller.

        Args:
            gateway: Object with a ``fetch_all()`` method returning raw records
            store: Cache store holding the persisted snapshot
            ttl_ms: Age in milliseconds after which the snapshot is stale
            clock: Returns the current time in epoch milliseconds
            executor: Executor for background revalidation (a single worker by default)
        """
        self.gateway = gateway
        self.store = store
        self.ttl_ms = ttl_ms
        self.clock = clock

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="revalidate")
        self._background: Optional[Future] = None

        self._lock = threading.RLock()
        self._store_lock = threading.Lock()
        self._foreground = threading.Lock()
        self._sequence = itertools.count(1)
        # Newest fetch whose data was adopted, and newest fetch written to the store
        self._fetched_seq = 0
        self._persisted_seq = 0

        self._records: Tuple[RepoRecord, ...] = ()
        self._status = LoadStatus(LoadState.EMPTY, "")
        self._listeners: List[Callable[[LoadStatus], None]] = []

    @property
    def records(self) -> Tuple[RepoRecord, ...]:
        """The current dataset. Replaced wholesale, never mutated."""
        return self._records

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def state(self) -> LoadState:
        return self._status.state

    def subscribe(self, callback: Callable[[LoadStatus], None]) -> None:
        """Register a callback invoked after every dataset adoption."""
        self._listeners.append(callback)

    def init(self, force_refresh: bool = False) -> Optional[LoadStatus]:
        """
        Load the dataset, serving a fresh cache when possible.

        Args:
            force_refresh: Skip the cache and fetch from the API

        Returns:
            The resulting status, or None if another load was already in progress
        """
        if not self._foreground.acquire(blocking=False):
            logger.info("Load already in progress, ignoring request")
            return None
        try:
            return self._load(force_refresh)
        finally:
            self._foreground.release()

    def _load(self, force_refresh: bool) -> LoadStatus:
        if not force_refresh:
            basis = self._fetched_seq
            cached = self.store.read()
            if cached is not None and not cached.is_stale(self.clock(), self.ttl_ms):
                status = LoadStatus(
                    LoadState.SERVING_CACHE,
                    f"Loaded from cache (updated {_clock_time(cached.fetched_at)})",
                )
                if self._serve_cached(basis, cached.records, status):
                    self._start_background()
                return self._status

        seq = next(self._sequence)
        try:
            raw = self.gateway.fetch_all()
        except FetchError as e:
            logger.warning(f"Live fetch failed: {e}")
            return self._fallback(e)

        records = tuple(normalize_records(raw))
        status = LoadStatus(LoadState.LIVE, f"Fetched {len(records)} repos from GitHub")
        if self._adopt_fetched(seq, records, status):
            self._notify(status)
        self._persist(seq, records)
        return self._status

    def _fallback(self, error: FetchError) -> LoadStatus:
        basis = self._fetched_seq
        cached = self.store.read()
        if cached is not None:
            status = LoadStatus(
                LoadState.SERVING_STALE,
                f"Using cached data (live fetch failed). {error.reason}",
                error=error,
            )
            records = cached.records
        else:
            status = LoadStatus(
                LoadState.DEGRADED,
                f"Failed to load repos: {error.reason}",
                error=error,
                show_empty_notice=True,
            )
            records = ()
        if self._serve_cached(basis, records, status):
            return status
        return self._status

    def _start_background(self) -> None:
        seq = next(self._sequence)
        self._background = self._executor.submit(self._revalidate, seq)

    def _revalidate(self, seq: int) -> bool:
        """Fetch in the background; replace the dataset only if it changed."""
        try:
            raw = self.gateway.fetch_all()
            fresh = tuple(normalize_records(raw))
        except FetchError as e:
            logger.warning(f"Background fetch failed: {e}")
            return False
        except Exception as e:
            logger.error(f"Background revalidation failed: {e}", exc_info=True)
            return False

        changed = False
        with self._lock:
            if seq < self._fetched_seq:
                logger.info("Discarding background result superseded by a newer fetch")
                return False

            # Cheap change detection: compare only the newest update timestamp
            newest = freshest_update(fresh)
            if not self._records or (newest is not None and newest != freshest_update(self._records)):
                status = LoadStatus(LoadState.LIVE, f"Background refreshed at {_clock_time(self.clock())}")
                changed = self._adopt_fetched(seq, fresh, status)
            else:
                logger.info("Background revalidation found no changes")

        # The cache is refreshed even when nothing visible changed
        self._persist(seq, fresh)
        if changed:
            self._notify(status)
        return changed

    def _adopt_fetched(self, seq: int, records: Tuple[RepoRecord, ...], status: LoadStatus) -> bool:
        with self._lock:
            if seq < self._fetched_seq:
                logger.info("Discarding fetch result superseded by a newer fetch")
                return False
            self._fetched_seq = seq
            self._records = records
            self._status = status
        return True

    def _serve_cached(self, basis: int, records: Tuple[RepoRecord, ...], status: LoadStatus) -> bool:
        """Adopt cached data unless fetched data arrived since ``basis`` was taken."""
        with self._lock:
            if self._fetched_seq != basis:
                logger.info("Keeping data fetched while the cache was being read")
                return False
            self._records = records
            self._status = status

        self._notify(status)
        return True

    def _persist(self, seq: int, records: Tuple[RepoRecord, ...]) -> None:
        # Writes run outside the state lock; older fetches never overwrite newer ones
        with self._store_lock:
            if seq < self._persisted_seq:
                logger.info("Skipping cache write superseded by a newer fetch")
                return
            self._persisted_seq = seq
            try:
                self.store.write(CacheEntry(records=records, fetched_at=self.clock()))
            except StorageError as e:
                logger.warning(f"Could not persist cache, continuing in memory: {e}")

    def _notify(self, status: LoadStatus) -> None:
        for callback in list(self._listeners):
            callback(status)

    def wait_for_background(self, timeout: Optional[float] = None) -> Optional[bool]:
        """
        Block until the pending background revalidation finishes.

        Returns:
            True if it replaced the dataset, False if not, None if none was started
        """
        if self._background is None:
            return None
        return self._background.result(timeout=timeout)

    def close(self) -> None:
        """Wait for background work and release the executor."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
