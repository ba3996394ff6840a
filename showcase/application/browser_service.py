"""Application service tying loading, view state and rendering together."""

import logging
import threading
from dataclasses import replace
from typing import Optional, Protocol, Sequence, Tuple

from showcase.application.debounce import Debouncer
from showcase.application.revalidation import EMPTY_NOTICE, LoadStatus, RevalidationController
from showcase.domain.repository import RepoRecord
from showcase.domain.view import (
    ALL_LANGUAGES,
    Facets,
    SortMode,
    ViewResult,
    ViewState,
    compute_facets,
    derive_view,
)

logger = logging.getLogger(__name__)

NO_MATCHES_NOTICE = "No projects found with current filters."


class Renderer(Protocol):
    """Rendering collaborator fed with the visible records and a meta line."""

    def render(self, records: Sequence[RepoRecord], meta: str, notice: Optional[str] = None) -> None:
        ...


def summary_line(total: int, shown: int) -> str:
    return f"{total} project{'' if total == 1 else 's'} • Showing {shown} after filters"


class ProjectBrowser:
    """Holds the view state for one page and re-renders on every change.

    The dataset belongs to the controller; this service only reads it.
    Facets are recomputed when the controller hands over a new dataset,
    not on every filter or sort change.
    """

    def __init__(
        self,
        controller: RevalidationController,
        renderer: Renderer,
        debounce_ms: int = 180,
        timer_factory=threading.Timer,
    ):
        """
        Initialize project browser.

        Args:
            controller: Revalidation controller owning the dataset
            renderer: Rendering collaborator
            debounce_ms: Delay before a search input is applied
            timer_factory: Timer constructor used for debouncing
        """
        self.controller = controller
        self.renderer = renderer
        self.state = ViewState()
        self.facets = Facets()
        self.last_view = ViewResult(records=(), count=0)
        self.recompute_count = 0

        self._mu = threading.RLock()
        self._facet_source: Optional[Tuple[RepoRecord, ...]] = None
        self._status_message: Optional[str] = None
        self._search = Debouncer(self._apply_query, debounce_ms / 1000, timer_factory=timer_factory)

        controller.subscribe(self._on_load)

    def load(self, force_refresh: bool = False) -> Optional[LoadStatus]:
        """Load (or reload) the dataset. Ignored while another load is running."""
        return self.controller.init(force_refresh=force_refresh)

    def refresh(self) -> Optional[LoadStatus]:
        return self.load(force_refresh=True)

    def _on_load(self, status: LoadStatus) -> None:
        with self._mu:
            self._status_message = status.message
            self._recompute()

    def set_query(self, text: str) -> None:
        """Schedule a search; rapid calls collapse into one recomputation."""
        self._search(text)

    def flush_query(self) -> None:
        """Apply a pending search immediately."""
        self._search.flush()

    def _apply_query(self, text: str) -> None:
        self._update(query=text)

    def set_language(self, language: Optional[str]) -> None:
        self._update(language_filter=language or ALL_LANGUAGES)

    def set_sort(self, mode) -> None:
        self._update(sort_mode=SortMode(mode))

    def toggle_tag(self, tag: str) -> None:
        """Select a tag, or clear it if it is already the active one."""
        with self._mu:
            active = None if self.state.active_tag == tag else tag
            self._update(active_tag=active)

    def _update(self, **changes) -> None:
        with self._mu:
            self.state = replace(self.state, **changes)
            logger.debug(f"View state changed: {changes}")
            self._status_message = None
            self._recompute()

    def current_view(self) -> ViewResult:
        """Derive the view for the current dataset and state without rendering."""
        with self._mu:
            return derive_view(self.controller.records, self.state)

    def _recompute(self) -> None:
        records = self.controller.records
        if records is not self._facet_source:
            self.facets = compute_facets(records)
            self._facet_source = records

        view = derive_view(records, self.state)
        self.last_view = view
        self.recompute_count += 1

        meta = self._status_message or summary_line(len(records), view.count)
        if self.controller.status.show_empty_notice:
            notice = EMPTY_NOTICE
        elif not view.records:
            notice = NO_MATCHES_NOTICE
        else:
            notice = None
        self.renderer.render(view.records, meta, notice)

    def close(self) -> None:
        self._search.cancel()
        self.controller.close()
