"""Pure derivation of the visible repository list from the full dataset.

Nothing here mutates its inputs: the current dataset is handed in by
reference and a new, ordered subset is returned on every call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from showcase.domain.repository import RepoRecord

ALL_LANGUAGES = "all"


class SortMode(str, Enum):
    """Available orderings for the visible list."""

    RECENCY = "recency"
    STARS = "stars"
    NAME = "name"


@dataclass(frozen=True)
class ViewState:
    """User-controlled filter and sort criteria."""

    query: str = ""
    language_filter: str = ALL_LANGUAGES
    active_tag: Optional[str] = None
    sort_mode: SortMode = SortMode.RECENCY


@dataclass(frozen=True)
class ViewResult:
    """Filtered and ordered records plus their count."""

    records: Tuple[RepoRecord, ...]
    count: int


@dataclass(frozen=True)
class Facets:
    """Distinct values used to populate the filter controls."""

    languages: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)


def search_text(record: RepoRecord) -> str:
    """Haystack the free-text query is matched against."""
    return f"{record.name or ''} {record.description or ''} {' '.join(record.topics)}".casefold()


def matches(record: RepoRecord, state: ViewState) -> bool:
    """Return True if the record passes every active filter."""
    language = state.language_filter or ALL_LANGUAGES
    if language != ALL_LANGUAGES and record.primary_language != language:
        return False

    if state.active_tag and state.active_tag not in record.topics:
        return False

    query = state.query.strip().casefold()
    if query and query not in search_text(record):
        return False

    return True


def _recency_key(record: RepoRecord) -> float:
    # Records without a timestamp sort last
    return record.updated_at.timestamp() if record.updated_at else float("-inf")


def sort_records(records: Sequence[RepoRecord], mode: SortMode) -> Tuple[RepoRecord, ...]:
    """Stable sort by the given mode; ties keep their original order."""
    mode = SortMode(mode)
    if mode is SortMode.STARS:
        ordered = sorted(records, key=lambda r: r.star_count, reverse=True)
    elif mode is SortMode.NAME:
        ordered = sorted(records, key=lambda r: ((r.name or "").casefold(), r.name or ""))
    else:
        ordered = sorted(records, key=_recency_key, reverse=True)
    return tuple(ordered)


def derive_view(records: Sequence[RepoRecord], state: ViewState) -> ViewResult:
    """
    Compute the visible list for the given criteria.

    Args:
        records: The full current dataset (never modified)
        state: Filter and sort criteria

    Returns:
        A fresh ViewResult superseding any previous one
    """
    filtered = [record for record in records if matches(record, state)]
    ordered = sort_records(filtered, state.sort_mode)
    return ViewResult(records=ordered, count=len(ordered))


def compute_facets(records: Sequence[RepoRecord]) -> Facets:
    """Distinct languages and topics of the full dataset, sorted ascending."""
    languages = {record.primary_language for record in records if record.primary_language}
    tags = {topic for record in records for topic in record.topics}
    return Facets(languages=tuple(sorted(languages)), tags=tuple(sorted(tags)))


def freshest_update(records: Sequence[RepoRecord]):
    """Newest ``updated_at`` in the dataset, i.e. its first element under recency order."""
    timestamps = [record.updated_at for record in records if record.updated_at]
    return max(timestamps, key=lambda ts: ts.timestamp()) if timestamps else None
