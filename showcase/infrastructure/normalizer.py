"""Reduce raw GitHub API repository objects to normalized RepoRecords."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from showcase.domain.errors import MalformedRecord
from showcase.domain.repository import RepoRecord, parse_timestamp

logger = logging.getLogger(__name__)


def _count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _topics(value: Any) -> tuple:
    if not isinstance(value, list):
        return ()
    return tuple(topic for topic in value if isinstance(topic, str) and topic)


def normalize_record(raw: Dict[str, Any]) -> RepoRecord:
    """
    Normalize a single raw repository object.

    Optional fields that are missing or malformed fall back to defaults.

    Args:
        raw: Repository object as returned by the GitHub REST API

    Returns:
        Normalized repository record

    Raises:
        MalformedRecord: If the object is not a mapping or has no id
    """
    if not isinstance(raw, dict):
        raise MalformedRecord(f"Expected a repository object, got {type(raw).__name__}", raw)

    repo_id = raw.get("id")
    if repo_id is None or isinstance(repo_id, (dict, list)):
        raise MalformedRecord(f"Repository {raw.get('name')!r} has no id", raw)

    owner = raw.get("owner")
    if not isinstance(owner, dict):
        owner = {}

    return RepoRecord(
        id=repo_id,
        name=str(raw.get("name") or ""),
        url=str(raw.get("html_url") or ""),
        description=_text(raw.get("description")),
        primary_language=_text(raw.get("language")),
        star_count=_count(raw.get("stargazers_count")),
        fork_count=_count(raw.get("forks_count")),
        updated_at=parse_timestamp(raw.get("updated_at")),
        homepage=_text(raw.get("homepage")),
        topics=_topics(raw.get("topics")),
        owner_avatar_url=_text(owner.get("avatar_url")),
        owner_login=_text(owner.get("login")),
    )


def normalize_records(raw_records: Optional[Iterable[Any]]) -> List[RepoRecord]:
    """Normalize a batch, skipping (and logging) records that cannot be identified."""
    records = []
    skipped = 0
    for raw in raw_records or []:
        try:
            records.append(normalize_record(raw))
        except MalformedRecord as e:
            skipped += 1
            logger.warning(f"Skipping malformed repository record: {e}")

    if skipped:
        logger.info(f"Normalized {len(records)} repositories ({skipped} skipped)")
    return records
