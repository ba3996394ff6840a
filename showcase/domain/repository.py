"""Domain entities for a user's GitHub repositories and their cached snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as returned by the GitHub API.

    Returns None for missing or unparseable values.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class RepoRecord:
    """Immutable, normalized repository entity."""

    id: Any
    name: str
    url: str
    description: Optional[str] = None
    primary_language: Optional[str] = None
    star_count: int = 0
    fork_count: int = 0
    updated_at: Optional[datetime] = None
    homepage: Optional[str] = None
    topics: Tuple[str, ...] = field(default_factory=tuple)
    owner_avatar_url: Optional[str] = None
    owner_login: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "description": self.description,
            "primary_language": self.primary_language,
            "star_count": self.star_count,
            "fork_count": self.fork_count,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "homepage": self.homepage,
            "topics": list(self.topics),
            "owner_avatar_url": self.owner_avatar_url,
            "owner_login": self.owner_login,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepoRecord":
        """
        Rebuild a record from its serialized form.

        Raises:
            KeyError, TypeError, ValueError: If the data is not a serialized record
        """
        if data["id"] is None:
            raise ValueError("Serialized record has no id")
        return cls(
            id=data["id"],
            name=data["name"],
            url=data["url"],
            description=data.get("description"),
            primary_language=data.get("primary_language"),
            star_count=int(data.get("star_count") or 0),
            fork_count=int(data.get("fork_count") or 0),
            updated_at=parse_timestamp(data.get("updated_at")),
            homepage=data.get("homepage"),
            topics=tuple(data.get("topics") or ()),
            owner_avatar_url=data.get("owner_avatar_url"),
            owner_login=data.get("owner_login"),
        )


@dataclass(frozen=True)
class CacheEntry:
    """A wholesale snapshot of normalized records and when it was captured."""

    records: Tuple[RepoRecord, ...]
    fetched_at: int  # epoch milliseconds

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.fetched_at

    def is_stale(self, now_ms: int, ttl_ms: int) -> bool:
        """Stale once the age reaches the TTL (the boundary itself is stale)."""
        return self.age_ms(now_ms) >= ttl_ms

    def to_payload(self) -> Dict[str, Any]:
        """Serialize as ``{"fetchedAt": <epoch-ms>, "data": [...]}``."""
        return {
            "fetchedAt": self.fetched_at,
            "data": [record.to_dict() for record in self.records],
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "CacheEntry":
        """
        Rebuild an entry from its serialized form.

        Raises:
            KeyError, TypeError, ValueError: If the payload is corrupted
        """
        if not isinstance(payload, dict):
            raise TypeError(f"Cache payload must be an object, got {type(payload).__name__}")

        fetched_at = payload["fetchedAt"]
        if isinstance(fetched_at, bool) or not isinstance(fetched_at, int):
            raise TypeError("fetchedAt must be an integer")

        data: List[Any] = payload["data"]
        if not isinstance(data, list):
            raise TypeError("data must be a list")

        return cls(
            records=tuple(RepoRecord.from_dict(item) for item in data),
            fetched_at=fetched_at,
        )
