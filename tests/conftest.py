"""Shared fixtures for showcase tests."""

import threading
from typing import List, Optional

import pytest

from showcase.domain.errors import FetchError, StorageError
from showcase.domain.repository import CacheEntry, RepoRecord, parse_timestamp

NOW_MS = 1_700_000_000_000
TTL_MS = 3_600_000


def make_raw(repo_id, name, updated_at="2024-01-01T00:00:00Z", language=None, stars=0, topics=None, **extra):
    raw = {
        "id": repo_id,
        "name": name,
        "html_url": f"https://github.com/octocat/{name}",
        "description": extra.pop("description", f"{name} project"),
        "language": language,
        "stargazers_count": stars,
        "forks_count": extra.pop("forks", 0),
        "updated_at": updated_at,
        "homepage": extra.pop("homepage", None),
        "topics": topics if topics is not None else [],
        "owner": {"login": "octocat", "avatar_url": "https://avatars.example/octocat.png"},
    }
    raw.update(extra)
    return raw


def make_record(repo_id, name, updated_at="2024-01-01T00:00:00Z", language=None, stars=0, topics=(), description=None):
    return RepoRecord(
        id=repo_id,
        name=name,
        url=f"https://github.com/octocat/{name}",
        description=description,
        primary_language=language,
        star_count=stars,
        updated_at=parse_timestamp(updated_at),
        topics=tuple(topics),
    )


class FakeGateway:
    """Returns queued responses; an exception in the queue is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def fetch_all(self):
        self.calls += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class BlockingGateway:
    """Blocks inside fetch_all until released."""

    def __init__(self, response):
        self.response = response
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def fetch_all(self):
        self.calls += 1
        self.entered.set()
        self.release.wait(timeout=5)
        return self.response


class MemoryCacheStore:
    """In-memory cache store recording every write."""

    def __init__(self, entry: Optional[CacheEntry] = None, fail_writes: bool = False):
        self.entry = entry
        self.fail_writes = fail_writes
        self.writes: List[CacheEntry] = []

    def read(self):
        return self.entry

    def write(self, entry):
        if self.fail_writes:
            raise StorageError("quota exceeded")
        self.writes.append(entry)
        self.entry = entry


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render(self, records, meta, notice=None):
        self.calls.append((tuple(records), meta, notice))

    @property
    def last(self):
        return self.calls[-1]


class ManualTimer:
    """Stand-in for threading.Timer that fires only when told to."""

    created: List["ManualTimer"] = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.cancelled = False
        self.started = False
        self.daemon = False
        ManualTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


@pytest.fixture
def raw_repos():
    return [
        make_raw(1, "alpha", "2024-03-01T10:00:00Z", language="Go", stars=5, topics=["cli", "tools"]),
        make_raw(2, "beta", "2024-02-01T10:00:00Z", language="Rust", stars=1, topics=["web"]),
        make_raw(3, "gamma", "2024-01-01T10:00:00Z", language="Go", stars=9, topics=["cli"]),
    ]


@pytest.fixture
def clock():
    return lambda: NOW_MS


@pytest.fixture
def manual_timers():
    ManualTimer.created = []
    yield ManualTimer
    ManualTimer.created = []


@pytest.fixture
def fetch_error():
    return FetchError.from_status(503, "Service Unavailable")
