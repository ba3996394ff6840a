"""Configuration for the repository showcase, read from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Defaults match the hosted showcase page."""

    github_username: str = "octocat"
    api_base_url: str = "https://api.github.com"
    cache_ttl_ms: int = 1000 * 60 * 60  # 1 hour
    page_size: int = 100
    debounce_ms: int = 180
    topics_display_cap: int = 6
    request_timeout_s: float = 30.0
    cache_backend: str = "file"
    cache_dir: Path = Path.home() / ".cache" / "showcase"

    # PostgreSQL cache backend
    postgres_host: str = "localhost"
    postgres_port: str = "5432"
    postgres_db: str = "github_showcase"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"

    @property
    def cache_key(self) -> str:
        """Single cache key scoped to the tracked user."""
        return f"gh_repos_{self.github_username}"

    @property
    def postgres_dsn(self) -> str:
        return (
            f"host={self.postgres_host} port={self.postgres_port} dbname={self.postgres_db} "
            f"user={self.postgres_user} password={self.postgres_password}"
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables, falling back to defaults.

        Raises:
            ValueError: If a numeric variable cannot be parsed or the backend is unknown
        """
        defaults = cls()
        backend = os.getenv("CACHE_BACKEND", defaults.cache_backend).lower()
        if backend not in ("file", "postgres"):
            raise ValueError(f"Unknown CACHE_BACKEND: {backend}")

        return cls(
            github_username=os.getenv("GITHUB_USERNAME", defaults.github_username),
            api_base_url=os.getenv("GITHUB_API_URL", defaults.api_base_url),
            cache_ttl_ms=int(os.getenv("CACHE_TTL_MS", str(defaults.cache_ttl_ms))),
            # GitHub caps a single page at 100 repositories
            page_size=min(int(os.getenv("API_PAGE_SIZE", str(defaults.page_size))), 100),
            debounce_ms=int(os.getenv("DEBOUNCE_MS", str(defaults.debounce_ms))),
            topics_display_cap=int(os.getenv("TOPICS_DISPLAY_CAP", str(defaults.topics_display_cap))),
            request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", str(defaults.request_timeout_s))),
            cache_backend=backend,
            cache_dir=Path(os.getenv("CACHE_DIR", str(defaults.cache_dir))).expanduser(),
            postgres_host=os.getenv("POSTGRES_HOST", defaults.postgres_host),
            postgres_port=os.getenv("POSTGRES_PORT", defaults.postgres_port),
            postgres_db=os.getenv("POSTGRES_DB", defaults.postgres_db),
            postgres_user=os.getenv("POSTGRES_USER", defaults.postgres_user),
            postgres_password=os.getenv("POSTGRES_PASSWORD", defaults.postgres_password),
        )
