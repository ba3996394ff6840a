"""GitHub REST API client for listing a user's own repositories."""

import logging
from typing import Any, Dict, List, Optional

import requests

from showcase.domain.errors import FetchError

logger = logging.getLogger(__name__)


class GitHubRestClient:
    """Fetch gateway: one bounded request for a user's repositories, no retries."""

    # Preview media type that makes the listing include repository topics
    TOPICS_MEDIA_TYPE = "application/vnd.github.mercy-preview+json"
    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        username: str,
        base_url: str = "https://api.github.com",
        page_size: int = 100,
        timeout: Optional[float] = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub REST client.

        Args:
            username: GitHub login whose repositories are listed
            base_url: API root URL
            page_size: Number of repositories requested (at most 100)
            timeout: Request timeout in seconds; None waits indefinitely
            session: Optional requests session to reuse
        """
        self.username = username
        self.base_url = base_url.rstrip("/")
        self.page_size = min(page_size, self.MAX_PAGE_SIZE)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Accept": self.TOPICS_MEDIA_TYPE,
        }

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/users/{self.username}/repos"

    @property
    def params(self) -> Dict[str, Any]:
        return {
            "per_page": self.page_size,
            "type": "owner",
            "sort": "updated",
        }

    def fetch_all(self) -> List[Dict[str, Any]]:
        """
        Fetch the user's repositories, most recently updated first.

        Returns:
            Raw repository objects as returned by the API

        Raises:
            FetchError: On a non-successful response or a transport failure
        """
        logger.info(f"Fetching repositories for {self.username}")
        try:
            response = self.session.get(
                self.endpoint,
                params=self.params,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request to {self.endpoint} failed: {e}")
            raise FetchError.from_transport(e) from e

        if not response.ok:
            reset = None
            if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
                try:
                    reset = int(response.headers.get("X-RateLimit-Reset", ""))
                except ValueError:
                    reset = None
            raise FetchError.from_status(response.status_code, response.reason or "", rate_limit_reset=reset)

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"GitHub API: invalid JSON response ({e})", status=response.status_code) from e

        if not isinstance(data, list):
            raise FetchError("GitHub API: expected a list of repositories", status=response.status_code)

        logger.info(f"Fetched {len(data)} repositories for {self.username}")
        return data
