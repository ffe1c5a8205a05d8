"""HTTP client with timeout support for fetching remote JSON documents."""
import urllib.parse
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter, Retry

from .logger import get_logger

DEFAULT_TIMEOUT = 10
DEFAULT_USER_AGENT = 'AuditScope'
ALLOWED_SCHEMES = {'http', 'https'}


class HTTPClient:
    """Thin wrapper around a ``requests.Session`` that always applies a timeout."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds (must be positive)
            max_retries: Transport-level retries (0 disables retrying)
            backoff_factor: Backoff factor between retries
            session: Pre-built session, mainly for tests

        Raises:
            ValueError: If input parameters are invalid
        """
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("max_retries must be a non-negative integer")

        self.timeout = timeout
        self.logger = get_logger("http")
        self.session = session or self._create_session(max_retries, backoff_factor)

    def _create_session(self, max_retries: int, backoff_factor: float) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'User-Agent': DEFAULT_USER_AGENT,
            'Accept': 'application/json',
        })
        return session

    def _validate_url(self, url: str) -> None:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ALLOWED_SCHEMES:
            raise ValueError(f"URL scheme '{parsed.scheme}' is not allowed: {url}")
        if not parsed.netloc:
            raise ValueError(f"URL has no host: {url}")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Send a GET request and decode the JSON body.

        Args:
            url: Absolute URL to fetch
            params: Optional query parameters

        Returns:
            Parsed JSON document

        Raises:
            ValueError: If the URL is invalid or the body is not JSON
            requests.exceptions.RequestException: If the request fails
        """
        self._validate_url(url)
        self.logger.debug("Sending GET request to %s", url)

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed: {e}")
            raise

        return response.json()

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
