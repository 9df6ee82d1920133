"""Shared HTTP plumbing for the Kontent.ai API clients."""

import time
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import KontentApiError

logger = logging.getLogger(__name__)


class BaseKontentClient:
    """
    Base class for Kontent.ai REST clients.

    Provides:
    - A requests session with retry on 429 and 5xx responses
    - Bearer authentication
    - A minimum interval between requests
    - KontentApiError for every failed call
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        rate_limit: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, without trailing slash
            api_key: Bearer token
            rate_limit: Max requests per second, 0 disables pacing
            max_retries: Retries on 429 and 5xx responses
            backoff_factor: Exponential backoff between retries
            timeout: Request timeout in seconds
            session: Custom requests session
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.rate_limit = rate_limit
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.timeout = timeout
        self._last_request_time = 0.0
        self._session = session or self._create_session()

        if self.api_key:
            self._session.headers["Authorization"] = f"Bearer {self.api_key}"
        self._session.headers["Content-Type"] = "application/json"

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic."""
        session = requests.Session()

        retries = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _rate_limit_wait(self):
        """Wait to respect rate limits."""
        if self.rate_limit > 0:
            elapsed = time.time() - self._last_request_time
            wait_time = (1.0 / self.rate_limit) - elapsed
            if wait_time > 0:
                time.sleep(wait_time)
        self._last_request_time = time.time()

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> requests.Response:
        """
        Send a request and return the response.

        Raises:
            KontentApiError: On transport failure or a non-2xx status
        """
        url = self._url(path)
        self._rate_limit_wait()
        logger.debug(f"{method} {url}")

        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise KontentApiError(f"Request failed: {e}") from e

        if not response.ok:
            raise self._error_from_response(response)

        return response

    def _get_json(self, path: str, **kwargs) -> Dict[str, Any]:
        response = self._request("GET", path, **kwargs)
        return response.json() if response.content else {}

    @staticmethod
    def _error_from_response(response: requests.Response) -> KontentApiError:
        """Build a KontentApiError from an error response body."""
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or response.text or response.reason or "Unknown error"
        validation_errors = body.get("validation_errors") or []
        if validation_errors:
            details = "; ".join(e.get("message", "") for e in validation_errors if isinstance(e, dict))
            if details:
                message = f"{message} ({details})"

        return KontentApiError(
            f"HTTP {response.status_code}: {message}",
            status_code=response.status_code,
            error_code=body.get("error_code"),
            request_id=body.get("request_id"),
        )
