from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import requests

from codetrack.platforms import Platform
from .common import PlatformStats, ProviderError
from .rate_limiter import get_platform_limiter


class BaseProvider(ABC):
    """Fetches a PlatformStats snapshot for a username on one platform."""

    PLATFORM: Platform = None
    BASE_URL: str = ""
    MAX_RETRIES = 3

    def __init__(self, rate_limit: float = 2.0, timeout: float = 20.0):
        self.timeout = timeout
        self.rate_limiter = get_platform_limiter(self.PLATFORM.value, rate_limit)
        self.logger = logging.getLogger(f'provider.{self.PLATFORM.value}')
        self.session = self._create_session()

    @abstractmethod
    def fetch_stats(self, username: str) -> PlatformStats:
        """Return the account's current stats or raise ProviderError."""
        ...

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'User-Agent': (
                'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                '(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36'
            ),
            'Accept-Language': 'en-US,en;q=0.9',
        })
        return session

    def _fail(self, message: str) -> ProviderError:
        return ProviderError(self.PLATFORM.value, message)

    def _request_with_retry(self, url, method='GET', **kwargs):
        """Issue a request, retrying transient failures with backoff.

        Client errors other than 429 are not retried; a 404 means the
        account does not exist.
        """
        name = self.PLATFORM.display_name
        for attempt in range(self.MAX_RETRIES):
            try:
                self.rate_limiter.wait()
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
                if resp.status_code == 404:
                    raise self._fail(f"{name} account not found")
                if 400 <= resp.status_code < 500 and resp.status_code != 429:
                    raise self._fail(f"{name} rejected the request (HTTP {resp.status_code})")
                resp.raise_for_status()
                return resp
            except requests.RequestException as e:
                self.logger.warning(
                    f"Request failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {e}"
                )
                if attempt < self.MAX_RETRIES - 1:
                    time.sleep(2 ** attempt)
                else:
                    raise self._fail(
                        f"{name} request failed: {e}"
                    ) from e

    def _get_json(self, url, **kwargs):
        resp = self._request_with_retry(url, method='GET', **kwargs)
        try:
            return resp.json()
        except ValueError as e:
            raise self._fail(
                f"{self.PLATFORM.display_name} returned invalid JSON"
            ) from e
