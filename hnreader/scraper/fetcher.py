"""HTTP fetcher for Hacker News pages, built on requests.

Pages are plain server-rendered HTML, so a requests session is all that is
needed. Every request goes through a rate limiter and is retried with
exponential backoff on transport errors.
"""

import logging
import time
from typing import Dict, Optional

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.settings import settings

logger = logging.getLogger(__name__)

AUTH_COOKIE = "user"


def _get_headers(user_agent: str) -> dict:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }


class RateLimiter:
    """Simple rate limiter to respect website load."""

    def __init__(self, min_interval: float):
        """Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between requests
        """
        self.min_interval = min_interval
        self._last_request_time: float = 0

    def wait(self) -> None:
        """Wait if needed to respect rate limit."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.min_interval:
            sleep_time = self.min_interval - elapsed
            logger.debug("Rate limiting: sleeping %.2f seconds", sleep_time)
            time.sleep(sleep_time)
        self._last_request_time = time.time()


def _log_retry(retry_state) -> None:
    logger.warning(
        "Retry attempt %d after error: %s",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
    )


class RequestsFetcher:
    """Fetches HTML over HTTP with a shared session.

    Usable as a context manager; the session is opened lazily and closed on
    exit.
    """

    def __init__(
        self,
        rate_limit: Optional[float] = None,
        user_agent: Optional[str] = None,
        request_timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
    ):
        """Initialize the fetcher.

        Args:
            rate_limit: Seconds between requests (uses settings default if None)
            user_agent: User-Agent header (uses settings default if None)
            request_timeout: Timeout in seconds (uses settings default if None)
            max_retries: Attempts per request (uses settings default if None)
        """
        self.rate_limit = rate_limit if rate_limit is not None else settings.rate_limit_seconds
        self.user_agent = user_agent or settings.user_agent
        self.request_timeout = request_timeout or settings.request_timeout
        self.max_retries = max_retries or settings.max_retries
        self._rate_limiter = RateLimiter(self.rate_limit)
        self._session: Optional[requests.Session] = None

    def __enter__(self) -> "RequestsFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(_get_headers(self.user_agent))
        return self._session

    def _retrying(self, func, *args, **kwargs):
        wrapped = retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(requests.RequestException),
            before_sleep=_log_retry,
            reraise=True,
        )(func)
        return wrapped(*args, **kwargs)

    def _get(self, url: str, cookies: Dict[str, str]) -> requests.Response:
        self._rate_limiter.wait()
        logger.info("Fetching: %s", url)
        response = self.session.get(url, cookies=cookies, timeout=self.request_timeout)
        response.raise_for_status()
        return response

    def fetch_page(self, url: str, token: Optional[str] = None) -> str:
        """Fetch a page and return its HTML.

        Args:
            url: URL to fetch
            token: Login token sent as the auth cookie, if any

        Returns:
            Page HTML

        Raises:
            requests.RequestException: Once all retries are exhausted
        """
        cookies = {AUTH_COOKIE: token} if token else {}
        response = self._retrying(self._get, url, cookies)
        html = response.text
        logger.debug("Fetched %d bytes from %s", len(html), url)
        return html

    def post_form(self, url: str, data: Dict[str, str]) -> requests.Response:
        """POST a form without following redirects.

        Not retried, since a login attempt should not be replayed.
        """
        self._rate_limiter.wait()
        logger.info("Posting form to: %s", url)
        return self.session.post(
            url,
            data=data,
            allow_redirects=False,
            timeout=self.request_timeout,
        )
