import time
import requests
from itertools import takewhile
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Optional, Dict, Any
import logging
from ..config import (
    USER_AGENT,
    RATE_LIMIT_SEC,
    REQUEST_TIMEOUT_SEC,
    REQUEST_RETRIES,
    RETRY_BACKOFF_SEC,
)
from ..errors import ApiError

logger = logging.getLogger(__name__)

# 429 (rate limit) and 5xx are transient; everything else is final.
RETRY_STATUSES = frozenset([429] + list(range(500, 600)))


def is_retryable_status(status: int) -> bool:
    return status in RETRY_STATUSES


class LinearRetry(Retry):
    """Retry whose backoff grows linearly: backoff_factor * (consecutive errors)."""

    def get_backoff_time(self) -> float:
        consecutive = len(list(takewhile(lambda x: x.redirect_location is None, reversed(self.history))))
        if consecutive <= 0:
            return 0
        return self.backoff_factor * consecutive


def build_retry(retries: int, backoff_sec: float) -> LinearRetry:
    """``retries`` counts attempts, so the first request is not a retry."""
    return LinearRetry(
        total=max(1, retries) - 1,
        backoff_factor=backoff_sec,
        status_forcelist=sorted(RETRY_STATUSES),
        allowed_methods=["GET"],
        raise_on_status=False,
    )


def build_session(retries: int, backoff_sec: float) -> requests.Session:
    sess = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry(retries, backoff_sec))
    sess.mount("https://", adapter)
    sess.mount("http://", adapter)
    return sess


class BaseClient:
    def __init__(
        self,
        base_url: str,
        rate_limit_sec: float = RATE_LIMIT_SEC,
        timeout: float = REQUEST_TIMEOUT_SEC,
        retries: int = REQUEST_RETRIES,
        backoff_sec: float = RETRY_BACKOFF_SEC,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.rate_limit_sec = rate_limit_sec
        self.timeout = timeout
        self.retries = max(1, retries)
        self.backoff_sec = backoff_sec
        self.last_request_time = 0.0
        self.session = session or build_session(self.retries, backoff_sec)
        self.session.headers.update({"User-Agent": USER_AGENT})

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _wait_rate_limit(self):
        elapsed = time.time() - self.last_request_time
        if elapsed < self.rate_limit_sec:
            time.sleep(self.rate_limit_sec - elapsed)

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET the given path and decode the JSON body.

        Transient failures (429, 5xx, connection errors, timeouts) are retried
        by the session's LinearRetry adapter up to ``retries`` attempts. A status
        still failing after that, any other HTTP error, a connection error or
        an undecodable body raises ApiError.
        """
        url = self.build_url(path)
        self._wait_rate_limit()
        logger.debug(f"Fetching: {url} params={params}")
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Request failed ({type(e).__name__}): {url}: {e}")
            raise ApiError(f"API呼び出し失敗: {url}: {e}", url=url) from e
        finally:
            self.last_request_time = time.time()

        status = resp.status_code
        if not 200 <= status < 300:
            body = resp.text[:500] if resp.text else "<no body>"
            raise ApiError(f"APIエラー {status} {url}: {body}", status=status, url=url)

        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"JSON解析に失敗しました: {url}", status=status, url=url) from e
