"""Base collector with a shared aiohttp session and retry with backoff."""

import aiohttp
import structlog
from abc import ABC, abstractmethod
from typing import Any
from config.settings import settings
from utils.retry import retry_async

log = structlog.get_logger(__name__)

USER_AGENT = "inference-pricing-tool"

# Statuses worth another attempt; anything else >= 400 fails fast
RETRYABLE_STATUSES = frozenset({408, 425, 429, 500, 502, 503, 504})


class UpstreamError(Exception):
    """HTTP error from an upstream source that should NOT be retried."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        super().__init__(message)


class BaseCollector(ABC):
    """Abstract base class for upstream data sources."""

    api_name: str = "unknown"

    def __init__(
        self,
        timeout: float | None = None,
        max_retries: int | None = None,
        base_delay: float = 1.0,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.upstream_timeout
        self.max_retries = max_retries if max_retries is not None else settings.upstream_max_retries
        self.base_delay = base_delay
        self._session: aiohttp.ClientSession | None = None

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        session = await self.get_session()
        async with session.get(url, params=params, headers=headers) as resp:
            if resp.status >= 400 and resp.status not in RETRYABLE_STATUSES:
                log.warning("non_retryable_http_error", api=self.api_name, status=resp.status, url=url)
                raise UpstreamError(resp.status, f"HTTP {resp.status} for {url}")
            resp.raise_for_status()
            # Some hosts serve JSON as text/plain
            return await resp.json(content_type=None)

    async def _request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """HTTP GET returning decoded JSON, retrying transient failures."""
        return await retry_async(
            self._get_json,
            url,
            params=params,
            headers=headers,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            exceptions=(aiohttp.ClientError, TimeoutError),
        )

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the source is reachable."""
        ...
