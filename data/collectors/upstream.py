"""Collector for the public AI model listings feed."""

from typing import Any
import structlog
from config.settings import settings
from data.collectors.base import BaseCollector

log = structlog.get_logger(__name__)


class UpstreamModelsCollector(BaseCollector):
    api_name = "models_feed"

    def __init__(self, url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.url = url or settings.upstream_models_url

    async def fetch_models(self) -> Any:
        """Raw listings payload, in whatever shape the feed currently serves."""
        payload = await self._request(self.url)
        log.info("upstream_models_fetched", url=self.url, payload_type=type(payload).__name__)
        return payload

    async def health_check(self) -> bool:
        try:
            session = await self.get_session()
            async with session.head(self.url) as resp:
                return resp.status < 400
        except Exception:
            return False
