"""Data manager: fetches, normalizes, caches and persists the pricing graph."""

from collections.abc import Iterable
from typing import Any
import structlog
from config.settings import settings
from data.cache import TTLCache
from data.collectors.upstream import UpstreamModelsCollector
from pricing.models import Category, ModelGraph, Vendor
from pricing.normalizer import normalize
from storage.json_store import JsonGraphStore
from storage.repositories.model_repo import ModelRepository

log = structlog.get_logger(__name__)

GRAPH_CACHE_KEY = "graph"


def fallback_graph() -> ModelGraph:
    """Minimal graph served in production when no data source is reachable."""
    return ModelGraph(
        models=[],
        categories=[Category(id=1, name="General", description="General purpose AI models")],
        vendors=[
            Vendor(
                id=1,
                name="Anthropic",
                pricing_url="https://anthropic.com/pricing",
                models_list_url="https://anthropic.com/models",
            )
        ],
    )


class PricingDataManager:
    """Central orchestrator for the upstream feed, snapshots and the graph cache."""

    def __init__(
        self,
        collector: UpstreamModelsCollector | None = None,
        store: JsonGraphStore | None = None,
        model_repo: ModelRepository | None = None,
        cache_ttl: float | None = None,
        allowed_vendors: Iterable[str] | None = None,
    ) -> None:
        self.collector = collector or UpstreamModelsCollector()
        self.store = store
        self.model_repo = model_repo
        self.cache = TTLCache(default_ttl=cache_ttl if cache_ttl is not None else settings.cache_ttl)
        self.allowed_vendors = list(allowed_vendors or settings.allowed_vendors)

    async def close(self) -> None:
        await self.collector.close()
        log.info("data_manager_closed")

    async def health_check(self) -> dict[str, bool]:
        try:
            upstream = await self.collector.health_check()
        except Exception:
            upstream = False
        return {
            "upstream": upstream,
            "cached": self.cache.get(GRAPH_CACHE_KEY) is not None,
        }

    async def load_data(self) -> ModelGraph:
        """The current graph, from cache when fresh.

        Falls back to the stored snapshot when the feed fails, and in
        production to a minimal placeholder graph. Otherwise the feed error
        propagates.
        """
        cached = self.cache.get(GRAPH_CACHE_KEY)
        if cached is not None:
            return cached
        return await self.refresh()

    async def refresh(self) -> ModelGraph:
        """Rebuild the graph from the upstream feed, bypassing the cache."""
        try:
            raw = await self.collector.fetch_models()
            graph = normalize(raw, self.allowed_vendors)
        except Exception as e:
            log.error("upstream_load_failed", error=str(e), error_type=type(e).__name__)
            graph = await self._load_snapshot()
            if graph is None:
                if not settings.is_production:
                    raise
                log.warning("using_fallback_graph")
                graph = fallback_graph()
            self.cache.set(GRAPH_CACHE_KEY, graph)
            return graph

        await self._persist(graph)
        self.cache.set(GRAPH_CACHE_KEY, graph)
        log.info("graph_loaded", models=len(graph.models), vendors=len(graph.vendors),
                 categories=len(graph.categories), pricing_issues=len(graph.pricing_issues))
        return graph

    async def _persist(self, graph: ModelGraph) -> None:
        if self.store is not None:
            try:
                self.store.save(graph)
            except OSError as e:
                log.warning("json_snapshot_save_failed", error=str(e))
        if self.model_repo is not None:
            try:
                await self.model_repo.save_graph(graph)
            except Exception as e:
                log.warning("database_save_failed", error=str(e))

    async def _load_snapshot(self) -> ModelGraph | None:
        """Most recent persisted graph: database first, then the JSON files."""
        if self.model_repo is not None:
            try:
                graph = self._graph_from("database", await self.model_repo.load_payload())
            except Exception as e:
                log.warning("snapshot_load_failed", source="database", error=str(e))
            else:
                if graph is not None:
                    return graph

        if self.store is not None:
            try:
                return self._graph_from("json", self.store.load_payload())
            except Exception as e:
                log.warning("snapshot_load_failed", source="json", error=str(e))
        return None

    def _graph_from(self, source: str, payload: dict[str, Any] | None) -> ModelGraph | None:
        if not payload or not payload.get("models"):
            return None
        graph = normalize(payload)
        log.info("snapshot_loaded", source=source, models=len(graph.models))
        return graph
