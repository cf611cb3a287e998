"""Tests for data/manager.py — PricingDataManager orchestration."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from data.manager import GRAPH_CACHE_KEY, PricingDataManager, fallback_graph
from storage.json_store import JsonGraphStore


@pytest.fixture
def collector(raw_records):
    c = MagicMock()
    c.fetch_models = AsyncMock(return_value={"data": {"models": raw_records}})
    c.health_check = AsyncMock(return_value=True)
    c.close = AsyncMock()
    return c


@pytest.fixture
def dm(collector):
    return PricingDataManager(collector=collector, cache_ttl=60, allowed_vendors=["anthropic", "google"])


class TestLoadData:
    async def test_fetches_and_normalizes(self, dm, collector):
        graph = await dm.load_data()
        assert [m.system_name for m in graph.models] == [
            "anthropic/claude-3-opus", "google/gemini-1.5-flash",
        ]
        collector.fetch_models.assert_awaited_once()

    async def test_uses_cache(self, dm, collector):
        first = await dm.load_data()
        second = await dm.load_data()
        assert first is second
        collector.fetch_models.assert_awaited_once()

    async def test_refresh_bypasses_cache(self, dm, collector):
        await dm.load_data()
        await dm.refresh()
        assert collector.fetch_models.await_count == 2

    async def test_expired_cache_refetches(self, dm, collector):
        await dm.load_data()
        dm.cache.set(GRAPH_CACHE_KEY, dm.cache.get(GRAPH_CACHE_KEY), ttl=0)
        await dm.load_data()
        assert collector.fetch_models.await_count == 2

    async def test_allowed_vendors_applied(self, collector):
        dm = PricingDataManager(collector=collector, cache_ttl=60, allowed_vendors=["google"])
        graph = await dm.load_data()
        assert [v.name for v in graph.vendors] == ["Google"]


class TestFallbacks:
    async def test_json_snapshot_when_feed_fails(self, collector, graph, tmp_path):
        store = JsonGraphStore(tmp_path)
        store.save(graph)
        collector.fetch_models.side_effect = RuntimeError("feed down")
        dm = PricingDataManager(collector=collector, store=store, cache_ttl=60)
        loaded = await dm.load_data()
        assert [m.id for m in loaded.models] == [1, 2, 3, 4]
        assert loaded.models[0].vendor.name == "Anthropic"

    async def test_database_snapshot_preferred(self, collector, graph, tmp_path):
        store = JsonGraphStore(tmp_path)
        repo = MagicMock()
        repo.load_payload = AsyncMock(return_value=graph.to_dict())
        collector.fetch_models.side_effect = RuntimeError("feed down")
        dm = PricingDataManager(collector=collector, store=store, model_repo=repo, cache_ttl=60)
        loaded = await dm.load_data()
        assert len(loaded.models) == 4
        repo.load_payload.assert_awaited_once()

    async def test_empty_database_falls_through_to_json(self, collector, graph, tmp_path):
        store = JsonGraphStore(tmp_path)
        store.save(graph)
        repo = MagicMock()
        repo.load_payload = AsyncMock(return_value={"models": [], "categories": [], "vendors": []})
        collector.fetch_models.side_effect = RuntimeError("feed down")
        dm = PricingDataManager(collector=collector, store=store, model_repo=repo, cache_ttl=60)
        assert len((await dm.load_data()).models) == 4

    async def test_error_propagates_outside_production(self, collector):
        collector.fetch_models.side_effect = RuntimeError("feed down")
        dm = PricingDataManager(collector=collector, cache_ttl=60)
        with patch("data.manager.settings") as mock_settings:
            mock_settings.is_production = False
            with pytest.raises(RuntimeError, match="feed down"):
                await dm.load_data()

    async def test_unrecognized_payload_propagates(self, collector):
        collector.fetch_models.return_value = {"unexpected": True}
        dm = PricingDataManager(collector=collector, cache_ttl=60)
        with patch("data.manager.settings") as mock_settings:
            mock_settings.is_production = False
            with pytest.raises(ValueError):
                await dm.load_data()

    async def test_production_fallback_graph(self, collector):
        collector.fetch_models.side_effect = RuntimeError("feed down")
        dm = PricingDataManager(collector=collector, cache_ttl=60)
        with patch("data.manager.settings") as mock_settings:
            mock_settings.is_production = True
            graph = await dm.load_data()
        assert graph.models == []
        assert graph.categories[0].name == "General"
        assert graph.vendors[0].name == "Anthropic"

    def test_fallback_graph_shape(self):
        graph = fallback_graph()
        assert graph.categories[0].description == "General purpose AI models"
        assert graph.vendors[0].pricing_url == "https://anthropic.com/pricing"


class TestPersistence:
    async def test_saves_snapshot_and_database(self, collector, tmp_path):
        store = JsonGraphStore(tmp_path)
        repo = MagicMock()
        repo.save_graph = AsyncMock(return_value=2)
        dm = PricingDataManager(collector=collector, store=store, model_repo=repo, cache_ttl=60)
        graph = await dm.load_data()
        assert store.exists()
        repo.save_graph.assert_awaited_once_with(graph)

    async def test_save_failures_do_not_fail_load(self, collector):
        store = MagicMock()
        store.save.side_effect = OSError("disk full")
        repo = MagicMock()
        repo.save_graph = AsyncMock(side_effect=RuntimeError("db down"))
        dm = PricingDataManager(collector=collector, store=store, model_repo=repo, cache_ttl=60)
        graph = await dm.load_data()
        assert len(graph.models) == 2


class TestHealth:
    async def test_health_check(self, dm):
        assert await dm.health_check() == {"upstream": True, "cached": False}
        await dm.load_data()
        assert (await dm.health_check())["cached"] is True

    async def test_health_check_tolerates_errors(self, dm, collector):
        collector.health_check.side_effect = RuntimeError("boom")
        assert (await dm.health_check())["upstream"] is False

    async def test_close(self, dm, collector):
        await dm.close()
        collector.close.assert_awaited_once()
