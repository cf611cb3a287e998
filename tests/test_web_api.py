"""Tests for the Quart web app and JSON API."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from pricing.models import Model
from web.app import create_app
from web.routes.api import model_row, parse_table_query
from werkzeug.datastructures import MultiDict


@pytest.fixture
def data_manager(graph):
    dm = MagicMock()
    dm.load_data = AsyncMock(return_value=graph)
    dm.health_check = AsyncMock(return_value={"upstream": True, "cached": True})
    return dm


@pytest.fixture
def client(data_manager):
    return create_app(data_manager=data_manager).test_client()


class TestParseTableQuery:
    def test_defaults(self):
        query = parse_table_query(MultiDict())
        assert query.sort.value == "displayName"
        assert query.direction.value == "asc"
        assert query.multiplier == 1
        assert query.categories == []

    def test_repeated_and_comma_separated(self):
        query = parse_table_query(MultiDict([("vendor", "Google, Anthropic"), ("vendor", "Meta")]))
        assert query.vendors == ["Google", "Anthropic", "Meta"]

    def test_multiplier_applied_to_texts(self):
        query = parse_table_query(MultiDict({"input": "hi", "output": "yo", "multiplier": "10"}))
        assert query.priced_input.startswith("[TOKEN_MULTIPLIER:10]")

    @pytest.mark.parametrize("args", [{"sort": "cost"}, {"direction": "sideways"}, {"context": "huge"},
                                      {"multiplier": "lots"}])
    def test_invalid(self, args):
        with pytest.raises(ValueError):
            parse_table_query(MultiDict(args))


class TestModelsEndpoint:
    async def test_default_listing(self, client):
        resp = await client.get("/api/models")
        assert resp.status_code == 200
        data = await resp.get_json()
        assert [m["id"] for m in data] == [3, 1, 2, 4]
        assert data[1]["vendorName"] == "Anthropic"
        assert data[1]["categoryName"] == "Conversational"
        assert data[1]["pricingUrl"] == "https://anthropic.com/pricing"
        assert data[1]["samplePrice"] > 0
        assert data[3]["samplePrice"] is None

    async def test_filters(self, client):
        resp = await client.get("/api/models?vendor=Google&category=Code%20Generation")
        assert [m["id"] for m in await resp.get_json()] == [4]

    async def test_context_bucket(self, client):
        resp = await client.get("/api/models?context=xlarge")
        assert [m["id"] for m in await resp.get_json()] == [2]

    async def test_sort_desc(self, client):
        resp = await client.get("/api/models?sort=inputPrice&direction=desc")
        assert [m["id"] for m in await resp.get_json()] == [4, 1, 3, 2]

    async def test_bad_sort(self, client):
        resp = await client.get("/api/models?sort=cost")
        assert resp.status_code == 400

    async def test_data_unavailable(self, client, data_manager):
        data_manager.load_data.side_effect = RuntimeError("feed down")
        resp = await client.get("/api/models")
        assert resp.status_code == 503


class TestTables:
    async def test_categories(self, client):
        data = await (await client.get("/api/categories")).get_json()
        assert [(c["name"], c["modelCount"]) for c in data] == [("Conversational", 2), ("Code Generation", 2)]

    async def test_vendors(self, client):
        data = await (await client.get("/api/vendors")).get_json()
        assert [(v["name"], v["modelCount"]) for v in data] == [("Anthropic", 2), ("Google", 2)]


class TestEstimate:
    async def test_explicit_prices(self, client):
        resp = await client.post("/api/estimate", json={
            "inputText": "Hello world", "outputText": "Hello world", "inputPrice": 1.0, "outputPrice": 2.0,
        })
        data = await resp.get_json()
        assert data["inputTokens"] == 3
        assert data["outputTokens"] == 3
        assert data["total"] == pytest.approx(9e-6)

    async def test_model_prices(self, client):
        resp = await client.post("/api/estimate", json={"inputText": "a" * 100, "modelId": 1})
        data = await resp.get_json()
        assert data["inputCost"] == pytest.approx(15.0 * 25 / 1_000_000)

    async def test_multiplier(self, client):
        resp = await client.post("/api/estimate", json={"inputText": "a" * 100, "multiplier": 4})
        assert (await resp.get_json())["inputTokens"] == 100

    async def test_missing_price(self, client):
        resp = await client.post("/api/estimate", json={"inputText": "hi", "outputPrice": 1.0})
        data = await resp.get_json()
        assert data["inputCost"] is None
        assert data["total"] is None

    async def test_unknown_model(self, client):
        resp = await client.post("/api/estimate", json={"modelId": 99})
        assert resp.status_code == 404

    async def test_bad_multiplier(self, client):
        resp = await client.post("/api/estimate", json={"multiplier": "many"})
        assert resp.status_code == 400

    async def test_numeric_strings_are_coerced(self, client):
        resp = await client.post("/api/estimate", json={
            "inputText": "Hello world", "outputText": "Hello world", "inputPrice": "1", "outputPrice": "2.0",
        })
        assert resp.status_code == 200
        assert (await resp.get_json())["total"] == pytest.approx(9e-6)

    async def test_string_model_id(self, client):
        resp = await client.post("/api/estimate", json={"inputText": "a" * 100, "modelId": "1"})
        assert resp.status_code == 200
        assert (await resp.get_json())["inputCost"] == pytest.approx(15.0 * 25 / 1_000_000)

    @pytest.mark.parametrize("body", [
        {"inputPrice": "abc"},
        {"outputPrice": [1]},
        {"inputPrice": True},
        {"modelId": "first"},
        {"modelId": {"id": 1}},
    ])
    async def test_unconvertible_values(self, client, body):
        resp = await client.post("/api/estimate", json={"inputText": "hi", **body})
        assert resp.status_code == 400
        assert "error" in await resp.get_json()

    async def test_non_object_body(self, client):
        resp = await client.post("/api/estimate", json=[1, 2])
        assert resp.status_code == 400


class TestModelRow:
    def test_names_resolved_from_graph(self, graph):
        row = model_row(graph.models[3], graph, "Hello", "World")
        assert row["vendorName"] == "Google"
        assert row["categoryName"] == "Code Generation"
        assert row["pricingUrl"] == "https://google.com/pricing"
        assert row["samplePrice"] is None

    def test_unlinked_model_uses_fallbacks(self, graph):
        orphan = Model(id=9, system_name="x", display_name="X", category_id=42, vendor_id=42)
        row = model_row(orphan, graph, "Hello", "World")
        assert row["vendorName"] == "Unknown"
        assert row["categoryName"] == "Unknown"
        assert row["pricingUrl"] == "#"


class TestExports:
    async def test_csv(self, client):
        resp = await client.get("/api/export.csv")
        assert resp.status_code == 200
        assert "ai_models_pricing.csv" in resp.headers["Content-Disposition"]
        body = (await resp.get_data()).decode()
        assert body.startswith("systemName,displayName,")
        assert len(body.strip().split("\n")) == 5

    async def test_json_filtered(self, client):
        resp = await client.get("/api/export.json?vendor=Anthropic")
        assert resp.mimetype == "application/json"
        data = await resp.get_json()
        assert [r["systemName"] for r in data] == ["anthropic/claude-3-opus", "anthropic/claude-3-haiku"]


class TestHealthAndPage:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert await resp.get_json() == {"status": "ok", "upstream": True, "cached": True}

    async def test_health_without_data_manager(self):
        resp = await create_app().test_client().get("/health")
        assert resp.status_code == 503

    async def test_pricing_page(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        html = (await resp.get_data()).decode()
        assert "Claude 3 Opus" in html
        assert "$15.000" in html

    async def test_pricing_page_bad_query(self, client):
        resp = await client.get("/?direction=up")
        assert resp.status_code == 400

    async def test_pricing_page_unavailable(self):
        resp = await create_app().test_client().get("/")
        assert resp.status_code == 503
        assert "unavailable" in (await resp.get_data()).decode()
