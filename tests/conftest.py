"""Shared test fixtures for the inference pricing test suite."""

import pytest
from pricing.models import Category, Model, ModelGraph, Pricing, Vendor, link_relationships


# ── Database Pool Mock ──


class FakeRecord(dict):
    """Mimics asyncpg.Record: supports both dict-style and attribute access."""
    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)


class FakeConnection:
    """Mock asyncpg connection with configurable return values."""

    def __init__(self):
        self.execute_results: list[str] = ["UPDATE 1"]
        self.fetch_results: list[list[dict]] = [[]]
        self.fetchrow_result: dict | None = None
        self.fetchval_result: int | None = 1
        self._execute_calls: list[tuple] = []
        self._fetch_calls: list[tuple] = []
        self._fetchval_calls: list[tuple] = []

    async def execute(self, query, *args):
        self._execute_calls.append((query, args))
        return self.execute_results[0] if self.execute_results else "UPDATE 0"

    async def fetch(self, query, *args):
        self._fetch_calls.append((query, args))
        result = self.fetch_results.pop(0) if self.fetch_results else []
        return [FakeRecord(r) for r in result]

    async def fetchrow(self, query, *args):
        return FakeRecord(self.fetchrow_result) if self.fetchrow_result else None

    async def fetchval(self, query, *args):
        self._fetchval_calls.append((query, args))
        return self.fetchval_result

    def transaction(self):
        return FakeTransaction()


class FakeTransaction:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakePool:
    """Mock asyncpg.Pool that yields a FakeConnection."""

    def __init__(self):
        self.conn = FakeConnection()

    def acquire(self):
        return FakePoolContext(self.conn)


class FakePoolContext:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *args):
        pass


@pytest.fixture
def fake_pool():
    """Provide a mock database pool."""
    return FakePool()


@pytest.fixture
def fake_conn(fake_pool):
    """Direct access to the underlying FakeConnection."""
    return fake_pool.conn


# ── Upstream payloads ──


@pytest.fixture
def raw_records():
    """Upstream listing records in the OpenRouter-like shape."""
    return [
        {
            "id": "anthropic/claude-3-opus",
            "name": "Claude 3 Opus",
            "description": "Powerful model for highly complex tasks",
            "context_length": 200000,
            "top_provider": {"max_completion_tokens": 4096},
            "architecture": {"modality": "text+image->text"},
            "created": 1709596800,
            "pricing": {"prompt": "0.000015", "completion": "0.000075"},
        },
        {
            "id": "google/gemini-1.5-flash",
            "name": "Gemini 1.5 Flash",
            "context_length": 1000000,
            "pricing": {"prompt": 0.000000075, "completion": 0.0000003},
        },
        {
            "id": "meta-llama/llama-3.1-8b-instruct",
            "name": "Llama 3.1 8B Instruct",
            "context_length": 131072,
            "pricing": {"prompt": "0.00000005", "completion": "0.00000005"},
        },
        {
            "id": "openai/gpt-4o",
            "name": "GPT-4o",
            "pricing": {"prompt": "0.0000025", "completion": "0.00001"},
        },
    ]


# ── Canonical graph ──


@pytest.fixture
def graph():
    """A small linked canonical graph."""
    categories = [
        Category(id=1, name="Conversational"),
        Category(id=2, name="Code Generation"),
    ]
    vendors = [
        Vendor(id=1, name="Anthropic", pricing_url="https://anthropic.com/pricing"),
        Vendor(id=2, name="Google", pricing_url="https://google.com/pricing"),
    ]
    models = [
        Model(
            id=1, system_name="anthropic/claude-3-opus", display_name="Claude 3 Opus",
            category_id=1, vendor_id=1, host="Anthropic", parameters_b=None,
            context_window=200_000, token_limit=4096,
            pricing=Pricing(input_text=15.0, output_text=75.0, id=1, model_id=1),
        ),
        Model(
            id=2, system_name="google/gemini-1.5-flash", display_name="Gemini 1.5 Flash",
            category_id=1, vendor_id=2, host="Google", context_window=1_000_000,
            pricing=Pricing(input_text=0.075, output_text=0.3, id=2, model_id=2),
        ),
        Model(
            id=3, system_name="anthropic/claude-3-haiku", display_name="Claude 3 Haiku",
            category_id=2, vendor_id=1, host="Anthropic", parameters_b=20,
            context_window=100_000,
            pricing=Pricing(input_text=0.25, output_text=1.25, id=3, model_id=3),
        ),
        Model(
            id=4, system_name="google/gemma-7b", display_name="Gemma 7B",
            category_id=2, vendor_id=2, host="Google", parameters_b=7,
            context_window=8192,
        ),
    ]
    link_relationships(models, categories, vendors)
    return ModelGraph(models=models, categories=categories, vendors=vendors)
