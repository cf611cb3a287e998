"""Tests for pricing/cost.py — per-million-token cost math."""

import pytest
from pricing.cost import (
    calculate_cost,
    calculate_input_cost,
    calculate_output_cost,
    calculate_total_cost,
    sample_price,
)
from pricing.models import Model, Pricing
from pricing.tokens import estimate_token_count


class TestCalculateCost:
    def test_none_price(self):
        assert calculate_cost("Hello world", None) is None

    @pytest.mark.parametrize("price", [0.0, 0.075, 3.0, 15.0, 600.0])
    @pytest.mark.parametrize("text", ["", "Hello world", "Hello, world! " * 40])
    def test_linearity(self, price, text):
        assert calculate_cost(text, price) == (price / 1_000_000) * estimate_token_count(text)

    def test_million_tokens_at_unit_price(self):
        text = "[TOKEN_MULTIPLIER:250000]abcdefghijklmnop"  # 4 tokens each
        assert calculate_cost(text, 2.0) == pytest.approx(2.0)

    def test_named_legs_match(self):
        assert calculate_input_cost("Hello", 3.0) == calculate_output_cost("Hello", 3.0)


class TestCalculateTotalCost:
    def test_both_legs(self):
        result = calculate_total_cost("Hello world", "Hello world", 1.0, 2.0)
        assert result.input_cost == pytest.approx(3e-6)
        assert result.output_cost == pytest.approx(6e-6)
        assert result.total == pytest.approx(9e-6)

    def test_missing_input_price(self):
        result = calculate_total_cost("a", "b", None, 5.0)
        assert result.total is None
        assert result.input_cost is None
        assert result.output_cost is not None

    def test_missing_output_price(self):
        result = calculate_total_cost("a", "b", 5.0, None)
        assert result.total is None
        assert result.output_cost is None

    def test_zero_price_is_defined(self):
        assert calculate_total_cost("a", "b", 0.0, 0.0).total == 0.0


class TestSamplePrice:
    def test_unpriced_model(self):
        model = Model(id=1, system_name="x", display_name="X", category_id=1, vendor_id=1)
        assert sample_price(model, "in", "out") is None

    def test_priced_model(self):
        model = Model(
            id=1, system_name="x", display_name="X", category_id=1, vendor_id=1,
            pricing=Pricing(input_text=1.0, output_text=2.0),
        )
        assert sample_price(model, "Hello world", "Hello world") == pytest.approx(9e-6)
