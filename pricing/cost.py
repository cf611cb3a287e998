"""Cost estimates from token counts and per-million-token prices."""

from dataclasses import dataclass
from config.constants import TOKENS_PER_PRICE_UNIT
from pricing.models import Model
from pricing.tokens import estimate_token_count


@dataclass(frozen=True)
class CostBreakdown:
    total: float | None
    input_cost: float | None
    output_cost: float | None


def calculate_cost(text: str, price_per_million: float | None) -> float | None:
    """Cost of ``text`` at ``price_per_million`` dollars per million tokens."""
    if price_per_million is None:
        return None
    return (price_per_million / TOKENS_PER_PRICE_UNIT) * estimate_token_count(text)


def calculate_input_cost(text: str, price_per_million: float | None) -> float | None:
    return calculate_cost(text, price_per_million)


def calculate_output_cost(text: str, price_per_million: float | None) -> float | None:
    return calculate_cost(text, price_per_million)


def calculate_total_cost(
    input_text: str,
    output_text: str,
    input_price: float | None,
    output_price: float | None,
) -> CostBreakdown:
    """Input and output legs plus their sum.

    ``total`` is None unless both legs are priced.
    """
    input_cost = calculate_input_cost(input_text, input_price)
    output_cost = calculate_output_cost(output_text, output_price)
    total = (
        input_cost + output_cost
        if input_cost is not None and output_cost is not None
        else None
    )
    return CostBreakdown(total=total, input_cost=input_cost, output_cost=output_cost)


def sample_price(model: Model, input_text: str, output_text: str) -> float | None:
    """Total cost of running the sample texts through ``model``; None if unpriced."""
    if model.pricing is None:
        return None
    return calculate_total_cost(
        input_text,
        output_text,
        model.pricing.input_text,
        model.pricing.output_text,
    ).total
