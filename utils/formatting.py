"""Display formatting for prices, costs, token counts and model sizes.

Prices are stored as dollars per MILLION tokens and are shown as-is. Never
divide them for display.
"""

import structlog
from config.constants import PRICE_SUSPICIOUSLY_HIGH_OUTPUT, PRICE_SUSPICIOUSLY_LOW

log = structlog.get_logger(__name__)


def format_parameters(params_b: float | int | None) -> str:
    """Format a parameter count in billions (e.g., 1800 -> "1.8T")."""
    if params_b is None:
        return "N/A"
    if params_b >= 1000:
        return f"{params_b / 1000:.1f}T"
    if float(params_b).is_integer():
        return f"{int(params_b)}B"
    return f"{params_b}B"


def format_cost(cost: float | None) -> str:
    """Format an estimated cost in dollars."""
    if cost is None:
        return "N/A"
    return f"${cost:.3f}"


def format_price(price_per_million: float | None, model_name: str | None = None) -> str:
    """Format a per-million-token price, flagging likely unit mistakes."""
    if price_per_million is None:
        return "N/A"

    # Reads like a per-token price
    if 0 < price_per_million < PRICE_SUSPICIOUSLY_LOW:
        log.error("price_suspiciously_low", price=price_per_million, model=model_name)
        return f"ERROR: ${price_per_million:.6f} ⚠️"

    if price_per_million > PRICE_SUSPICIOUSLY_HIGH_OUTPUT:
        log.error("price_unusually_high", price=price_per_million, model=model_name)
        return f"CHECK: ${price_per_million:.3f} ⚠️"

    return f"${price_per_million:.3f}"


def format_tokens(tokens: int | None) -> str:
    """Format a token window (e.g., 128000 -> "128K")."""
    if tokens is None:
        return "N/A"
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.0f}K"
    return str(tokens)


def truncate(text: str, max_length: int = 160) -> str:
    """Truncate text to max_length, adding ellipsis if needed."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
