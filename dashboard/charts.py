"""Plotly chart builders for model pricing."""

import plotly.graph_objects as go
from config.constants import SortKey
from pricing.models import Model
from pricing.sorting import sort_models, vendor_name
from pricing.cost import sample_price


def sample_price_chart(
    models: list[Model],
    input_text: str,
    output_text: str,
    limit: int = 15,
    title: str = "Cheapest Models for the Sample Conversation",
) -> go.Figure:
    """Horizontal bar chart of the lowest sample prices."""
    priced = [m for m in models if m.pricing is not None]
    cheapest = sort_models(priced, SortKey.SAMPLE_PRICE, "asc", input_text, output_text)[:limit]
    # Cheapest on top
    cheapest.reverse()

    costs = [sample_price(m, input_text, output_text) or 0.0 for m in cheapest]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=costs,
        y=[m.display_name for m in cheapest],
        orientation="h",
        marker_color="#2979FF",
        text=[f"${c:.3f}" for c in costs],
        textposition="auto",
        customdata=[vendor_name(m) for m in cheapest],
        hovertemplate="%{y} (%{customdata}): $%{x:.6f}<extra></extra>",
        name="Sample price",
    ))

    fig.update_layout(
        title=title,
        xaxis_title="Estimated cost (USD)",
        template="plotly_dark",
        height=max(300, 28 * len(cheapest) + 120),
        margin=dict(l=200, r=30, t=50, b=40),
    )
    return fig


def price_comparison_chart(
    models: list[Model],
    limit: int = 15,
    title: str = "Input vs Output Price (per 1M tokens)",
) -> go.Figure:
    """Grouped bars of input and output prices for the cheapest-input models."""
    priced = sort_models(
        [m for m in models if m.pricing is not None], SortKey.INPUT_PRICE, "asc"
    )[:limit]
    names = [m.display_name for m in priced]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=names,
        y=[m.pricing.input_text for m in priced],
        name="Input",
        marker_color="#00C853",
    ))
    fig.add_trace(go.Bar(
        x=names,
        y=[m.pricing.output_text for m in priced],
        name="Output",
        marker_color="#FF9100",
    ))

    fig.update_layout(
        title=title,
        barmode="group",
        yaxis_title="USD per 1M tokens",
        template="plotly_dark",
        height=420,
        margin=dict(l=50, r=30, t=50, b=120),
    )
    return fig
