"""Pricing table page with interactive Plotly charts."""

import structlog
from quart import Blueprint, render_template, request
from config.constants import ContextBucket, SortKey
from dashboard.charts import price_comparison_chart, sample_price_chart
from utils.formatting import format_cost, format_parameters, format_price, format_tokens, truncate
from web.routes.api import apply_table_query, load_graph, model_row, parse_table_query

log = structlog.get_logger(__name__)

pricing_bp = Blueprint("pricing_routes", __name__)


@pricing_bp.route("/")
async def pricing_page():
    try:
        query = parse_table_query(request.args)
    except ValueError as e:
        return await render_template("pricing.html", error=str(e)), 400
    try:
        graph = await load_graph()
    except Exception as e:
        log.error("pricing_page_unavailable", error=str(e))
        return await render_template("pricing.html", error="Pricing data is unavailable."), 503

    models = apply_table_query(graph.models, query)
    rows = []
    for model in models:
        row = model_row(model, graph, query.priced_input, query.priced_output)
        row["display"] = {
            "parameters": format_parameters(model.parameters_b),
            "context": format_tokens(model.context_window),
            "tokenLimit": format_tokens(model.token_limit),
            "input": format_price(model.pricing.input_text if model.pricing else None, model.display_name),
            "output": format_price(model.pricing.output_text if model.pricing else None, model.display_name),
            "sample": format_cost(row["samplePrice"]),
            "description": truncate(model.description or ""),
        }
        rows.append(row)

    charts = {
        "sample": sample_price_chart(models, query.priced_input, query.priced_output).to_html(
            full_html=False, include_plotlyjs="cdn"
        ),
        "prices": price_comparison_chart(models).to_html(full_html=False, include_plotlyjs=False),
    }
    return await render_template(
        "pricing.html",
        rows=rows,
        query=query,
        categories=[c.name for c in graph.categories],
        vendors=[v.name for v in graph.vendors],
        context_buckets=[b.value for b in ContextBucket],
        sort_keys=[k.value for k in SortKey],
        issues=[i.to_dict() for i in graph.pricing_issues],
        charts=charts,
    )
