"""JSON API endpoints for the pricing table."""

import math
from dataclasses import dataclass, field
from typing import Any
import structlog
from quart import Blueprint, Response, current_app, jsonify, request
from config.constants import ContextBucket, SortDirection, SortKey
from pricing.cost import calculate_total_cost
from pricing.export import prepare_export_data, to_csv, to_json
from pricing.models import Model, ModelGraph, get_category_name, get_vendor_name, get_vendor_pricing_url
from pricing.sample_text import DEFAULT_OUTPUT_TEXT, DEFAULT_SAMPLE_TEXT
from pricing.sorting import filter_by_context_window, filter_models, sort_models
from pricing.tokens import estimate_token_count, with_multiplier

log = structlog.get_logger(__name__)

api_bp = Blueprint("api", __name__)


@dataclass
class TableQuery:
    categories: list[str] = field(default_factory=list)
    vendors: list[str] = field(default_factory=list)
    context: ContextBucket = ContextBucket.ALL
    sort: SortKey = SortKey.DISPLAY_NAME
    direction: SortDirection = SortDirection.ASC
    input_text: str = DEFAULT_SAMPLE_TEXT
    output_text: str = DEFAULT_OUTPUT_TEXT
    multiplier: int = 1

    @property
    def priced_input(self) -> str:
        return with_multiplier(self.input_text, self.multiplier)

    @property
    def priced_output(self) -> str:
        return with_multiplier(self.output_text, self.multiplier)


def _list_arg(args: Any, name: str) -> list[str]:
    values = []
    for raw in args.getlist(name):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values


def parse_table_query(args: Any) -> TableQuery:
    """Build a ``TableQuery`` from request args; raises ValueError on bad values."""
    return TableQuery(
        categories=_list_arg(args, "category"),
        vendors=_list_arg(args, "vendor"),
        context=ContextBucket(args.get("context", ContextBucket.ALL.value)),
        sort=SortKey(args.get("sort", SortKey.DISPLAY_NAME.value)),
        direction=SortDirection(args.get("direction", SortDirection.ASC.value)),
        input_text=args.get("input", DEFAULT_SAMPLE_TEXT),
        output_text=args.get("output", DEFAULT_OUTPUT_TEXT),
        multiplier=int(args.get("multiplier", 1)),
    )


def apply_table_query(models: list[Model], query: TableQuery) -> list[Model]:
    visible = filter_models(models, query.categories, query.vendors)
    visible = filter_by_context_window(visible, query.context)
    return sort_models(visible, query.sort, query.direction, query.priced_input, query.priced_output)


def model_row(model: Model, graph: ModelGraph, input_text: str, output_text: str) -> dict[str, Any]:
    """Model dict plus display names and sample cost estimates."""
    pricing = model.pricing
    costs = calculate_total_cost(
        input_text,
        output_text,
        pricing.input_text if pricing else None,
        pricing.output_text if pricing else None,
    )
    return {
        **model.to_dict(),
        "categoryName": get_category_name(model.category_id, graph.categories),
        "vendorName": get_vendor_name(model.vendor_id, graph.vendors),
        "pricingUrl": get_vendor_pricing_url(model.vendor_id, graph.vendors),
        "inputCost": costs.input_cost,
        "outputCost": costs.output_cost,
        "samplePrice": costs.total,
    }


async def load_graph() -> ModelGraph:
    dm = current_app.data_manager  # type: ignore[attr-defined]
    if dm is None:
        raise RuntimeError("data manager unavailable")
    return await dm.load_data()


def _unavailable(e: Exception):
    log.error("pricing_data_unavailable", error=str(e))
    return jsonify({"error": "pricing data unavailable"}), 503


@api_bp.route("/models")
async def get_models():
    try:
        query = parse_table_query(request.args)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    try:
        graph = await load_graph()
    except Exception as e:
        return _unavailable(e)

    models = apply_table_query(graph.models, query)
    return jsonify([model_row(m, graph, query.priced_input, query.priced_output) for m in models])


@api_bp.route("/categories")
async def get_categories():
    try:
        graph = await load_graph()
    except Exception as e:
        return _unavailable(e)
    return jsonify([{**c.to_dict(), "modelCount": len(c.models)} for c in graph.categories])


@api_bp.route("/vendors")
async def get_vendors():
    try:
        graph = await load_graph()
    except Exception as e:
        return _unavailable(e)
    return jsonify([{**v.to_dict(), "modelCount": len(v.models)} for v in graph.vendors])


def _optional_price(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("price must be a number")
    price = float(value)
    if not math.isfinite(price):
        raise ValueError("price must be finite")
    return price


@api_bp.route("/estimate", methods=["POST"])
async def estimate():
    """Token counts and costs for a text pair at given or a model's prices."""
    body = await request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400
    input_text = str(body.get("inputText") or "")
    output_text = str(body.get("outputText") or "")
    try:
        multiplier = int(body.get("multiplier") or 1)
    except (TypeError, ValueError, OverflowError):
        return jsonify({"error": "multiplier must be an integer"}), 400
    input_text = with_multiplier(input_text, multiplier)
    output_text = with_multiplier(output_text, multiplier)

    try:
        input_price = _optional_price(body.get("inputPrice"))
        output_price = _optional_price(body.get("outputPrice"))
    except (TypeError, ValueError, OverflowError):
        return jsonify({"error": "prices must be numbers"}), 400
    model_id = body.get("modelId")
    if model_id is not None:
        try:
            model_id = int(model_id)
        except (TypeError, ValueError, OverflowError):
            return jsonify({"error": "modelId must be an integer"}), 400
        try:
            graph = await load_graph()
        except Exception as e:
            return _unavailable(e)
        model = next((m for m in graph.models if m.id == model_id), None)
        if model is None:
            return jsonify({"error": f"model {model_id} not found"}), 404
        if model.pricing is not None:
            input_price = model.pricing.input_text
            output_price = model.pricing.output_text

    costs = calculate_total_cost(input_text, output_text, input_price, output_price)
    return jsonify({
        "inputTokens": estimate_token_count(input_text),
        "outputTokens": estimate_token_count(output_text),
        "inputCost": costs.input_cost,
        "outputCost": costs.output_cost,
        "total": costs.total,
    })


async def _export_rows() -> list[dict[str, Any]]:
    graph = await load_graph()
    models = filter_models(graph.models, _list_arg(request.args, "category"),
                           _list_arg(request.args, "vendor"))
    return prepare_export_data(models, graph.categories, graph.vendors)


@api_bp.route("/export.csv")
async def export_csv():
    try:
        rows = await _export_rows()
    except Exception as e:
        return _unavailable(e)
    return Response(
        to_csv(rows),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=ai_models_pricing.csv"},
    )


@api_bp.route("/export.json")
async def export_json():
    try:
        rows = await _export_rows()
    except Exception as e:
        return _unavailable(e)
    return Response(
        to_json(rows),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=ai_models_pricing.json"},
    )
