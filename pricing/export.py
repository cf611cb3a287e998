"""Flat export rows for the pricing table, as CSV text or JSON bytes."""

import csv
import io
from typing import Any
import orjson
from config.constants import EXPORT_FIELDS
from pricing.models import Category, Model, Vendor


def prepare_export_data(
    models: list[Model],
    categories: list[Category],
    vendors: list[Vendor],
) -> list[dict[str, Any]]:
    """One row per model, keyed and ordered by ``EXPORT_FIELDS``."""
    category_names = {c.id: c.name for c in categories}
    vendor_names = {v.id: v.name for v in vendors}
    rows = []
    for model in models:
        pricing = model.pricing
        rows.append({
            "systemName": model.system_name,
            "displayName": model.display_name,
            "categoryName": category_names.get(model.category_id, ""),
            "parametersB": model.parameters_b or 0,
            "inputText": (pricing.input_text if pricing else 0) or 0,
            "outputText": (pricing.output_text if pricing else 0) or 0,
            "vendorName": vendor_names.get(model.vendor_id, ""),
            "contextWindow": model.context_window or 0,
            "tokenLimit": model.token_limit or 0,
            "precision": model.precision or "",
            "isOpenSource": bool(model.is_open_source),
            "isHidden": bool(model.is_hidden),
        })
    return rows


def to_csv(rows: list[dict[str, Any]]) -> str:
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def to_json(rows: list[dict[str, Any]]) -> bytes:
    return orjson.dumps(rows, option=orjson.OPT_INDENT_2)
