"""Pure filter and sort functions over the canonical model list."""

import math
from collections.abc import Callable, Sequence
from typing import Any
from config.constants import (
    CONTEXT_BUCKET_BOUNDS,
    SELF_MODERATED_MARKER,
    ContextBucket,
    SortDirection,
    SortKey,
)
from pricing.cost import sample_price
from pricing.models import Model

UNPRICED = math.inf


def collation_key(text: str) -> tuple[str, str]:
    """Case-insensitive ordering with lower case before upper case on ties."""
    return text.casefold(), text.swapcase()


def is_self_moderated(model: Model) -> bool:
    return (
        SELF_MODERATED_MARKER in model.system_name.lower()
        or SELF_MODERATED_MARKER in model.display_name.lower()
    )


def category_name(model: Model) -> str:
    return model.category.name if model.category is not None else ""


def vendor_name(model: Model) -> str:
    return model.vendor.name if model.vendor is not None else ""


def filter_models(
    models: Sequence[Model],
    category_names: Sequence[str] = (),
    vendor_names: Sequence[str] = (),
) -> list[Model]:
    """Keep models in any of ``category_names`` and any of ``vendor_names``.

    An empty selection does not filter. Self-moderated variants are always dropped.
    """
    categories = set(category_names)
    vendors = set(vendor_names)
    return [
        m for m in models
        if not is_self_moderated(m)
        and (not categories or (m.category is not None and m.category.name in categories))
        and (not vendors or (m.vendor is not None and m.vendor.name in vendors))
    ]


def filter_by_context_window(models: Sequence[Model], bucket: ContextBucket | str) -> list[Model]:
    bucket = ContextBucket(bucket)
    if bucket is ContextBucket.ALL:
        return list(models)
    lower, upper = CONTEXT_BUCKET_BOUNDS[bucket]
    return [m for m in models if lower <= (m.context_window or 0) < upper]


def _sort_value(
    key: SortKey,
    input_text: str | None,
    output_text: str | None,
) -> Callable[[Model], Any]:
    if key is SortKey.DISPLAY_NAME:
        return lambda m: collation_key(m.display_name)
    if key is SortKey.VENDOR_NAME:
        return lambda m: collation_key(vendor_name(m))
    if key is SortKey.CATEGORY_NAME:
        return lambda m: collation_key(category_name(m))
    if key is SortKey.PARAMETERS:
        return lambda m: m.parameters_b or 0
    if key is SortKey.CONTEXT_WINDOW:
        return lambda m: m.context_window or 0
    if key is SortKey.TOKEN_LIMIT:
        return lambda m: m.token_limit or 0
    if key is SortKey.INPUT_PRICE:
        return lambda m: m.pricing.input_text if m.pricing is not None else UNPRICED
    if key is SortKey.OUTPUT_PRICE:
        return lambda m: m.pricing.output_text if m.pricing is not None else UNPRICED

    def _sample(model: Model) -> float:
        if input_text is None or output_text is None:
            return UNPRICED
        price = sample_price(model, input_text, output_text)
        return UNPRICED if price is None else price

    return _sample


def sort_models(
    models: Sequence[Model],
    key: SortKey | str,
    direction: SortDirection | str = SortDirection.ASC,
    input_text: str | None = None,
    output_text: str | None = None,
) -> list[Model]:
    """Stable sort by ``key``; equal values keep their input order in both directions.

    Raises:
        ValueError: for an unknown sort key or direction.
    """
    key = SortKey(key)
    direction = SortDirection(direction)
    return sorted(
        models,
        key=_sort_value(key, input_text, output_text),
        reverse=direction is SortDirection.DESC,
    )
