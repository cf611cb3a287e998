"""Heuristic vendor, category and capability-tier classification.

Every classifier is total: any record, including one with no fields or with
non-string values, yields a vendor, a category name and a tier.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from config.constants import (
    CATEGORY_RULES,
    DEFAULT_CATEGORY,
    EXPERIMENTAL_KEYWORDS,
    FALLBACK_PRODUCTION_CONTEXT,
    FALLBACK_PRODUCTION_PARAMS,
    FALLBACK_STANDARD_CONTEXT,
    FALLBACK_STANDARD_PARAMS,
    FRONTIER_MIN_CONTEXT,
    FRONTIER_MIN_PARAMS,
    FRONTIER_MODEL_FRAGMENTS,
    KNOWN_VENDOR_KEYWORDS,
    PRODUCTION_MIN_CONTEXT,
    PRODUCTION_MIN_PARAMS,
    PRODUCTION_MODEL_FRAGMENTS,
    SPECIALIZED_KEYWORDS,
    UNKNOWN_VENDOR,
    CapabilityTier,
)
from pricing.extract import (
    CONTEXT_WINDOW_KEYS,
    PARAMETER_KEYS,
    first_present,
    get_or,
    parse_float,
    parse_int,
)

VENDOR_SEPARATORS = ("/", ":", "-")


@dataclass(frozen=True)
class Classification:
    vendor_key: str
    vendor_name: str
    category_name: str
    capability_tier: CapabilityTier


@dataclass(frozen=True)
class TierSignals:
    """Lower-cased text blob plus the numeric signals the tier rules look at."""
    text: str
    parameter_count: float = 0.0
    context_window: int = 0


def _field(record: Any, key: str) -> str:
    if not isinstance(record, Mapping):
        return ""
    value = record.get(key)
    if value is None or value == "" or not isinstance(value, (str, int, float)):
        return ""
    try:
        return str(value)
    except ValueError:
        return ""


def _combined_text(record: Any) -> str:
    return " ".join(
        _field(record, key) for key in ("name", "description", "id")
    ).lower()


def extract_vendor_info(record: Any) -> tuple[str, str]:
    """Return ``(vendor_key, vendor_display_name)`` for a raw record."""
    model_id = _field(record, "id")
    vendor = ""
    for sep in VENDOR_SEPARATORS:
        if sep in model_id:
            vendor = model_id.split(sep, 1)[0]
            break
    else:
        lower_name = _field(record, "name").lower()
        vendor = next((v for v in KNOWN_VENDOR_KEYWORDS if v in lower_name), "")

    if not vendor:
        vendor = UNKNOWN_VENDOR
    return vendor.lower(), vendor[0].upper() + vendor[1:]


def classify_category(record: Any) -> str:
    text = _combined_text(record)
    for name, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return name
    return DEFAULT_CATEGORY


def tier_signals(record: Any) -> TierSignals:
    params = get_or(parse_float(get_or(first_present(record, PARAMETER_KEYS))), 0.0)
    context = get_or(parse_int(get_or(first_present(record, CONTEXT_WINDOW_KEYS))), 0)
    return TierSignals(
        text=_combined_text(record),
        parameter_count=params or 0.0,
        context_window=context or 0,
    )


def _mentions(fragments: tuple[str, ...]) -> Callable[[TierSignals], bool]:
    return lambda s: any(fragment in s.text for fragment in fragments)


def _is_frontier(s: TierSignals) -> bool:
    return (
        _mentions(FRONTIER_MODEL_FRAGMENTS)(s)
        or s.parameter_count >= FRONTIER_MIN_PARAMS
        or s.context_window >= FRONTIER_MIN_CONTEXT
    )


def _is_production(s: TierSignals) -> bool:
    return (
        _mentions(PRODUCTION_MODEL_FRAGMENTS)(s)
        or PRODUCTION_MIN_PARAMS <= s.parameter_count < FRONTIER_MIN_PARAMS
        or PRODUCTION_MIN_CONTEXT <= s.context_window < FRONTIER_MIN_CONTEXT
    )


# Evaluated in order, first match wins
TIER_RULES: list[tuple[Callable[[TierSignals], bool], CapabilityTier]] = [
    (_is_frontier, CapabilityTier.FRONTIER),
    (_mentions(EXPERIMENTAL_KEYWORDS), CapabilityTier.EXPERIMENTAL),
    (_mentions(SPECIALIZED_KEYWORDS), CapabilityTier.SPECIALIZED),
    (_is_production, CapabilityTier.PRODUCTION),
    (
        lambda s: s.parameter_count >= FALLBACK_PRODUCTION_PARAMS
        or s.context_window >= FALLBACK_PRODUCTION_CONTEXT,
        CapabilityTier.PRODUCTION,
    ),
    (
        lambda s: s.parameter_count >= FALLBACK_STANDARD_PARAMS
        or s.context_window >= FALLBACK_STANDARD_CONTEXT,
        CapabilityTier.STANDARD,
    ),
    (lambda s: s.parameter_count > 0 or s.context_window > 0, CapabilityTier.LIGHTWEIGHT),
]


def classify_tier(record: Any) -> CapabilityTier:
    signals = tier_signals(record)
    for predicate, tier in TIER_RULES:
        if predicate(signals):
            return tier
    return CapabilityTier.STANDARD


def classify(record: Any) -> Classification:
    vendor_key, vendor_name = extract_vendor_info(record)
    return Classification(
        vendor_key=vendor_key,
        vendor_name=vendor_name,
        category_name=classify_category(record),
        capability_tier=classify_tier(record),
    )
