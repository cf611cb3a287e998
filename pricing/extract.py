"""Defensive per-field extraction from upstream model records.

Upstream listings name the same attribute several ways (``context_length``,
``contextWindow``, ...). Each extractor walks its aliases in a fixed priority
order and returns ``Present(value)`` or ``Absent`` instead of raising.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar
from config.constants import UPSTREAM_PRICE_MULTIPLIER
from pricing.models import Pricing

T = TypeVar("T")

_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")

# Alias chains, highest priority first
INPUT_PRICE_KEYS = ("prompt", "input", "inputText")
OUTPUT_PRICE_KEYS = ("completion", "output", "outputText")
FINETUNING_INPUT_KEYS = ("finetuningInput", "fine_tuning_input")
FINETUNING_OUTPUT_KEYS = ("finetuningOutput", "fine_tuning_output")
TRAINING_COST_KEYS = ("trainingCost", "training_cost")
PARAMETER_KEYS = ("parameters", "parametersB", "params")
CONTEXT_WINDOW_KEYS = ("context_length", "contextWindow", "max_context", "context_size")
TOKEN_LIMIT_KEYS = ("max_tokens", "tokenLimit", "output_limit")
DESCRIPTION_KEYS = ("description", "desc")


class _AbsentType:
    """Marker for a field the record does not provide."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Absent"


Absent = _AbsentType()


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


Extracted = Present[T] | _AbsentType


def get_or(extracted: "Extracted[T]", default: Any = None) -> Any:
    """Unwrap a ``Present`` value, or return ``default`` for ``Absent``."""
    if isinstance(extracted, Present):
        return extracted.value
    return default


def _is_set(value: Any) -> bool:
    """Upstream payloads use empty strings, zero and null interchangeably for 'missing'."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


def first_present(record: Any, keys: tuple[str, ...]) -> "Extracted[Any]":
    """The first alias in ``keys`` that carries a value."""
    if not isinstance(record, Mapping):
        return Absent
    for key in keys:
        value = record.get(key)
        if _is_set(value):
            return Present(value)
    return Absent


def parse_float(raw: Any) -> "Extracted[float]":
    """Leading-number parse: ``"70B"`` gives 70.0, ``"abc"`` gives Absent."""
    if raw is None or isinstance(raw, bool):
        return Absent
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return Absent
        return Present(value) if math.isfinite(value) else Absent
    if not isinstance(raw, str):
        return Absent
    match = _FLOAT_PREFIX_RE.match(raw)
    if not match:
        return Absent
    value = float(match.group(1))
    return Present(value) if math.isfinite(value) else Absent


def parse_int(raw: Any) -> "Extracted[int]":
    if raw is None or isinstance(raw, bool):
        return Absent
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return Absent
        return Present(int(raw))
    if not isinstance(raw, str):
        return Absent
    match = _INT_PREFIX_RE.match(raw)
    if not match:
        return Absent
    try:
        return Present(int(match.group(1)))
    except ValueError:
        # Past the interpreter's int digit limit
        return Absent


def extract_price(pricing: Mapping[str, Any], keys: tuple[str, ...]) -> float:
    """Per-token upstream price converted to dollars per million tokens; 0 when unusable."""
    value = get_or(parse_float(get_or(first_present(pricing, keys))), 0.0)
    return value * UPSTREAM_PRICE_MULTIPLIER


def extract_pricing(record: Any, model_id: int | None = None) -> "Extracted[Pricing]":
    if not isinstance(record, Mapping):
        return Absent
    pricing = record.get("pricing")
    if not isinstance(pricing, Mapping) or not pricing:
        return Absent
    return Present(Pricing(
        id=model_id,
        model_id=model_id,
        input_text=extract_price(pricing, INPUT_PRICE_KEYS),
        output_text=extract_price(pricing, OUTPUT_PRICE_KEYS),
        finetuning_input=extract_price(pricing, FINETUNING_INPUT_KEYS),
        finetuning_output=extract_price(pricing, FINETUNING_OUTPUT_KEYS),
        training_cost=extract_price(pricing, TRAINING_COST_KEYS),
    ))


def _positive(extracted: "Extracted[Any]") -> "Extracted[Any]":
    if isinstance(extracted, Present) and extracted.value:
        return extracted
    return Absent


def extract_parameters(record: Any) -> "Extracted[float]":
    """Parameter count in billions."""
    raw = first_present(record, PARAMETER_KEYS)
    if not isinstance(raw, Present):
        return Absent
    return _positive(parse_float(raw.value))


def extract_context_window(record: Any) -> "Extracted[int]":
    raw = first_present(record, CONTEXT_WINDOW_KEYS)
    if not isinstance(raw, Present):
        return Absent
    return _positive(parse_int(raw.value))


def extract_token_limit(record: Any) -> "Extracted[int]":
    if not isinstance(record, Mapping):
        return Absent
    raw = first_present(record.get("top_provider"), ("max_completion_tokens",))
    if not isinstance(raw, Present):
        raw = first_present(record, TOKEN_LIMIT_KEYS)
    if not isinstance(raw, Present):
        return Absent
    return _positive(parse_int(raw.value))


def _to_iso_date(raw: Any) -> "Extracted[str]":
    try:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            # Unix seconds
            dt = datetime.fromtimestamp(raw, tz=timezone.utc)
        elif isinstance(raw, datetime):
            dt = raw
        elif isinstance(raw, str):
            dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        else:
            return Absent
    except (ValueError, OverflowError, OSError):
        return Absent
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return Present(dt.date().isoformat())


def extract_release_date(record: Any) -> "Extracted[str]":
    """Release date as ``YYYY-MM-DD``; ``created`` wins over ``releaseDate``."""
    raw = first_present(record, ("created",))
    if not isinstance(raw, Present):
        raw = first_present(record, ("releaseDate",))
    if not isinstance(raw, Present):
        return Absent
    return _to_iso_date(raw.value)


def extract_modality(record: Any) -> "Extracted[str]":
    if not isinstance(record, Mapping):
        return Absent
    raw = first_present(record.get("architecture"), ("modality",))
    if not isinstance(raw, Present):
        raw = first_present(record, ("modality",))
    if isinstance(raw, Present):
        return Present(str(raw.value))
    return Absent


def extract_text(record: Any, keys: tuple[str, ...]) -> "Extracted[str]":
    raw = first_present(record, keys)
    if isinstance(raw, Present):
        return Present(str(raw.value))
    return Absent


def extract_flag(record: Any, keys: tuple[str, ...]) -> bool:
    return isinstance(first_present(record, keys), Present)
