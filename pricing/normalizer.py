"""Turn upstream model listings into the canonical pricing graph.

Payload shape detection happens once, in ``resolve_payload``; everything after
it works on a ``ResolvedPayload``. Canonical payloads are only filtered and
re-linked. Raw listings are classified, interned into vendor and category
tables, deduplicated and audited.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import structlog
from config.constants import ALLOWED_VENDORS, INACTIVE_CATEGORY_IDS, INACTIVE_CATEGORY_NAMES
from pricing.classifier import classify
from pricing.extract import (
    DESCRIPTION_KEYS,
    extract_context_window,
    extract_flag,
    extract_modality,
    extract_parameters,
    extract_pricing,
    extract_release_date,
    extract_text,
    extract_token_limit,
    get_or,
)
from pricing.models import Category, Model, ModelGraph, Vendor, link_relationships
from pricing.validator import audit_pricing, validate_graph
from pricing.versions import filter_to_latest_versions

log = structlog.get_logger(__name__)

# Locations probed for a raw model array, in order
NESTED_MODEL_PATHS: tuple[tuple[str, ...], ...] = (
    ("data", "models"),
    ("response", "models"),
    ("results", "models"),
    ("items",),
    ("list",),
)


class DataFormatError(ValueError):
    """No recognizable model array in the payload."""


class PayloadKind(str, Enum):
    BARE_ARRAY = "bare_array"
    WRAPPED = "wrapped"
    CANONICAL = "canonical"


@dataclass
class ResolvedPayload:
    kind: PayloadKind
    models: list[Any]
    categories: list[Any] = field(default_factory=list)
    vendors: list[Any] = field(default_factory=list)
    source: str = ""


def _dig(payload: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = payload
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def resolve_payload(raw: Any) -> ResolvedPayload:
    """Locate the model array in ``raw`` and tag its shape."""
    if isinstance(raw, list):
        return ResolvedPayload(PayloadKind.BARE_ARRAY, raw, source="array")

    if not isinstance(raw, Mapping):
        raise DataFormatError(f"Unsupported payload type: {type(raw).__name__}")

    models = raw.get("models")
    if (
        isinstance(models, list)
        and isinstance(raw.get("categories"), list)
        and isinstance(raw.get("vendors"), list)
    ):
        return ResolvedPayload(
            PayloadKind.CANONICAL, models, raw["categories"], raw["vendors"], source="canonical"
        )

    if isinstance(models, list):
        return ResolvedPayload(PayloadKind.WRAPPED, models, source="models")

    for path in NESTED_MODEL_PATHS:
        candidate = _dig(raw, path)
        if isinstance(candidate, list):
            return ResolvedPayload(PayloadKind.WRAPPED, candidate, source=".".join(path))

    raise DataFormatError(
        f"No model array found in payload with keys: {sorted(str(k) for k in raw.keys())}"
    )


def normalize(raw: Any, allowed_vendors: Iterable[str] = ALLOWED_VENDORS) -> ModelGraph:
    """Build a canonical ``ModelGraph`` from any supported payload shape.

    Raises:
        DataFormatError: if no model array can be located.
    """
    resolved = resolve_payload(raw)
    log.debug("payload_resolved", kind=resolved.kind.value, source=resolved.source,
              records=len(resolved.models))

    if resolved.kind is PayloadKind.CANONICAL:
        return normalize_canonical(resolved)
    return normalize_listings(resolved.models, allowed_vendors)


def _category_inactive(category: Category) -> bool:
    return (
        category.id in INACTIVE_CATEGORY_IDS
        or category.name.lower() in INACTIVE_CATEGORY_NAMES
        or category.is_hidden
    )


def _parse_entities(records: list[Any], cls: type, kind: str) -> list[Any]:
    parsed = []
    for record in records:
        try:
            parsed.append(cls.from_dict(record))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            log.warning("canonical_record_skipped", kind=kind, error=str(e))
    return parsed


def normalize_canonical(resolved: ResolvedPayload) -> ModelGraph:
    """Filter and re-link an already canonical payload without reclassifying."""
    models: list[Model] = _parse_entities(resolved.models, Model, "model")
    categories: list[Category] = _parse_entities(resolved.categories, Category, "category")
    vendors: list[Vendor] = _parse_entities(resolved.vendors, Vendor, "vendor")

    visible_categories = [c for c in categories if not _category_inactive(c)]
    category_ids = {c.id for c in visible_categories}
    vendor_ids = {v.id for v in vendors}

    visible_models = []
    for model in models:
        if model.is_hidden:
            continue
        if model.category_id not in category_ids or model.vendor_id not in vendor_ids:
            log.warning("model_reference_dropped", model_id=model.id,
                        system_name=model.system_name, category_id=model.category_id,
                        vendor_id=model.vendor_id)
            continue
        visible_models.append(model)

    link_relationships(visible_models, visible_categories, vendors)
    graph = ModelGraph(
        models=visible_models,
        categories=visible_categories,
        vendors=vendors,
        pricing_issues=audit_pricing(visible_models),
    )
    for error in validate_graph(graph):
        log.warning("graph_integrity_issue", error=error)
    return graph


def _vendor_for(key: str, name: str) -> Vendor:
    return Vendor(
        id=0,
        name=name,
        pricing_url=f"https://{key}.com/pricing",
        models_list_url=f"https://{key}.com/models",
    )


def build_model(record: Mapping[str, Any], index: int, category: Category, vendor: Vendor,
                capability_tier: str) -> Model:
    model_id = index + 1
    return Model(
        id=model_id,
        system_name=str(get_or(extract_text(record, ("id",)), f"unknown-{index}")),
        display_name=str(get_or(
            extract_text(record, ("name", "display_name", "id")), f"Model {index}"
        )),
        category_id=category.id,
        vendor_id=vendor.id,
        host=vendor.name,
        capability_tier=capability_tier,
        modality=get_or(extract_modality(record)),
        parameters_b=get_or(extract_parameters(record)),
        context_window=get_or(extract_context_window(record)),
        token_limit=get_or(extract_token_limit(record)),
        precision=get_or(extract_text(record, ("precision",))),
        description=get_or(extract_text(record, DESCRIPTION_KEYS)),
        release_date=get_or(extract_release_date(record)),
        is_open_source=extract_flag(record, ("isOpenSource", "open_source")),
        is_hidden=extract_flag(record, ("isHidden", "hidden")),
        pricing=get_or(extract_pricing(record, model_id)),
    )


def normalize_listings(records: list[Any], allowed_vendors: Iterable[str] = ALLOWED_VENDORS) -> ModelGraph:
    """Classify, intern and deduplicate raw upstream model records."""
    allowed = {v.lower() for v in allowed_vendors}
    classified = []
    for position, record in enumerate(records):
        try:
            result = classify(record)
        except Exception as e:
            log.warning("model_record_skipped", position=position, error=str(e))
            continue
        if result.vendor_key in allowed:
            classified.append((record, result))

    vendors: dict[str, Vendor] = {}
    categories: dict[str, Category] = {}
    models: list[Model] = []

    for index, (record, result) in enumerate(classified):
        try:
            if not isinstance(record, Mapping):
                raise TypeError(f"model record is {type(record).__name__}, not an object")

            vendor = vendors.get(result.vendor_key)
            if vendor is None:
                vendor = _vendor_for(result.vendor_key, result.vendor_name)
                vendor.id = len(vendors) + 1
                vendors[result.vendor_key] = vendor

            category_key = "-".join(result.category_name.lower().split())
            category = categories.get(category_key)
            if category is None:
                category = Category(
                    id=len(categories) + 1,
                    name=result.category_name,
                    description=f"{result.category_name} models and applications",
                )
                categories[category_key] = category

            models.append(build_model(record, index, category, vendor, result.capability_tier.value))
        except Exception as e:
            log.warning("model_record_skipped", index=index, error=str(e))

    latest = filter_to_latest_versions(models)
    vendor_list = list(vendors.values())
    category_list = list(categories.values())
    link_relationships(latest, category_list, vendor_list)

    log.info("listings_normalized", records=len(records), allowed=len(classified),
             models=len(latest), vendors=len(vendor_list), categories=len(category_list))
    return ModelGraph(
        models=latest,
        categories=category_list,
        vendors=vendor_list,
        pricing_issues=audit_pricing(latest),
    )
