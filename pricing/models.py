"""Canonical pricing graph: models, their pricing, categories and vendors.

Attributes are snake_case; ``to_dict``/``from_dict`` speak the persisted
camelCase schema. Every price is dollars per one million tokens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _opt_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _opt_int(value: Any) -> int | None:
    number = _opt_float(value)
    return int(number) if number is not None else None


@dataclass
class Pricing:
    """Per-million-token prices owned by a single model."""
    input_text: float
    output_text: float
    finetuning_input: float | None = None
    finetuning_output: float | None = None
    training_cost: float | None = None
    id: int | None = None
    model_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "modelId": self.model_id,
            "inputText": self.input_text,
            "outputText": self.output_text,
            "finetuningInput": self.finetuning_input,
            "finetuningOutput": self.finetuning_output,
            "trainingCost": self.training_cost,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pricing:
        return cls(
            input_text=_opt_float(data.get("inputText")) or 0.0,
            output_text=_opt_float(data.get("outputText")) or 0.0,
            finetuning_input=_opt_float(data.get("finetuningInput")),
            finetuning_output=_opt_float(data.get("finetuningOutput")),
            training_cost=_opt_float(data.get("trainingCost")),
            id=_opt_int(data.get("id")),
            model_id=_opt_int(data.get("modelId")),
        )


@dataclass
class Category:
    id: int
    name: str
    description: str | None = None
    use_case: str | None = None
    is_hidden: bool = False
    models: list[Model] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "useCase": self.use_case,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            description=data.get("description"),
            use_case=data.get("useCase"),
            is_hidden=bool(data.get("isHidden", False)),
        )


@dataclass
class Vendor:
    id: int
    name: str
    pricing_url: str = ""
    models_list_url: str = ""
    models: list[Model] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "pricingUrl": self.pricing_url,
            "modelsListUrl": self.models_list_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vendor:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            pricing_url=str(data.get("pricingUrl") or ""),
            models_list_url=str(data.get("modelsListUrl") or ""),
        )


@dataclass
class Model:
    id: int
    system_name: str
    display_name: str
    category_id: int
    vendor_id: int
    host: str = ""
    capability_tier: str | None = None
    modality: str | None = None
    parameters_b: float | None = None
    context_window: int | None = None
    token_limit: int | None = None
    precision: str | None = None
    description: str | None = None
    release_date: str | None = None
    is_open_source: bool = False
    is_hidden: bool = False
    pricing: Pricing | None = None
    # Derived on every load, never persisted
    category: Category | None = field(default=None, repr=False, compare=False)
    vendor: Vendor | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "systemName": self.system_name,
            "displayName": self.display_name,
            "categoryId": self.category_id,
            "vendorId": self.vendor_id,
            "host": self.host,
            "capabilityTier": self.capability_tier,
            "modality": self.modality,
            "parametersB": self.parameters_b,
            "contextWindow": self.context_window,
            "tokenLimit": self.token_limit,
            "precision": self.precision,
            "description": self.description,
            "releaseDate": self.release_date,
            "isOpenSource": self.is_open_source,
            "isHidden": self.is_hidden,
            "pricing": self.pricing.to_dict() if self.pricing else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Model:
        pricing = data.get("pricing")
        return cls(
            id=int(data["id"]),
            system_name=str(data.get("systemName") or ""),
            display_name=str(data.get("displayName") or data.get("systemName") or ""),
            category_id=int(data["categoryId"]),
            vendor_id=int(data["vendorId"]),
            host=str(data.get("host") or ""),
            capability_tier=data.get("capabilityTier"),
            modality=data.get("modality"),
            parameters_b=_opt_float(data.get("parametersB")),
            context_window=_opt_int(data.get("contextWindow")),
            token_limit=_opt_int(data.get("tokenLimit")),
            precision=data.get("precision"),
            description=data.get("description"),
            release_date=data.get("releaseDate"),
            is_open_source=bool(data.get("isOpenSource", False)),
            is_hidden=bool(data.get("isHidden", False)),
            pricing=Pricing.from_dict(pricing) if isinstance(pricing, dict) else None,
        )


@dataclass
class ModelGraph:
    """The full canonical graph produced by one load."""
    models: list[Model] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    vendors: list[Vendor] = field(default_factory=list)
    pricing_issues: list[Any] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "models": [m.to_dict() for m in self.models],
            "categories": [c.to_dict() for c in self.categories],
            "vendors": [v.to_dict() for v in self.vendors],
        }


def link_relationships(
    models: list[Model],
    categories: list[Category],
    vendors: list[Vendor],
) -> None:
    """Recompute ``model.category``/``model.vendor`` and the member lists."""
    categories_by_id = {c.id: c for c in categories}
    vendors_by_id = {v.id: v for v in vendors}
    for model in models:
        model.category = categories_by_id.get(model.category_id)
        model.vendor = vendors_by_id.get(model.vendor_id)

    for category in categories:
        category.models = [m for m in models if m.category_id == category.id]
    for vendor in vendors:
        vendor.models = [m for m in models if m.vendor_id == vendor.id]


def get_category_name(category_id: int, categories: list[Category]) -> str:
    for category in categories:
        if category.id == category_id:
            return category.name
    return "Unknown"


def get_vendor_name(vendor_id: int, vendors: list[Vendor]) -> str:
    for vendor in vendors:
        if vendor.id == vendor_id:
            return vendor.name
    return "Unknown"


def get_vendor_pricing_url(vendor_id: int, vendors: list[Vendor]) -> str:
    for vendor in vendors:
        if vendor.id == vendor_id:
            return vendor.pricing_url
    return "#"
