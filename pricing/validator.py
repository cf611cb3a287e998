"""Pricing sanity checks and graph integrity validation.

Prices are dollars per million tokens. A value that only makes sense per token
(below $0.001) or per thousand tokens (very large) is almost always a unit
conversion slip upstream. These checks flag such values; they never alter them.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
import structlog
from config.constants import (
    PRICE_FIELDS,
    PRICE_SUSPICIOUSLY_HIGH_INPUT,
    PRICE_SUSPICIOUSLY_HIGH_OUTPUT,
    PRICE_SUSPICIOUSLY_LOW,
    PRICING_EXCEPTIONS,
)
from pricing.models import Model, ModelGraph

log = structlog.get_logger(__name__)

HIGH_PRICE_THRESHOLDS = {
    "input_text": PRICE_SUSPICIOUSLY_HIGH_INPUT,
    "output_text": PRICE_SUSPICIOUSLY_HIGH_OUTPUT,
}


class IssueKind(str, Enum):
    NEGATIVE = "negative"
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    MISSING_PRICING = "missing_pricing"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class PricingIssue:
    model_id: int
    model_name: str
    kind: IssueKind
    severity: Severity
    field: str | None = None
    value: float | None = None

    @property
    def message(self) -> str:
        if self.kind is IssueKind.MISSING_PRICING:
            return f"{self.model_name} has no pricing data"
        if self.kind is IssueKind.NEGATIVE:
            return f"{self.model_name} ({self.field}) has negative price {self.value}"
        if self.kind is IssueKind.TOO_LOW:
            return (
                f"{self.model_name} ({self.field}) price of ${self.value} is suspiciously low. "
                "Prices should be per MILLION tokens."
            )
        return (
            f"{self.model_name} ({self.field}) price of ${self.value} is unusually high. "
            "Verify this is the correct price per MILLION tokens."
        )

    def to_dict(self) -> dict:
        return {
            "modelId": self.model_id,
            "modelName": self.model_name,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "field": self.field,
            "value": self.value,
            "message": self.message,
        }


def is_pricing_exception(model: Model) -> bool:
    """Models whose unusual pricing is known to be correct."""
    names = f"{model.system_name} {model.display_name}".lower()
    return any(name in names for name in PRICING_EXCEPTIONS)


def check_model_pricing(model: Model) -> list[PricingIssue]:
    name = model.display_name or model.system_name
    if model.pricing is None:
        return [PricingIssue(model.id, name, IssueKind.MISSING_PRICING, Severity.WARNING)]

    issues = []
    exempt = is_pricing_exception(model)
    for field_name in PRICE_FIELDS:
        value = getattr(model.pricing, field_name)
        if value is None:
            continue
        if value < 0:
            issues.append(PricingIssue(
                model.id, name, IssueKind.NEGATIVE, Severity.ERROR, field_name, value
            ))
            continue
        if exempt:
            continue
        if 0 < value < PRICE_SUSPICIOUSLY_LOW:
            issues.append(PricingIssue(
                model.id, name, IssueKind.TOO_LOW, Severity.ERROR, field_name, value
            ))
        threshold = HIGH_PRICE_THRESHOLDS.get(field_name)
        if threshold is not None and value > threshold:
            issues.append(PricingIssue(
                model.id, name, IssueKind.TOO_HIGH, Severity.ERROR, field_name, value
            ))
    return issues


def audit_pricing(models: list[Model]) -> list[PricingIssue]:
    """Check every model's pricing and log each anomaly."""
    issues = []
    for model in models:
        for issue in check_model_pricing(model):
            log.warning(
                "pricing_anomaly",
                model_id=issue.model_id,
                model=issue.model_name,
                kind=issue.kind.value,
                field=issue.field,
                value=issue.value,
            )
            issues.append(issue)
    return issues


def validate_graph(graph: ModelGraph) -> list[str]:
    """Structural problems in a canonical graph; empty when consistent."""
    errors = []
    category_ids = {c.id for c in graph.categories}
    vendor_ids = {v.id for v in graph.vendors}

    for model_id, count in Counter(m.id for m in graph.models).items():
        if count > 1:
            errors.append(f"Model id {model_id} is used by {count} models")

    for model in graph.models:
        if model.category_id not in category_ids:
            errors.append(f"Model {model.id} references missing category {model.category_id}")
        if model.vendor_id not in vendor_ids:
            errors.append(f"Model {model.id} references missing vendor {model.vendor_id}")
        if model.pricing is not None and model.pricing.model_id not in (None, model.id):
            errors.append(
                f"Model {model.id} has mismatched modelId ({model.pricing.model_id}) in pricing"
            )
    return errors
