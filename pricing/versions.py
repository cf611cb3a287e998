"""Collapse historical snapshots of a model down to the current generation.

Within each vendor, models are grouped into families by a normalized base
display name. Each family keeps at most two members: its newest preview-like
release and its newest stable release.
"""

import re
from datetime import date
from functools import cmp_to_key
from pricing.models import Model

_TRAILING_VERSION_RE = re.compile(r"\s*(v?\d+\.?\d*\.?\d*)\s*$", re.IGNORECASE)
_TRAILING_SUFFIX_RE = re.compile(r"\s*-\s*(preview|beta|alpha|turbo|instruct)\s*$", re.IGNORECASE)
_TRAILING_PAREN_RE = re.compile(r"\s*\(.*\)\s*$")
_TRAILING_FREE_RE = re.compile(r"\s*:\s*free\s*$", re.IGNORECASE)
_PREVIEW_RE = re.compile(
    r"\b(preview|beta|alpha|experimental|dev|snapshot|nightly|unstable|test)\b",
    re.IGNORECASE,
)
_VERSION_RE = re.compile(r"(\d+\.?\d*\.?\d*)")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def extract_base_model_name(display_name: str) -> str:
    name = display_name.lower()
    name = _TRAILING_VERSION_RE.sub("", name, count=1)
    name = _TRAILING_SUFFIX_RE.sub("", name, count=1)
    name = _TRAILING_PAREN_RE.sub("", name, count=1)
    name = _TRAILING_FREE_RE.sub("", name, count=1)
    return name.strip()


def is_preview_model(display_name: str, system_name: str | None = None) -> bool:
    return bool(_PREVIEW_RE.search(f"{display_name} {system_name or ''}"))


def extract_version_number(name: str) -> float | None:
    """First numeric version fragment in ``name``, e.g. ``1.5`` from "Gemini 1.5 Pro"."""
    match = _VERSION_RE.search(name)
    if not match:
        return None
    # "1.5.2" reads as 1.5
    return float(_LEADING_NUMBER_RE.match(match.group(1)).group(0))


def _collation_key(text: str) -> tuple[str, str]:
    return text.casefold(), text.swapcase()


def compare_versions(name_a: str, name_b: str) -> int:
    """Negative when ``name_a`` is the newer release."""
    version_a = extract_version_number(name_a)
    version_b = extract_version_number(name_b)
    if version_a is not None and version_b is not None:
        return (version_b > version_a) - (version_b < version_a)

    key_a, key_b = _collation_key(name_a), _collation_key(name_b)
    return (key_b > key_a) - (key_b < key_a)


def _release_ordinal(release_date: str) -> int:
    try:
        return date.fromisoformat(release_date[:10]).toordinal()
    except ValueError:
        return 0


def _compare_family_members(a: Model, b: Model) -> int:
    a_preview = is_preview_model(a.display_name, a.system_name)
    b_preview = is_preview_model(b.display_name, b.system_name)
    if a_preview != b_preview:
        return -1 if a_preview else 1

    if a.release_date and b.release_date:
        return _release_ordinal(b.release_date) - _release_ordinal(a.release_date)

    return compare_versions(a.display_name, b.display_name)


def filter_to_latest_versions(models: list[Model]) -> list[Model]:
    by_vendor: dict[int, list[Model]] = {}
    for model in models:
        by_vendor.setdefault(model.vendor_id, []).append(model)

    kept: list[Model] = []
    for vendor_models in by_vendor.values():
        families: dict[str, list[Model]] = {}
        for model in vendor_models:
            families.setdefault(extract_base_model_name(model.display_name), []).append(model)

        for members in families.values():
            ordered = sorted(members, key=cmp_to_key(_compare_family_members))
            preview = next(
                (m for m in ordered if is_preview_model(m.display_name, m.system_name)), None
            )
            stable = next(
                (m for m in ordered if not is_preview_model(m.display_name, m.system_name)), None
            )
            if preview is not None:
                kept.append(preview)
            if stable is not None and stable is not preview:
                kept.append(stable)
    return kept
