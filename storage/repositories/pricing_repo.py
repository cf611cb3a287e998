"""Pricing updates with change history, and pricing backups."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
import asyncpg
import structlog
from config.constants import PRICE_FIELDS
from pricing.models import Pricing

log = structlog.get_logger(__name__)

_OPTIONAL_FIELDS = ("finetuning_input", "finetuning_output", "training_cost")


class PricingChange(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def _values(pricing: Pricing) -> dict[str, float | None]:
    values = {name: getattr(pricing, name) for name in PRICE_FIELDS}
    # Zero optional prices are stored as "not offered"
    for name in _OPTIONAL_FIELDS:
        values[name] = values[name] or None
    return values


def _iso(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


class PricingRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_current(self, model_id: int) -> dict[str, Any] | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT model_id, input_text, output_text, finetuning_input,
                       finetuning_output, training_cost, updated_at
                FROM pricing WHERE model_id = $1
                """,
                model_id,
            )
        return dict(row) if row else None

    async def update_pricing(self, model_id: int, pricing: Pricing) -> PricingChange:
        """Store new prices, archiving the previous ones only when something changed."""
        new = _values(pricing)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                current = await conn.fetchrow(
                    """
                    SELECT input_text, output_text, finetuning_input, finetuning_output,
                           training_cost
                    FROM pricing WHERE model_id = $1 FOR UPDATE
                    """,
                    model_id,
                )
                if current is None:
                    await conn.execute(
                        """
                        INSERT INTO pricing (model_id, input_text, output_text,
                            finetuning_input, finetuning_output, training_cost)
                        VALUES ($1, $2, $3, $4, $5, $6)
                        """,
                        model_id, *new.values(),
                    )
                    log.info("pricing_created", model_id=model_id)
                    return PricingChange.CREATED

                if all(current[name] == new[name] for name in PRICE_FIELDS):
                    await conn.execute(
                        "UPDATE pricing SET updated_at = NOW() WHERE model_id = $1", model_id
                    )
                    return PricingChange.UNCHANGED

                await conn.execute(
                    """
                    INSERT INTO pricing_history (model_id, input_text, output_text,
                        finetuning_input, finetuning_output, training_cost)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                    model_id, *(current[name] for name in PRICE_FIELDS),
                )
                await conn.execute(
                    """
                    UPDATE pricing SET input_text = $2, output_text = $3,
                        finetuning_input = $4, finetuning_output = $5, training_cost = $6,
                        updated_at = NOW()
                    WHERE model_id = $1
                    """,
                    model_id, *new.values(),
                )
        log.info(
            "pricing_updated",
            model_id=model_id,
            old_input=current["input_text"],
            new_input=new["input_text"],
            old_output=current["output_text"],
            new_output=new["output_text"],
        )
        return PricingChange.UPDATED

    async def get_history(self, model_id: int, limit: int = 20) -> list[dict[str, Any]]:
        """Past prices for a model, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT input_text, output_text, finetuning_input, finetuning_output,
                       training_cost, effective_until
                FROM pricing_history
                WHERE model_id = $1
                ORDER BY effective_until DESC
                LIMIT $2
                """,
                model_id,
                limit,
            )
        return [dict(r) for r in rows]

    async def backup(self) -> dict[str, Any]:
        """Snapshot current pricing and history into ``pricing_backups``."""
        async with self._pool.acquire() as conn:
            current = await conn.fetch(
                """
                SELECT m.system_name, m.display_name, v.name AS vendor_name, m.vendor_id,
                       p.input_text, p.output_text, p.finetuning_input, p.finetuning_output,
                       p.training_cost, p.updated_at
                FROM pricing p
                JOIN models m ON m.id = p.model_id
                JOIN vendors v ON v.id = m.vendor_id
                ORDER BY m.id
                """
            )
            history = await conn.fetch(
                """
                SELECT m.system_name, m.display_name, v.name AS vendor_name, m.vendor_id,
                       h.input_text, h.output_text, h.finetuning_input, h.finetuning_output,
                       h.training_cost, h.effective_until
                FROM pricing_history h
                JOIN models m ON m.id = h.model_id
                JOIN vendors v ON v.id = m.vendor_id
                ORDER BY h.effective_until
                """
            )
            snapshot = {
                "createdAt": datetime.now(UTC).isoformat(),
                "pricing": [{k: _iso(v) for k, v in dict(r).items()} for r in current],
                "pricingHistory": [{k: _iso(v) for k, v in dict(r).items()} for r in history],
            }
            backup_id = await conn.fetchval(
                "INSERT INTO pricing_backups (snapshot) VALUES ($1) RETURNING id",
                snapshot,
            )
        log.info("pricing_backup_created", backup_id=backup_id,
                 pricing=len(snapshot["pricing"]), history=len(snapshot["pricingHistory"]))
        return {"id": backup_id, **snapshot}
