"""Canonical model graph repository."""

from datetime import date
from typing import Any
import asyncpg
import structlog
from pricing.models import ModelGraph

log = structlog.get_logger(__name__)

_MODELS_QUERY = """
    SELECT m.id, m.system_name, m.display_name, m.category_id, m.vendor_id, m.host,
           m.capability_tier, m.modality, m.parameters_b, m.context_window, m.token_limit,
           m.precision, m.description, m.release_date, m.is_open_source, m.is_hidden,
           p.id AS pricing_id, p.input_text, p.output_text, p.finetuning_input,
           p.finetuning_output, p.training_cost
    FROM models m
    LEFT JOIN pricing p ON p.model_id = m.id
    ORDER BY m.id
"""


def _model_row_to_dict(row: Any) -> dict[str, Any]:
    release = row["release_date"]
    pricing = None
    if row["input_text"] is not None:
        pricing = {
            "id": row["pricing_id"],
            "modelId": row["id"],
            "inputText": row["input_text"],
            "outputText": row["output_text"],
            "finetuningInput": row["finetuning_input"],
            "finetuningOutput": row["finetuning_output"],
            "trainingCost": row["training_cost"],
        }
    return {
        "id": row["id"],
        "systemName": row["system_name"],
        "displayName": row["display_name"],
        "categoryId": row["category_id"],
        "vendorId": row["vendor_id"],
        "host": row["host"],
        "capabilityTier": row["capability_tier"],
        "modality": row["modality"],
        "parametersB": row["parameters_b"],
        "contextWindow": row["context_window"],
        "tokenLimit": row["token_limit"],
        "precision": row["precision"],
        "description": row["description"],
        "releaseDate": release.isoformat() if isinstance(release, date) else release,
        "isOpenSource": row["is_open_source"],
        "isHidden": row["is_hidden"],
        "pricing": pricing,
    }


class ModelRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def load_payload(self) -> dict[str, list[dict[str, Any]]]:
        """The stored graph as a canonical ``{models, categories, vendors}`` payload."""
        async with self._pool.acquire() as conn:
            categories = await conn.fetch(
                "SELECT id, name, description, use_case, is_hidden FROM categories ORDER BY id"
            )
            vendors = await conn.fetch(
                "SELECT id, name, pricing_url, models_list_url FROM vendors ORDER BY id"
            )
            models = await conn.fetch(_MODELS_QUERY)
        return {
            "models": [_model_row_to_dict(r) for r in models],
            "categories": [
                {
                    "id": r["id"],
                    "name": r["name"],
                    "description": r["description"],
                    "useCase": r["use_case"],
                    "isHidden": r["is_hidden"],
                }
                for r in categories
            ],
            "vendors": [
                {
                    "id": r["id"],
                    "name": r["name"],
                    "pricingUrl": r["pricing_url"],
                    "modelsListUrl": r["models_list_url"],
                }
                for r in vendors
            ],
        }

    async def save_graph(self, graph: ModelGraph) -> int:
        """Replace the stored graph with ``graph``. Returns the number of models written.

        Rows whose id no longer carries the same system name are deleted along
        with their pricing and history. Category and vendor names that moved to
        another id are parked under a placeholder until the upserts run.
        """
        model_ids = [m.id for m in graph.models]
        category_ids = [c.id for c in graph.categories]
        vendor_ids = [v.id for v in graph.vendors]
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                removed = await conn.execute(
                    """
                    DELETE FROM models m
                    WHERE NOT EXISTS (
                        SELECT 1 FROM unnest($1::int[], $2::text[]) AS g(id, system_name)
                        WHERE g.id = m.id AND g.system_name = m.system_name
                    )
                    """,
                    model_ids, [m.system_name for m in graph.models],
                )
                await conn.execute(
                    "DELETE FROM pricing WHERE model_id = ANY($1::int[])",
                    [m.id for m in graph.models if m.pricing is None],
                )
                for table, entities in (("categories", graph.categories), ("vendors", graph.vendors)):
                    await conn.execute(
                        f"""
                        UPDATE {table} t SET name = '#' || t.id::text
                        WHERE NOT EXISTS (
                            SELECT 1 FROM unnest($1::int[], $2::text[]) AS g(id, name)
                            WHERE g.id = t.id AND g.name = t.name
                        )
                        """,
                        [e.id for e in entities], [e.name for e in entities],
                    )
                for c in graph.categories:
                    await conn.execute(
                        """
                        INSERT INTO categories (id, name, description, use_case, is_hidden)
                        VALUES ($1, $2, $3, $4, $5)
                        ON CONFLICT (id) DO UPDATE SET
                            name = EXCLUDED.name, description = EXCLUDED.description,
                            use_case = EXCLUDED.use_case, is_hidden = EXCLUDED.is_hidden
                        """,
                        c.id, c.name, c.description, c.use_case, c.is_hidden,
                    )
                for v in graph.vendors:
                    await conn.execute(
                        """
                        INSERT INTO vendors (id, name, pricing_url, models_list_url)
                        VALUES ($1, $2, $3, $4)
                        ON CONFLICT (id) DO UPDATE SET
                            name = EXCLUDED.name, pricing_url = EXCLUDED.pricing_url,
                            models_list_url = EXCLUDED.models_list_url
                        """,
                        v.id, v.name, v.pricing_url, v.models_list_url,
                    )
                for m in graph.models:
                    await conn.execute(
                        """
                        INSERT INTO models (id, system_name, display_name, category_id, vendor_id,
                            host, capability_tier, modality, parameters_b, context_window,
                            token_limit, precision, description, release_date, is_open_source,
                            is_hidden)
                        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16)
                        ON CONFLICT (id) DO UPDATE SET
                            system_name = EXCLUDED.system_name, display_name = EXCLUDED.display_name,
                            category_id = EXCLUDED.category_id, vendor_id = EXCLUDED.vendor_id,
                            host = EXCLUDED.host, capability_tier = EXCLUDED.capability_tier,
                            modality = EXCLUDED.modality, parameters_b = EXCLUDED.parameters_b,
                            context_window = EXCLUDED.context_window,
                            token_limit = EXCLUDED.token_limit, precision = EXCLUDED.precision,
                            description = EXCLUDED.description,
                            release_date = EXCLUDED.release_date,
                            is_open_source = EXCLUDED.is_open_source,
                            is_hidden = EXCLUDED.is_hidden, updated_at = NOW()
                        """,
                        m.id, m.system_name, m.display_name, m.category_id, m.vendor_id,
                        m.host, m.capability_tier, m.modality, m.parameters_b, m.context_window,
                        m.token_limit, m.precision, m.description,
                        date.fromisoformat(m.release_date) if m.release_date else None,
                        m.is_open_source, m.is_hidden,
                    )
                    if m.pricing is not None:
                        p = m.pricing
                        await conn.execute(
                            """
                            INSERT INTO pricing (model_id, input_text, output_text,
                                finetuning_input, finetuning_output, training_cost)
                            VALUES ($1, $2, $3, $4, $5, $6)
                            ON CONFLICT (model_id) DO UPDATE SET
                                input_text = EXCLUDED.input_text,
                                output_text = EXCLUDED.output_text,
                                finetuning_input = EXCLUDED.finetuning_input,
                                finetuning_output = EXCLUDED.finetuning_output,
                                training_cost = EXCLUDED.training_cost, updated_at = NOW()
                            """,
                            m.id, p.input_text, p.output_text,
                            p.finetuning_input, p.finetuning_output, p.training_cost,
                        )
                await conn.execute("DELETE FROM categories WHERE id <> ALL($1::int[])", category_ids)
                await conn.execute("DELETE FROM vendors WHERE id <> ALL($1::int[])", vendor_ids)
        log.info("graph_saved", models=len(graph.models), vendors=len(graph.vendors),
                 categories=len(graph.categories), models_removed=int(removed.split()[-1]))
        return len(graph.models)

    async def set_hidden(self, system_names: list[str], hidden: bool = True) -> int:
        """Hide or unhide models by system name. Returns the number of rows updated."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "UPDATE models SET is_hidden = $1, updated_at = NOW() WHERE system_name = ANY($2::text[])",
                hidden,
                system_names,
            )
        count = int(result.split()[-1])
        log.info("models_visibility_changed", hidden=hidden, requested=len(system_names), updated=count)
        return count

    async def list_hidden(self) -> list[dict[str, Any]]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, system_name, display_name FROM models WHERE is_hidden = TRUE ORDER BY display_name"
            )
        return [dict(r) for r in rows]
