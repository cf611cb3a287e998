"""Quart app factory and web entry point."""

import asyncio
import structlog
from quart import Quart
from config.logging_config import setup_logging
from config.settings import settings
from data.manager import PricingDataManager
from storage.database import Database
from storage.json_store import JsonGraphStore
from storage.repositories.model_repo import ModelRepository

log = structlog.get_logger(__name__)


def create_app(data_manager=None) -> Quart:
    """Create and configure the Quart web application."""
    app = Quart(__name__, template_folder="templates")
    app.secret_key = settings.web_secret_key

    # Store references for routes
    app.data_manager = data_manager  # type: ignore[attr-defined]

    from web.routes.pricing import pricing_bp
    from web.routes.api import api_bp

    app.register_blueprint(pricing_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    @app.route("/health")
    async def health():
        dm = app.data_manager  # type: ignore[attr-defined]
        if dm is None:
            return {"status": "degraded", "data_manager": False}, 503
        return {"status": "ok", **await dm.health_check()}, 200

    return app


async def start_web(data_manager: PricingDataManager) -> None:
    """Serve the web app until cancelled."""
    app = create_app(data_manager=data_manager)
    log.info("starting_web", host=settings.web_host, port=settings.web_port)
    await app.run_task(host=settings.web_host, port=settings.web_port)


async def run() -> None:
    database = None
    model_repo = None
    if settings.use_database:
        database = Database()
        await database.connect()
        await database.run_migrations()
        model_repo = ModelRepository(database.pool)

    data_manager = PricingDataManager(store=JsonGraphStore(), model_repo=model_repo)
    try:
        await start_web(data_manager)
    finally:
        await data_manager.close()
        if database is not None:
            await database.close()


def main() -> None:
    setup_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
