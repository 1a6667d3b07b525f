"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from meal_lens.api.meals import router as meals_router
from meal_lens.api.submissions import router as submissions_router
from meal_lens.app_logging import configure_logging
from meal_lens.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        meals = app.state.container.meal_store.load()
        logger.info("Loaded %s stored meals", len(meals))
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Meal Lens", lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(submissions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
