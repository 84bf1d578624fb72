"""FastAPI application factory"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.adapter.services.catalog_loader import load_catalogs
from src.api.error import register_error_handlers
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes import admin, credits, plans

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the HTTP surface

    Catalogs are loaded here so a broken catalog file stops startup.

    Args:
        config: ApplicationConfig (or a subclass overriding its attributes)
    """
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Marketplace Credit Service",
        version="1.0.0",
        description="Credit ledger, activity pricing and plan lifecycle",
    )

    app.state.config = config
    app.state.activity_catalog, app.state.plan_catalog = load_catalogs(config.CATALOG_FILE_PATH)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(credits.router, prefix=config.API_PREFIX)
    app.include_router(plans.router, prefix=config.API_PREFIX)
    app.include_router(admin.router, prefix=config.API_PREFIX)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    logger.info("Marketplace Credit Service app created")
    return app
