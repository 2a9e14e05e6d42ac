# src/narrative/main.py
"""
FastAPI application factory.

    uvicorn narrative.main:app
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api.responses import APIException
from .config import get_config
from .domains.engagements.api import router as engagements_router
from .domains.exchange.api import router as exchange_router
from .domains.markers.api import router as markers_router
from .domains.zones.api import router as zones_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Narrative Progress Engine", version=__version__, debug=config.debug)

    @app.exception_handler(APIException)
    async def handle_api_exception(request: Request, exc: APIException):
        return exc.to_response()

    @app.get("/health")
    async def health():
        return JSONResponse({
            "status": "ok",
            "environment": config.environment,
            "backend": config.backend,
            "version": __version__,
        })

    app.include_router(zones_router, prefix=config.api_prefix)
    app.include_router(markers_router, prefix=config.api_prefix)
    app.include_router(engagements_router, prefix=config.api_prefix)
    app.include_router(exchange_router, prefix=config.api_prefix)

    logger.info(f"🚀 Narrative engine ready ({config.environment}, backend={config.backend})")
    return app


app = create_app()
