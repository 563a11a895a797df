"""FastAPI application entrypoint for Lumen."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from lumen.libs.logging_utils import colorize, configure_logging

configure_logging()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette_exporter import PrometheusMiddleware, handle_metrics

from lumen.apps.api.core.db import close_pool
from lumen.apps.api.middleware import RequestLoggingMiddleware
from lumen.apps.api.routes.correlations import router as correlations_router
from lumen.apps.api.routes.personality_evolution import router as personality_evolution_router
from lumen.apps.api.routes.recaps import router as recaps_router
from lumen.libs.json_utils import render_json
from lumen.libs.schemas import get_settings

LOGGER = logging.getLogger(__name__)
SETTINGS = get_settings()

JSONResponse.render = lambda self, content: render_json(content)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    LOGGER.info(
        colorize("Lumen API starting", "cyan"),
        extra={"event": "startup", "environment": SETTINGS.environment},
    )
    try:
        yield
    finally:
        await close_pool()


app = FastAPI(title=f"{SETTINGS.app_name} API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_route("/metrics", handle_metrics)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(personality_evolution_router)
app.include_router(correlations_router)
app.include_router(recaps_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lumen.apps.api.main:app", host="0.0.0.0", port=8000, reload=True)
