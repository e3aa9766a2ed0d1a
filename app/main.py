"""Entry point for the FastAPI service feeding the catalog front end."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .projector import project_search, project_view
from .services.catalog_client import CatalogClient
from .services.controller import CatalogController

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=settings.catalog_api_url,
            timeout=httpx.Timeout(
                settings.request_timeout_seconds,
                connect=settings.connect_timeout_seconds,
            ),
        )
    )
    controller = CatalogController(CatalogClient(settings, http_client))
    fastapi_app.state.controller = controller
    if settings.load_on_startup:
        controller.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await controller.stop()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Popular movies, TV shows and people with title search",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_controller(fastapi_app: FastAPI) -> CatalogController:
    controller = getattr(fastapi_app.state, "controller", None)
    if not isinstance(controller, CatalogController):
        raise RuntimeError("Catalog controller not initialised")
    return controller


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/view")
    async def view() -> dict[str, Any]:
        controller = get_controller(fastapi_app)
        return project_view(controller.state)

    @fastapi_app.post("/api/reload")
    async def reload() -> dict[str, Any]:
        controller = get_controller(fastapi_app)
        state = await controller.reload()
        return project_view(state)

    @fastapi_app.get("/api/search")
    async def search(query: str = Query(default="")) -> dict[str, Any]:
        if not query.strip():
            raise HTTPException(status_code=400, detail="Search query must not be empty")
        controller = get_controller(fastapi_app)
        search_state = await controller.search(query)
        return project_search(search_state)


app = create_app()
