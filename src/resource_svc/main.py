"""FastAPI entry point for the resource catalog.

Start with:
    PYTHONPATH=src uvicorn resource_svc.main:app --host 0.0.0.0 --port 4000

or via the ``resource-svc`` console script, which reads host and port from
the config file.

Endpoints:
- GET /resources  — query resources by optional id, name and resourceType
- GET /health     — liveness and configured store backend
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from . import _bootstrap as bs
from .catalog.filters import ResourceQuery
from .errors import ResourceCatalogError, StoreUnavailable
from .service import ResourceCatalogService

logger = logging.getLogger(__name__)

# How often an in-flight query checks whether its caller has gone away
DISCONNECT_POLL_SECONDS = 0.25


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and query service from config."""
    logger.info("Starting resource catalog service...")

    config, config_path = bs.load_config()
    store = bs.build_store(config, config_path)
    app.state.config = config
    app.state.store = store
    app.state.service = bs.build_service(config, store)

    logger.info(
        "Resource catalog service started (store=%s, policy=%s)",
        store.backend, config.query.resolution_policy.value,
    )
    yield

    await store.close()
    logger.info("Resource catalog service stopped")


app = FastAPI(
    title="Resource Catalog",
    description="Read-only queries over storage and compute resource records.",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Resources", "description": "Resource catalog queries"},
        {"name": "Health", "description": "Liveness"},
    ],
)


def get_service(request: Request) -> ResourceCatalogService:
    """FastAPI dependency returning the service built during startup."""
    return request.app.state.service


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(ResourceCatalogError)
async def catalog_error_handler(request: Request, exc: ResourceCatalogError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


async def _run_until_disconnect(request: Request, coro):
    """Await ``coro``, cancelling it if the client disconnects first.

    Returns ``(finished, result)``.
    """
    task = asyncio.ensure_future(coro)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return True, task.result()
            if await request.is_disconnected():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                return False, None
    finally:
        # Covers the handler itself being cancelled mid-wait
        if not task.done():
            task.cancel()


@app.get("/resources", tags=["Resources"])
async def list_resources(
    request: Request,
    service: Annotated[ResourceCatalogService, Depends(get_service)],
    id: Annotated[str | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
    resource_type: Annotated[str | None, Query(alias="resourceType")] = None,
):
    """Query resources. All parameters are optional; none returns everything."""
    query = ResourceQuery(id=id, name=name, resource_type=resource_type)

    finished, resources = await _run_until_disconnect(request, service.query(query))
    if not finished:
        logger.info("Client disconnected, resource query cancelled")
        # 499: client closed request (nginx convention); never seen by the caller
        return Response(status_code=499)

    return [resource.to_dict() for resource in resources]


@app.get("/health", tags=["Health"])
async def health(request: Request):
    return {"status": "ok", "store": request.app.state.store.backend}


def main():
    import uvicorn

    config, _ = bs.load_config()
    bs.configure_logging(config.logging.level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
