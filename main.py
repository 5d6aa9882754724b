from __future__ import annotations

import logging
import os
import socket
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import Query, Path

from models.health import Health
from models.hateoas import LinkTemplates
from routers import (
    customers,
    items,
    orders,
)
from config.settings import settings

from services.database import init_db, close_db
from services.links import LinkResolver, load_link_templates
from services.negotiation import Convention, default_registry, MEDIA_TYPES
from utils.errors import MalformedGraph, UnresolvedRelation, UnsupportedConvention

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

port = int(os.environ.get("FASTAPIPORT", 8000))


# -----------------------------------------------------------------------------
# Health endpoints
# -----------------------------------------------------------------------------

def make_health(echo: Optional[str], path_echo: Optional[str]=None) -> Health:
    return Health(
        status=200,
        status_message="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        ip_address=socket.gethostbyname(socket.gethostname()),
        echo=echo,
        path_echo=path_echo,
        conventions=list(MEDIA_TYPES.values()),
    )

def get_health_no_path(echo: str | None = Query(None, description="Optional echo string")):
    # Works because path_echo is optional in the model
    return make_health(echo=echo, path_echo=None)

def get_health_with_path(
    path_echo: str = Path(..., description="Required echo in the URL path"),
    echo: str | None = Query(None, description="Optional echo string"),
):
    return make_health(echo=echo, path_echo=path_echo)


# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------

async def unsupported_convention_handler(request: Request, exc: UnsupportedConvention):
    return JSONResponse(
        status_code=406,
        content={"detail": str(exc), "supported": list(MEDIA_TYPES.values())},
    )

async def server_fault_handler(request: Request, exc: Exception):
    # Incomplete routing table or a graph the collaborator built wrongly
    logger.error("Failed to build hypermedia document for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------

def create_app(
    link_templates: Optional[LinkTemplates] = None,
    init_database: bool = True,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            await init_db()
        yield
        if init_database:
            await close_db()

    app = FastAPI(
        title="Hypermedia Catalog API",
        description="Catalog service rendering HAL and JSON-Graph hypermedia documents.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routing-template table is loaded once and shared read-only
    if link_templates is None:
        link_templates = load_link_templates(settings.LINK_TEMPLATES_FILE)
    app.state.link_resolver = LinkResolver(link_templates)
    app.state.builders = default_registry(app.state.link_resolver)
    app.state.default_convention = Convention.parse(settings.DEFAULT_CONVENTION)
    app.state.embed_depth = settings.EMBED_DEPTH

    app.add_exception_handler(UnsupportedConvention, unsupported_convention_handler)
    app.add_exception_handler(UnresolvedRelation, server_fault_handler)
    app.add_exception_handler(MalformedGraph, server_fault_handler)

    app.add_api_route("/health", get_health_no_path, methods=["GET"], response_model=Health)
    app.add_api_route("/health/{path_echo}", get_health_with_path, methods=["GET"], response_model=Health)

    # -------------------------------------------------------------------------
    # Routers to public RESTful resources
    # -------------------------------------------------------------------------
    app.include_router(router=customers.router)
    app.include_router(router=orders.router)
    app.include_router(router=items.router)

    @app.get("/")
    def root():
        return {"message": "Welcome to the Hypermedia Catalog API. See /docs for OpenAPI UI."}

    return app


app = create_app()

# -----------------------------------------------------------------------------
# Entrypoint for `python main.py`
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
