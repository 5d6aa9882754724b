from fastapi import Request, Response
from typing import Iterable, Optional, Set

from models.resource import Entity
from services.negotiation import BuilderRegistry, Convention, RenderedDocument, negotiate
from utils.etag import CACHE_CONTROL, handle_conditional_request, set_etag_headers


# -----------------------------------------------------------------------------
# Request helpers
# -----------------------------------------------------------------------------
def parse_include(include: Optional[str]) -> Set[str]:
    """Relation names from a comma-separated ?include= parameter."""
    if not include:
        return set()
    return {name.strip() for name in include.split(",") if name.strip()}

def request_convention(request: Request) -> Convention:
    return negotiate(request.headers.get("accept"), request.app.state.default_convention)

def request_href(request: Request) -> str:
    href = request.url.path
    if request.url.query:
        href += f"?{request.url.query}"
    return href


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
def _conditional_response(request: Request, rendered: RenderedDocument) -> Response:
    etag, should_return_304 = handle_conditional_request(request, rendered)

    if should_return_304:
        # Return 304 Not Modified
        return Response(
            status_code=304,
            headers={"ETag": etag, "Cache-Control": CACHE_CONTROL, "Vary": "Accept"},
        )

    response = Response(content=rendered.body, media_type=rendered.media_type)
    set_etag_headers(response, etag)
    response.headers["Vary"] = "Accept"
    return response

def hypermedia_response(request: Request, entity: Entity) -> Response:
    registry: BuilderRegistry = request.app.state.builders
    rendered = registry.render(
        entity,
        request_convention(request),
        depth=request.app.state.embed_depth,
    )
    return _conditional_response(request, rendered)

def hypermedia_collection_response(request: Request, entities: Iterable[Entity], rel: str) -> Response:
    registry: BuilderRegistry = request.app.state.builders
    rendered = registry.render_collection(
        entities,
        request_convention(request),
        self_href=request_href(request),
        rel=rel,
        depth=request.app.state.embed_depth,
    )
    return _conditional_response(request, rendered)
