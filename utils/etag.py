import hashlib
from typing import Union
from fastapi import Request, Response

from services.negotiation import RenderedDocument

CACHE_CONTROL = 'private, max-age=0, must-revalidate'


def generate_etag(data: Union[RenderedDocument, bytes]) -> str:
    """
    Generate an ETag from the serialized document body.

    Rendering is deterministic, so an unchanged entity graph always yields
    the same ETag for a given convention.
    """
    body = data.body if isinstance(data, RenderedDocument) else data
    etag_hash = hashlib.md5(body).hexdigest()
    return f'"{etag_hash}"'


def check_etag_match(request: Request, current_etag: str) -> bool:
    """
    Check if the ETag in the If-None-Match header matches the current ETag.

    Returns True if they match (meaning the client has the current version).
    """
    if_none_match = request.headers.get('if-none-match')
    if not if_none_match:
        return False

    # Handle multiple ETags in the header (comma-separated)
    client_etags = [etag.strip() for etag in if_none_match.split(',')]

    # Check for wildcard or exact match
    return '*' in client_etags or current_etag in client_etags


def set_etag_headers(response: Response, etag: str) -> None:
    """
    Set ETag and Cache-Control headers on the response.
    """
    response.headers['ETag'] = etag
    response.headers['Cache-Control'] = CACHE_CONTROL


def handle_conditional_request(request: Request, data: Union[RenderedDocument, bytes]) -> tuple[str, bool]:
    """
    Handle conditional requests with ETag support.

    Returns:
        tuple: (etag, should_return_304)
            - etag: The generated ETag for the data
            - should_return_304: True if should return 304 Not Modified
    """
    current_etag = generate_etag(data)

    if check_etag_match(request, current_etag):
        return current_etag, True

    return current_etag, False
