from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from services.database import get_db
from services.catalog import load_item, load_item_order
from utils.hateoas import hypermedia_response, parse_include


router = APIRouter(
    prefix="/items",
    tags=["Items"],
)


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("/{item_id}", response_class=Response, status_code=200, name="get_item")
async def get_item(
    request: Request,
    item_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific order item"""
    item = await load_item(db, item_id, include=parse_include(include))
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")

    return hypermedia_response(request, item)


@router.get("/{item_id}/order", response_class=Response, status_code=200, name="get_item_order")
async def get_item_order(
    request: Request,
    item_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Order an item belongs to"""
    order = await load_item_order(db, item_id, include=parse_include(include))
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    return hypermedia_response(request, order)
