from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from services.database import get_db
from services.catalog import (
    load_order,
    load_orders,
    load_order_items,
    load_order_customer,
)
from utils.hateoas import (
    hypermedia_response,
    hypermedia_collection_response,
    parse_include,
)


router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
)


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_class=Response, status_code=200, name="list_orders")
async def list_orders(
    request: Request,
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of records to return"),
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
):
    """List orders as a hypermedia collection"""
    orders = await load_orders(db, skip=skip, limit=limit, include=parse_include(include))
    return hypermedia_collection_response(request, orders, rel="orders")


@router.get("/{order_id}", response_class=Response, status_code=200, name="get_order")
async def get_order(
    request: Request,
    order_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific order with links to its customer and items (ETag support)"""
    order = await load_order(db, order_id, include=parse_include(include))
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    return hypermedia_response(request, order)


@router.get("/{order_id}/items", response_class=Response, status_code=200, name="list_order_items")
async def list_order_items(
    request: Request,
    order_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Items of an order as a hypermedia collection"""
    items = await load_order_items(db, order_id, include=parse_include(include))
    if items is None:
        raise HTTPException(status_code=404, detail="Order not found")

    return hypermedia_collection_response(request, items, rel="items")


@router.get("/{order_id}/customer", response_class=Response, status_code=200, name="get_order_customer")
async def get_order_customer(
    request: Request,
    order_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Customer who placed an order"""
    customer = await load_order_customer(db, order_id, include=parse_include(include))
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    return hypermedia_response(request, customer)
