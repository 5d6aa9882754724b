from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from services.database import get_db
from services.catalog import load_customer, load_customer_orders
from utils.hateoas import (
    hypermedia_response,
    hypermedia_collection_response,
    parse_include,
)


router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("/{customer_id}", response_class=Response, status_code=200, name="get_customer")
async def get_customer(
    request: Request,
    customer_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific customer with a link to their orders"""
    customer = await load_customer(db, customer_id, include=parse_include(include))
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    return hypermedia_response(request, customer)


@router.get("/{customer_id}/orders", response_class=Response, status_code=200, name="list_customer_orders")
async def list_customer_orders(
    request: Request,
    customer_id: int,
    include: Optional[str] = Query(None, description="Comma-separated relations to embed"),
    db: AsyncSession = Depends(get_db),
):
    """Orders placed by a customer"""
    orders = await load_customer_orders(db, customer_id, include=parse_include(include))
    if orders is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    return hypermedia_collection_response(request, orders, rel="orders")
