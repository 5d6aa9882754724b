from __future__ import annotations

from typing import Collection, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.catalog import (
    Customer,
    CustomerRead,
    Item,
    ItemRead,
    Order,
    OrderRead,
)
from models.resource import Cardinality, Entity


# -----------------------------------------------------------------------------
# Row -> Entity mapping
# -----------------------------------------------------------------------------
def customer_entity(customer: Customer) -> Entity:
    return Entity(
        type="customer",
        id=customer.id,
        attributes=CustomerRead.model_validate(customer).model_dump(mode="json"),
    )

def order_entity(order: Order) -> Entity:
    return Entity(
        type="order",
        id=order.id,
        attributes=OrderRead.model_validate(order).model_dump(mode="json"),
    )

def item_entity(item: Item) -> Entity:
    return Entity(
        type="item",
        id=item.id,
        attributes=ItemRead.model_validate(item).model_dump(mode="json"),
    )


# -----------------------------------------------------------------------------
# Queries
# -----------------------------------------------------------------------------
async def _items_of(db: AsyncSession, order_id: int) -> List[Item]:
    result = await db.execute(
        select(Item).where(Item.order_id == order_id).order_by(Item.id)
    )
    return list(result.scalars().all())

async def _orders_of(db: AsyncSession, customer_id: int) -> List[Order]:
    result = await db.execute(
        select(Order).where(Order.customer_id == customer_id).order_by(Order.id)
    )
    return list(result.scalars().all())


# -----------------------------------------------------------------------------
# Entity graphs
# -----------------------------------------------------------------------------
async def order_graph(db: AsyncSession, order: Order, include: Collection[str] = ()) -> Entity:
    """An order with its customer and items, embedding the relations named in `include`."""
    customer = await db.get(Customer, order.customer_id) if order.customer_id is not None else None
    items = await _items_of(db, order.id)

    entity = order_entity(order)
    entity.add_relation(
        "customer",
        Cardinality.TO_ONE,
        [customer_entity(customer)] if customer else [],
        embed="customer" in include,
    )
    entity.add_relation(
        "items",
        Cardinality.TO_MANY,
        [item_graph(item, order) for item in items],
        embed="items" in include,
    )
    return entity

def item_graph(item: Item, order: Optional[Order], include: Collection[str] = ()) -> Entity:
    entity = item_entity(item)
    entity.add_relation(
        "order",
        Cardinality.TO_ONE,
        [order_entity(order)] if order else [],
        embed="order" in include,
    )
    return entity

async def customer_graph(db: AsyncSession, customer: Customer, include: Collection[str] = ()) -> Entity:
    orders = await _orders_of(db, customer.id)

    entity = customer_entity(customer)
    entity.add_relation(
        "orders",
        Cardinality.TO_MANY,
        [order_entity(order) for order in orders],
        embed="orders" in include,
    )
    return entity


async def load_order(db: AsyncSession, order_id: int, include: Collection[str] = ()) -> Optional[Entity]:
    order = await db.get(Order, order_id)
    if order is None:
        return None
    return await order_graph(db, order, include)

async def load_orders(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    include: Collection[str] = (),
) -> List[Entity]:
    result = await db.execute(select(Order).order_by(Order.id).offset(skip).limit(limit))
    return [await order_graph(db, order, include) for order in result.scalars().all()]

async def load_order_items(db: AsyncSession, order_id: int, include: Collection[str] = ()) -> Optional[List[Entity]]:
    order = await db.get(Order, order_id)
    if order is None:
        return None
    return [item_graph(item, order, include) for item in await _items_of(db, order.id)]

async def load_order_customer(db: AsyncSession, order_id: int, include: Collection[str] = ()) -> Optional[Entity]:
    order = await db.get(Order, order_id)
    if order is None or order.customer_id is None:
        return None
    customer = await db.get(Customer, order.customer_id)
    if customer is None:
        return None
    return await customer_graph(db, customer, include)

async def load_item(db: AsyncSession, item_id: int, include: Collection[str] = ()) -> Optional[Entity]:
    item = await db.get(Item, item_id)
    if item is None:
        return None
    order = await db.get(Order, item.order_id)
    return item_graph(item, order, include)

async def load_item_order(db: AsyncSession, item_id: int, include: Collection[str] = ()) -> Optional[Entity]:
    item = await db.get(Item, item_id)
    if item is None:
        return None
    order = await db.get(Order, item.order_id)
    if order is None:
        return None
    return await order_graph(db, order, include)

async def load_customer(db: AsyncSession, customer_id: int, include: Collection[str] = ()) -> Optional[Entity]:
    customer = await db.get(Customer, customer_id)
    if customer is None:
        return None
    return await customer_graph(db, customer, include)

async def load_customer_orders(
    db: AsyncSession,
    customer_id: int,
    include: Collection[str] = (),
) -> Optional[List[Entity]]:
    customer = await db.get(Customer, customer_id)
    if customer is None:
        return None
    return [await order_graph(db, order, include) for order in await _orders_of(db, customer.id)]
