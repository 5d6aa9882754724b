from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import String, DateTime, ForeignKey, Integer, Float, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class OrderStatus(PyEnum):
    """Lifecycle of an order"""
    OPEN = "open"               # Items may still be added
    PLACED = "placed"           # Submitted by the customer
    SHIPPED = "shipped"         # Handed over to the carrier
    CANCELLED = "cancelled"     # Withdrawn before shipping


# -----------------------------------------------------------------------------
# SQLAlchemy Models
# -----------------------------------------------------------------------------
class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(512), nullable=True, index=True)


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus),
        default=OrderStatus.OPEN,
        nullable=False
    )
    total: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )


class Item(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    sku: Mapped[str] = mapped_column(String(64), nullable=False)
    qty: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    price: Mapped[float] = mapped_column(Float, default=0, nullable=False)


# -----------------------------------------------------------------------------
# Pydantic Schemas (entity attributes)
# -----------------------------------------------------------------------------
class CustomerRead(BaseModel):
    name: str = Field(
        ...,
        description="Display name of the customer"
    )
    email: Optional[str] = Field(
        None,
        description="Contact email address"
    )

    model_config = ConfigDict(from_attributes=True)

class OrderRead(BaseModel):
    status: OrderStatus = Field(
        ...,
        description="Current status of the order"
    )
    total: float = Field(
        ...,
        description="Order total in the shop currency"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Timestamp when the order was created"
    )

    model_config = ConfigDict(from_attributes=True)

class ItemRead(BaseModel):
    sku: str = Field(
        ...,
        description="Stock keeping unit of the ordered product"
    )
    qty: int = Field(
        ...,
        description="Ordered quantity"
    )
    price: float = Field(
        ...,
        description="Unit price"
    )

    model_config = ConfigDict(from_attributes=True)
