"""SQLAlchemy models representing fitcart persistence tables."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base class for fitcart ORM models."""


class ShoppingListORM(Base):
    """Monthly shopping list owned by one user."""

    __tablename__ = "shopping_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    budget: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    warn_pct: Mapped[float] = mapped_column(Float, nullable=False, default=0.8)
    error_pct: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    notify: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    items: Mapped[list["ShoppingListItemORM"]] = relationship(
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItemORM.position",
    )

    __table_args__ = (Index("ix_shopping_lists_user_period", "user_id", "year", "month"),)


class ShoppingListItemORM(Base):
    """Item embedded in a shopping list, ordered by ``position``."""

    __tablename__ = "shopping_list_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    qty: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    unit: Mapped[str] = mapped_column(String(64), nullable=False, default="un")
    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    planned_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    purchased_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    purchased: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    store: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_history: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    shopping_list: Mapped[ShoppingListORM] = relationship(back_populates="items")


__all__ = [
    "Base",
    "ShoppingListORM",
    "ShoppingListItemORM",
]
