"""
models/order.py
---------------
Order ORM model: one employee's meal for one calendar date.

Lifecycle (driven by the ordering / approval flows, not by this service):
  pending → approved | rejected          (supervisor)
  approved → prepared → delivered        (provider)

lunch_option_id is nullable: deleting a lunch option keeps its historical
orders, which then count toward raw totals but not toward revenue.
"""

import datetime
from enum import Enum as PyEnum

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from mealstats.db.base import Base, TimestampMixin, generate_uuid


class OrderStatus(str, PyEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    prepared = "prepared"
    delivered = "delivered"


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lunch_option_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("lunch_options.id", ondelete="SET NULL"),
        nullable=True,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.pending.value, index=True
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} date={self.date} status={self.status}>"
