"""
schemas/orders.py
-----------------
Read-only projections produced by the order fetcher.

OrderRow is the explicit shape of an order joined with its lunch option and
its company's subsidy settings. Both enrichments are optional: the lunch
option may have been deleted, and the aggregator must still count the order.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from mealstats.models.order import OrderStatus


class SubsidyConfig(BaseModel):
    percentage: float = 0.0
    fixed_amount: float = 0.0

    model_config = {"frozen": True}


class LunchOptionRef(BaseModel):
    id: str
    name: str
    price: float = Field(default=0.0)

    model_config = {"frozen": True}


class OrderRow(BaseModel):
    id: str
    company_id: str
    user_id: str
    date: datetime.date
    status: OrderStatus
    lunch_option: Optional[LunchOptionRef] = None
    subsidy: Optional[SubsidyConfig] = None

    model_config = {"frozen": True}
