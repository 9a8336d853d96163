"""
schemas/window.py
-----------------
Inclusive calendar-date window. Serialises as {"start": "YYYY-MM-DD",
"end": "YYYY-MM-DD"}.
"""

import datetime
from enum import Enum

from pydantic import BaseModel, model_validator


class WindowKind(str, Enum):
    today = "today"
    this_week = "this_week"
    month_to_date = "month_to_date"
    full_month = "full_month"
    custom = "custom"


class DateWindow(BaseModel):
    start: datetime.date
    end: datetime.date

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError("window start must not be after its end")
        return self

    def contains(self, day: datetime.date) -> bool:
        return self.start <= day <= self.end

    def span(self, *days: datetime.date) -> "DateWindow":
        """Smallest window covering this one and every given day."""
        return DateWindow(
            start=min((self.start, *days)),
            end=max((self.end, *days)),
        )
