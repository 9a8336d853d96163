"""
models/__init__.py
------------------
Re-export all models so Alembic's env.py (and create_tables.py) can import
Base and discover all tables via a single import:

    from mealstats.models import Base
"""

from mealstats.db.base import Base
from mealstats.models.provider import Provider
from mealstats.models.company import Company
from mealstats.models.lunch_option import LunchOption
from mealstats.models.order import Order, OrderStatus

__all__ = ["Base", "Provider", "Company", "LunchOption", "Order", "OrderStatus"]
