"""
schemas/pricing.py
------------------
Subsidised price models shared by revenue aggregation and the employee-facing
price preview.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class PriceBreakdown(BaseModel):
    payable: float   # what the employee pays
    covered: float   # what the company pays

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}


class PricePreview(BaseModel):
    lunch_option_id: str
    company_id: str
    name: str
    base_price: float
    payable: float
    covered: float

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
