"""
Currency schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from pydantic import Field

from app.schemas.base import BaseSchema


class DolarBlueResponse(BaseSchema):
    buy: Decimal
    sell: Decimal
    updated_at: datetime | None = None
    source: Literal["live", "cache", "fallback"]


class ExchangeRateResponse(BaseSchema):
    usd_to_ars_rate: Decimal
    default_markup_percentage: Decimal


class ExchangeRateUpdate(BaseSchema):
    usd_to_ars_rate: Decimal = Field(..., gt=0)
