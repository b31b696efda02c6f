"""Pydantic schemas for user settings."""

from decimal import Decimal

from pydantic import BaseModel, Field


class UserSettings(BaseModel):
    """Trade form defaults.

    ``gst_percent`` is applied to brokerage on every trade.
    """

    unit_price_auto_fill: bool = True
    gst_percent: Decimal = Field(default=Decimal("10"), ge=0)
    brokerage_auto_fill: Decimal | None = None
