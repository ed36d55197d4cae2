import datetime
import uuid
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer, field_validator, model_validator

from subscriptions_svc.cost_calculator import format_month, parse_month

# Accepts MM-YYYY (or YYYY-MM-DD) and normalizes to the first day of the month.
Month = Annotated[datetime.date, BeforeValidator(parse_month)]

# Prices are stored in a 32-bit INTEGER column.
MAX_PRICE = 2**31 - 1


class SubscriptionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    service_name: str = Field(min_length=1, max_length=255)
    price: int = Field(ge=0, le=MAX_PRICE)
    user_id: uuid.UUID
    start_date: Month = Field(description="Format: MM-YYYY")
    end_date: Optional[Month] = Field(default=None, description="Format: MM-YYYY")

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SubscriptionUpdate(BaseModel):
    """Partial update: only the fields present in the request are applied.

    An explicit null end_date makes the subscription open-ended.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    service_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    start_date: Optional[Month] = None
    end_date: Optional[Month] = None

    @field_validator("service_name", "price", "start_date")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: datetime.date
    end_date: Optional[datetime.date] = None

    @field_serializer("start_date", "end_date")
    def serialize_month(self, value: Optional[datetime.date]):
        return format_month(value) if value is not None else None


class SubscriptionCreated(BaseModel):
    id: uuid.UUID


class TotalCostOut(BaseModel):
    total_cost: int
