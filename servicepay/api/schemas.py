"""Pydantic schemas for the dashboard API."""

import re
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from servicepay.models.bill import BillStatus
from servicepay.models.service_account import ServiceCategory, ServiceProvider

ACCOUNT_NUMBER_PATTERN = re.compile(r"^[0-9A-Za-z\-]+$")


class AddServicePayload(BaseModel):
    """Request payload for POST /api/dashboard/services."""

    provider: ServiceProvider = Field(..., description="Utility company")
    account_number: str = Field(
        ..., alias="accountNumber", description="Utility-assigned account number"
    )
    alias: str | None = Field(None, description="Optional label, e.g. 'Home' or 'Office'")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("account_number")
    @classmethod
    def validate_account_number(cls, value: str) -> str:
        if not value:
            raise ValueError("Account number is required")
        if not ACCOUNT_NUMBER_PATTERN.fullmatch(value):
            raise ValueError("Account number must be alphanumeric")
        return value

    @field_validator("alias")
    @classmethod
    def blank_alias_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class BillResponse(BaseModel):
    """One month of the active period."""

    month: int
    year: int
    status: BillStatus
    amount: Decimal | None
    month_name: str
    label: str

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal | None) -> str | None:
        return f"{amount:.2f}" if amount is not None else None


class ServiceSummaryResponse(BaseModel):
    """Active period, its bills and the debt owed for one account."""

    account_id: str
    provider: ServiceProvider
    provider_name: str
    category: ServiceCategory
    icon: str
    account_number: str
    alias: str | None
    active_year: int
    total_debt: Decimal
    bills: list[BillResponse]

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("total_debt")
    def serialize_total_debt(self, total_debt: Decimal) -> str:
        return f"{total_debt:.2f}"


class ServicesResponse(BaseModel):
    """Response schema for the services list endpoint."""

    services: list[ServiceSummaryResponse]
    total_count: int
