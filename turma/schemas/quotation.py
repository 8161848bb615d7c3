"""Quotation schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

QuotationStatus = Literal["draft", "sent", "approved", "rejected", "expired"]


class ClientInfo(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=255)
    address: str | None = None


class QuotationItemInput(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)


class QuotationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    status: QuotationStatus = "draft"
    issue_date: date | None = None
    valid_until: date | None = None
    client: ClientInfo
    items: list[QuotationItemInput] = Field(..., min_length=1)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    discount_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    notes: str | None = None
    terms: str | None = None


class QuotationUpdate(BaseModel):
    """Partial update. ``items``, when given, replaces every line item."""

    title: str | None = Field(None, min_length=1, max_length=255)
    status: QuotationStatus | None = None
    issue_date: date | None = None
    valid_until: date | None = None
    client: ClientInfo | None = None
    items: list[QuotationItemInput] | None = Field(None, min_length=1)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    discount_rate: Decimal | None = Field(None, ge=0, le=100)
    notes: str | None = None
    terms: str | None = None


class QuotationItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


class QuotationRead(BaseModel):
    id: int
    user_id: int
    title: str
    number: str
    status: str
    issue_date: date
    valid_until: date | None
    client: ClientInfo
    items: list[QuotationItemRead]
    tax_rate: Decimal
    discount_rate: Decimal
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    notes: str | None
    terms: str | None
    created_at: datetime
    updated_at: datetime
