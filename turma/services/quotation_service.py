"""Quotation service: user-owned price quotes with computed totals."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from turma.models import Quotation, QuotationItem
from turma.schemas.quotation import (
    ClientInfo,
    QuotationCreate,
    QuotationItemInput,
    QuotationItemRead,
    QuotationRead,
    QuotationUpdate,
)
from turma.services.authorization import authorize_by_ownership

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

_CLIENT_COLUMNS = {
    "name": "client_name",
    "email": "client_email",
    "phone": "client_phone",
    "company": "client_company",
    "address": "client_address",
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(
    items: Sequence[QuotationItemInput],
    tax_rate: Decimal,
    discount_rate: Decimal,
) -> tuple[list[Decimal], Decimal, Decimal, Decimal, Decimal]:
    """Return (line totals, subtotal, tax, discount, total).

    Tax and discount are percentages of the subtotal:
    total = subtotal + tax - discount.
    """
    line_totals = [_money(item.quantity * item.unit_price) for item in items]
    subtotal = sum(line_totals, Decimal("0"))
    tax = _money(subtotal * tax_rate / HUNDRED)
    discount = _money(subtotal * discount_rate / HUNDRED)
    return line_totals, subtotal, tax, discount, subtotal + tax - discount


def next_quotation_number(db: Session, user_id: int, issue_date: date) -> str:
    """Next Q-YYYYMMDD-NNNN number for this user and day."""
    prefix = f"Q-{issue_date:%Y%m%d}-"
    existing = (
        db.query(Quotation.number)
        .filter(Quotation.user_id == user_id, Quotation.number.like(f"{prefix}%"))
        .all()
    )
    highest = 0
    for (number,) in existing:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


def _apply_items(
    quotation: Quotation,
    items: Sequence[QuotationItemInput],
    tax_rate: Decimal,
    discount_rate: Decimal,
) -> None:
    line_totals, subtotal, tax, discount, total = compute_totals(items, tax_rate, discount_rate)
    quotation.items = [
        QuotationItem(
            position=position,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total=line_total,
        )
        for position, (item, line_total) in enumerate(zip(items, line_totals))
    ]
    quotation.tax_rate = tax_rate
    quotation.discount_rate = discount_rate
    quotation.subtotal = subtotal
    quotation.tax = tax
    quotation.discount = discount
    quotation.total = total


def _apply_client(quotation: Quotation, client: ClientInfo) -> None:
    for field, column in _CLIENT_COLUMNS.items():
        setattr(quotation, column, getattr(client, field))


def _model_to_read(quotation: Quotation) -> QuotationRead:
    """Map ORM Quotation to QuotationRead."""
    return QuotationRead(
        id=quotation.id,
        user_id=quotation.user_id,
        title=quotation.title,
        number=quotation.number,
        status=quotation.status,
        issue_date=quotation.issue_date,
        valid_until=quotation.valid_until,
        client=ClientInfo(
            name=quotation.client_name,
            email=quotation.client_email,
            phone=quotation.client_phone,
            company=quotation.client_company,
            address=quotation.client_address,
        ),
        items=[QuotationItemRead.model_validate(item) for item in quotation.items],
        tax_rate=quotation.tax_rate,
        discount_rate=quotation.discount_rate,
        subtotal=quotation.subtotal,
        tax=quotation.tax,
        discount=quotation.discount,
        total=quotation.total,
        notes=quotation.notes,
        terms=quotation.terms,
        created_at=quotation.created_at,
        updated_at=quotation.updated_at,
    )


def _load_owned(db: Session, quotation_id: int, user_id: int) -> Quotation:
    quotation = db.get(Quotation, quotation_id)
    authorize_by_ownership(quotation, user_id).enforce()
    return quotation


def list_quotations(db: Session, user_id: int, status: str | None = None) -> list[QuotationRead]:
    query = db.query(Quotation).filter(Quotation.user_id == user_id)
    if status:
        query = query.filter(Quotation.status == status)
    quotations = query.order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()
    return [_model_to_read(q) for q in quotations]


def get_quotation(db: Session, quotation_id: int, user_id: int) -> QuotationRead:
    return _model_to_read(_load_owned(db, quotation_id, user_id))


def create_quotation(db: Session, data: QuotationCreate, user_id: int) -> QuotationRead:
    issue_date = data.issue_date or date.today()
    quotation = Quotation(
        user_id=user_id,
        title=data.title,
        number=next_quotation_number(db, user_id, issue_date),
        status=data.status,
        issue_date=issue_date,
        valid_until=data.valid_until,
        notes=data.notes,
        terms=data.terms,
    )
    _apply_client(quotation, data.client)
    _apply_items(quotation, data.items, data.tax_rate, data.discount_rate)
    db.add(quotation)
    db.commit()
    db.refresh(quotation)
    logger.info("quotation created: id=%s number=%s", quotation.id, quotation.number)
    return _model_to_read(quotation)


def update_quotation(
    db: Session, quotation_id: int, data: QuotationUpdate, user_id: int
) -> QuotationRead:
    """Partial update. Totals are recomputed whenever items or rates change."""
    quotation = _load_owned(db, quotation_id, user_id)
    changes = data.model_dump(
        exclude_unset=True, exclude={"client", "items", "tax_rate", "discount_rate"}
    )
    for field, value in changes.items():
        if value is not None or field in ("valid_until", "notes", "terms"):
            setattr(quotation, field, value)

    if data.client is not None:
        _apply_client(quotation, data.client)

    if data.items is not None or data.tax_rate is not None or data.discount_rate is not None:
        items = data.items
        if items is None:
            items = [
                QuotationItemInput(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in quotation.items
            ]
        _apply_items(
            quotation,
            items,
            data.tax_rate if data.tax_rate is not None else quotation.tax_rate,
            data.discount_rate if data.discount_rate is not None else quotation.discount_rate,
        )

    db.commit()
    db.refresh(quotation)
    return _model_to_read(quotation)


def delete_quotation(db: Session, quotation_id: int, user_id: int) -> None:
    quotation = _load_owned(db, quotation_id, user_id)
    db.delete(quotation)
    db.commit()
