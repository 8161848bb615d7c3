"""Quotation API routes (owner-only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.quotation import (
    QuotationCreate,
    QuotationRead,
    QuotationStatus,
    QuotationUpdate,
)
from turma.services.quotation_service import (
    create_quotation,
    delete_quotation,
    get_quotation,
    list_quotations,
    update_quotation,
)

router = APIRouter()


@router.get("", response_model=list[QuotationRead])
def api_list_quotations(
    status: QuotationStatus | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[QuotationRead]:
    return list_quotations(db, current_user.id, status=status)


@router.post("", response_model=QuotationRead, status_code=201)
def api_create_quotation(
    data: QuotationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> QuotationRead:
    """Create a quotation; number and totals are computed server-side."""
    return create_quotation(db, data, current_user.id)


@router.get("/{quotation_id}", response_model=QuotationRead)
def api_get_quotation(
    quotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> QuotationRead:
    return get_quotation(db, quotation_id, current_user.id)


@router.put("/{quotation_id}", response_model=QuotationRead)
def api_update_quotation(
    quotation_id: int,
    data: QuotationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> QuotationRead:
    return update_quotation(db, quotation_id, data, current_user.id)


@router.delete("/{quotation_id}", status_code=204)
def api_delete_quotation(
    quotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    delete_quotation(db, quotation_id, current_user.id)
