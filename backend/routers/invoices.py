from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import sales_invoices as crud_invoices
from routers.production import parse_date_filter
from schemas.sales_invoices import SalesInvoice, SalesInvoiceCreate, SalesInvoiceUpdate
from utils.auth_utils import ensure_farm_access, get_current_user, get_user_identifier, scoped_farm_id
from utils.exceptions import FarmAccessError, FarmInactiveError, InvoiceNumberConflictError, ProductNotFoundError

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])
logger = logging.getLogger("invoices")

def _raise_for_domain_error(e: Exception):
    if isinstance(e, FarmAccessError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if isinstance(e, InvoiceNumberConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("", response_model=List[SalesInvoice])
def read_invoices(
    farm_id: Optional[int] = Query(None, alias="farmId"),
    date: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """List invoices, newest first. Non-admin users only see their own farm."""
    farm_filter = scoped_farm_id(user, farm_id)
    return crud_invoices.get_invoices(db, farm_id=farm_filter, date=parse_date_filter(date), limit=limit)

@router.get("/{invoice_id}", response_model=SalesInvoice)
def read_invoice(invoice_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_invoice = crud_invoices.get_invoice(db, invoice_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    ensure_farm_access(user, db_invoice.farm_id)
    return db_invoice

@router.post("", response_model=SalesInvoice, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice: SalesInvoiceCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_invoices.create_invoice(db, invoice, user)
    except (FarmAccessError, FarmInactiveError, ProductNotFoundError, InvoiceNumberConflictError) as e:
        _raise_for_domain_error(e)

@router.put("/{invoice_id}", response_model=SalesInvoice)
def update_invoice(
    invoice_id: int,
    invoice: SalesInvoiceUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_invoice = crud_invoices.get_invoice(db, invoice_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    ensure_farm_access(user, db_invoice.farm_id)

    try:
        return crud_invoices.update_invoice(db, invoice_id, invoice, user)
    except (FarmAccessError, FarmInactiveError, ProductNotFoundError) as e:
        _raise_for_domain_error(e)

@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_invoice = crud_invoices.get_invoice(db, invoice_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    ensure_farm_access(user, db_invoice.farm_id)

    if not crud_invoices.delete_invoice(db, invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    logger.info(f"Invoice {invoice_id} deleted by user {get_user_identifier(user)}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
